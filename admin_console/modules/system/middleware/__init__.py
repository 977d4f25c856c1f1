"""
认证中间件包
"""
from .auth_middleware import AuthMiddleware, get_current_user_id

__all__ = ["AuthMiddleware", "get_current_user_id"]
