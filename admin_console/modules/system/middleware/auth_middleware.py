"""
认证中间件
"""
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from admin_console.core.config import settings
from admin_console.core.exceptions import ApiException, ErrorCode, error_response
from admin_console.modules.system.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """全局认证中间件"""
    
    # 白名单路径 - 这些路径不需要认证
    WHITELIST_PATHS = [
        "/",
        "/docs",
        "/redoc", 
        "/openapi.json",
        f"{settings.API_V1_STR}/system/health",
        f"{settings.API_V1_STR}/system/version",
        f"{settings.API_V1_STR}/auth/login",
    ]
    
    # 白名单前缀 - 以这些前缀开头的路径不需要认证
    WHITELIST_PREFIXES = [
        "/docs",
        "/redoc",
    ]
    
    def __init__(self, app, enable_auth: bool = True):
        super().__init__(app)
        self.enable_auth = enable_auth
    
    async def dispatch(self, request: Request, call_next) -> Response:
        """处理请求"""
        
        if not self.enable_auth or request.method == "OPTIONS":
            return await call_next(request)
        
        if self._is_whitelisted(request.url.path):
            return await call_next(request)
        
        try:
            self._authenticate_request(request)
        except ApiException as e:
            logger.info(f"认证失败 {request.method} {request.url.path}: {e}")
            return error_response(e.code, e.msg, e.http_status)
        
        return await call_next(request)
    
    def _is_whitelisted(self, path: str) -> bool:
        """检查路径是否在白名单中"""
        if path in self.WHITELIST_PATHS:
            return True
        return any(path.startswith(prefix) for prefix in self.WHITELIST_PREFIXES)
    
    def _authenticate_request(self, request: Request) -> None:
        """认证请求"""
        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith("Bearer "):
            raise ApiException(ErrorCode.LOGIN_INVALID)
        
        token = authorization[7:].strip()
        if not token:
            raise ApiException(ErrorCode.LOGIN_INVALID)
        
        payload = AuthService.verify_token(token)
        
        # 将账号信息添加到请求状态中，供后续使用
        request.state.user_id = payload["uid"]
        request.state.password_version = payload.get("pv")
        request.state.token = token


def get_current_user_id(request: Request) -> int:
    """从请求中获取当前账号ID"""
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise ApiException(ErrorCode.LOGIN_INVALID)
    return user_id
