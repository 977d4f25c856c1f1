"""
登录认证相关的Pydantic模型
"""
from pydantic import BaseModel, Field


class LoginModel(BaseModel):
    """登录请求"""
    username: str = Field(..., min_length=1, description="登录账号")
    password: str = Field(..., min_length=1, description="密码")


class LoginTokenModel(BaseModel):
    """登录返回"""
    token: str = Field(..., description="访问令牌")
