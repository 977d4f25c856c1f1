"""
登录认证控制器
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from admin_console.db.session import get_db
from admin_console.modules.system.schemas.auth import LoginModel, LoginTokenModel
from admin_console.modules.system.schemas.common import ResponseModel
from admin_console.modules.system.services.auth_service import AuthService


router = APIRouter(prefix="/auth", tags=["登录认证"])


@router.post("/login", response_model=ResponseModel[LoginTokenModel], summary="账号登录")
def login(
    request: Request,
    login_data: LoginModel,
    db: Session = Depends(get_db)
):
    """
    账号登录，返回访问令牌
    """
    client_ip = request.client.host if request.client else "unknown"
    return ResponseModel(data=AuthService.login(db, login_data, client_ip))
