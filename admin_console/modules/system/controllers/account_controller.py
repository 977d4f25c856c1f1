"""
个人账号控制器
"""
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from admin_console.db.session import get_db
from admin_console.modules.system.middleware import get_current_user_id
from admin_console.modules.system.schemas.common import ResponseModel
from admin_console.modules.system.schemas.user import (
    AccountInfoModel, UpdatePersonInfoModel, UpdatePasswordModel
)
from admin_console.modules.system.services.auth_service import AuthService
from admin_console.modules.system.services.user_service import UserService


router = APIRouter(prefix="/sys/account", tags=["个人账号"])


@router.get("/info", response_model=ResponseModel[AccountInfoModel], summary="获取个人信息")
def get_account_info(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    获取当前账号的个人信息
    """
    user_id = get_current_user_id(request)
    client_ip = request.client.host if request.client else None
    return ResponseModel(data=UserService.get_account_info(db, user_id, client_ip))


@router.post("/update", response_model=ResponseModel, summary="修改个人信息")
def update_person_info(
    request: Request,
    info: UpdatePersonInfoModel,
    db: Session = Depends(get_db)
):
    """
    修改当前账号的个人信息
    """
    UserService.update_person_info(db, get_current_user_id(request), info)
    return ResponseModel()


@router.post("/password", response_model=ResponseModel, summary="修改个人密码")
def update_password(
    request: Request,
    password_data: UpdatePasswordModel,
    db: Session = Depends(get_db)
):
    """
    修改当前账号的密码，修改后已签发的令牌失效
    """
    UserService.update_password(db, get_current_user_id(request), password_data)
    return ResponseModel()


@router.get("/perms", response_model=ResponseModel[List[str]], summary="获取权限标识")
def get_perms(request: Request):
    """
    获取当前账号缓存的权限标识
    """
    return ResponseModel(data=AuthService.get_cached_perms(get_current_user_id(request)))
