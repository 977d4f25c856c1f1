"""
账号管理控制器
"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from admin_console.db.session import get_db
from admin_console.modules.system.middleware import get_current_user_id
from admin_console.modules.system.schemas.common import ResponseModel, PageResultModel
from admin_console.modules.system.schemas.user import (
    CreateUserModel, UpdateUserModel, DeleteUserModel, PageSearchUserModel,
    PasswordUserModel, UserDetailModel, UserPageItemModel
)
from admin_console.modules.system.services.menu_service import MenuService
from admin_console.modules.system.services.user_service import UserService


router = APIRouter(prefix="/sys/data", tags=["账号管理"])


@router.post("/add", response_model=ResponseModel, summary="新增账号")
def add_user(
    user_data: CreateUserModel,
    db: Session = Depends(get_db)
):
    """
    新增账号，密码为系统初始密码
    """
    UserService.add_user(db, user_data)
    return ResponseModel()


@router.get("/info", response_model=ResponseModel[UserDetailModel], summary="查询账号详情")
def get_user_info(
    user_id: int = Query(..., alias="userId", ge=0, description="账号ID"),
    db: Session = Depends(get_db)
):
    """
    查询账号详情
    """
    return ResponseModel(data=UserService.get_user_info(db, user_id))


@router.post("/delete", response_model=ResponseModel, summary="删除账号")
def delete_users(
    delete_data: DeleteUserModel,
    db: Session = Depends(get_db)
):
    """
    删除账号，并使其会话失效
    """
    UserService.delete_users(db, delete_data.user_ids)
    UserService.multi_forbidden(delete_data.user_ids)
    return ResponseModel()


@router.post("/page", response_model=ResponseModel[PageResultModel[UserPageItemModel]], summary="分页查询账号")
def page_users(
    request: Request,
    query: PageSearchUserModel,
    db: Session = Depends(get_db)
):
    """
    分页查询账号，结果不含超级管理员与当前账号
    """
    user_id = get_current_user_id(request)
    return ResponseModel(data=UserService.page_users(db, user_id, query))


@router.post("/update", response_model=ResponseModel, summary="修改账号")
def update_user(
    user_data: UpdateUserModel,
    db: Session = Depends(get_db)
):
    """
    修改账号信息及角色，并刷新其权限缓存
    """
    UserService.update_user(db, user_data)
    MenuService.refresh_perms(db, user_data.id)
    return ResponseModel()


@router.post("/password", response_model=ResponseModel, summary="重置账号密码")
def force_update_password(
    password_data: PasswordUserModel,
    db: Session = Depends(get_db)
):
    """
    管理员重置账号密码
    """
    UserService.force_update_password(db, password_data.user_id, password_data.password)
    return ResponseModel()
