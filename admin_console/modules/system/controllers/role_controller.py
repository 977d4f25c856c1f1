"""
角色管理控制器
"""
from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from admin_console.core.exceptions import ApiException, ErrorCode
from admin_console.db.session import get_db
from admin_console.modules.system.middleware import get_current_user_id
from admin_console.modules.system.schemas.common import ResponseModel, PageResultModel, PageOptionsModel
from admin_console.modules.system.schemas.role import (
    CreateRoleModel, UpdateRoleModel, DeleteRoleModel, RoleModel, RoleInfoModel, RoleIdModel
)
from admin_console.modules.system.services.menu_service import MenuService
from admin_console.modules.system.services.role_service import RoleService


router = APIRouter(prefix="/sys/roledata", tags=["角色管理"])


@router.get("/list", response_model=ResponseModel[List[RoleModel]], summary="获取角色列表")
def get_role_list(db: Session = Depends(get_db)):
    """
    获取除超级管理员外的全部角色（用于下拉选择）
    """
    return ResponseModel(data=RoleService.get_role_list(db))


@router.get("/page", response_model=ResponseModel[PageResultModel[RoleModel]], summary="分页查询角色")
def page_roles(
    page: int = Query(1, ge=1, description="当前页码"),
    limit: int = Query(10, ge=1, le=100, description="每页显示条数"),
    db: Session = Depends(get_db)
):
    """
    分页查询角色
    """
    return ResponseModel(data=RoleService.page_roles(db, PageOptionsModel(page=page, limit=limit)))


@router.post("/delete", response_model=ResponseModel, summary="删除角色")
def delete_roles(
    delete_data: DeleteRoleModel,
    db: Session = Depends(get_db)
):
    """
    删除角色，角色仍关联账号时不允许删除
    """
    if RoleService.count_user_id_by_role(db, delete_data.role_ids) > 0:
        raise ApiException(ErrorCode.ROLE_HAS_USERS)
    RoleService.delete_roles(db, delete_data.role_ids)
    MenuService.refresh_online_user_perms(db)
    return ResponseModel()


@router.post("/add", response_model=ResponseModel[RoleIdModel], summary="新增角色")
def add_role(
    request: Request,
    role_data: CreateRoleModel,
    db: Session = Depends(get_db)
):
    """
    新增角色
    """
    user_id = get_current_user_id(request)
    role = RoleService.add_role(db, role_data, user_id)
    return ResponseModel(data=RoleIdModel(role_id=role.id))


@router.post("/update", response_model=ResponseModel, summary="修改角色")
def update_role(
    role_data: UpdateRoleModel,
    db: Session = Depends(get_db)
):
    """
    修改角色，并刷新在线账号的权限
    """
    RoleService.update_role(db, role_data)
    MenuService.refresh_online_user_perms(db)
    return ResponseModel()


@router.get("/info", response_model=ResponseModel[RoleInfoModel], summary="查询角色详情")
def get_role_info(
    role_id: int = Query(..., alias="roleId", ge=0, description="角色ID"),
    db: Session = Depends(get_db)
):
    """
    查询角色详情及关联的菜单、部门
    """
    return ResponseModel(data=RoleService.get_role_info(db, role_id))
