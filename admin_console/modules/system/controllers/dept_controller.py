"""
部门管理控制器
"""
from typing import List
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from admin_console.db.session import get_db
from admin_console.modules.system.middleware import get_current_user_id
from admin_console.modules.system.schemas.common import ResponseModel
from admin_console.modules.system.schemas.dept import (
    CreateDeptModel, UpdateDeptModel, DeleteDeptModel, TransferDeptModel,
    MoveDeptModel, DeptModel, DeptInfoModel
)
from admin_console.modules.system.services.dept_service import DeptService


router = APIRouter(prefix="/sys/deptdata", tags=["部门管理"])


@router.get("/list", response_model=ResponseModel[List[DeptModel]], summary="获取部门列表")
def get_dept_list(
    request: Request,
    db: Session = Depends(get_db)
):
    """
    获取当前账号可见的部门列表
    """
    user_id = get_current_user_id(request)
    return ResponseModel(data=DeptService.get_depts(db, user_id))


@router.post("/add", response_model=ResponseModel, summary="新增部门")
def add_dept(
    dept_data: CreateDeptModel,
    db: Session = Depends(get_db)
):
    """
    新增部门，parentId为-1时创建根部门
    """
    DeptService.add_dept(db, dept_data)
    return ResponseModel()


@router.post("/delete", response_model=ResponseModel, summary="删除部门")
def delete_dept(
    delete_data: DeleteDeptModel,
    db: Session = Depends(get_db)
):
    """
    删除部门，部门下存在账号、关联角色或子部门时不允许删除
    """
    DeptService.delete_dept(db, delete_data.department_id)
    return ResponseModel()


@router.get("/info", response_model=ResponseModel[DeptInfoModel], summary="查询部门详情")
def get_dept_info(
    dept_id: int = Query(..., alias="departmentId", ge=0, description="部门ID"),
    db: Session = Depends(get_db)
):
    """
    查询部门及其上级部门
    """
    return ResponseModel(data=DeptService.get_dept_info(db, dept_id))


@router.post("/update", response_model=ResponseModel, summary="修改部门")
def update_dept(
    dept_data: UpdateDeptModel,
    db: Session = Depends(get_db)
):
    """
    修改部门，parentId为-1时保持原上级部门
    """
    DeptService.update_dept(db, dept_data)
    return ResponseModel()


@router.post("/transfer", response_model=ResponseModel, summary="账号转移部门")
def transfer_dept(
    transfer_data: TransferDeptModel,
    db: Session = Depends(get_db)
):
    """
    将账号转移到指定部门
    """
    DeptService.transfer(db, transfer_data.user_ids, transfer_data.department_id)
    return ResponseModel()


@router.post("/move", response_model=ResponseModel, summary="移动部门")
def move_dept(
    move_data: MoveDeptModel,
    db: Session = Depends(get_db)
):
    """
    批量调整部门层级
    """
    DeptService.move(db, move_data.depts)
    return ResponseModel()
