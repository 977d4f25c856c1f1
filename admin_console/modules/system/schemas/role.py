"""
角色管理相关的Pydantic模型
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class RoleModel(BaseModel):
    """角色信息"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True
    }

    id: int
    user_id: str
    name: str
    label: str
    remark: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RoleInfoModel(BaseModel):
    """角色详情"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    role_info: RoleModel
    menus: List[int] = Field(default=[], description="菜单ID列表")
    depts: List[int] = Field(default=[], description="部门ID列表")


class CreateRoleModel(BaseModel):
    """新增角色模型"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    name: str = Field(..., min_length=2, max_length=255, description="角色名称")
    label: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-zA-Z0-9]+$", description="角色标识")
    remark: Optional[str] = Field(None, max_length=255, description="备注")
    menus: List[int] = Field(default=[], description="菜单ID列表")
    depts: List[int] = Field(default=[], description="部门ID列表")


class UpdateRoleModel(CreateRoleModel):
    """修改角色模型"""
    role_id: int = Field(..., ge=0, description="角色ID")


class DeleteRoleModel(BaseModel):
    """删除角色模型"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    role_ids: List[int] = Field(..., min_length=1, description="角色ID列表")


class RoleIdModel(BaseModel):
    """新增角色返回"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    role_id: int
