"""
部门管理相关的Pydantic模型
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class DeptModel(BaseModel):
    """部门信息"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel,
        "from_attributes": True
    }

    id: int
    parent_id: Optional[int] = None
    name: str
    order_num: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeptInfoModel(BaseModel):
    """部门详情"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    department: DeptModel
    parent_department: Optional[DeptModel] = None


class CreateDeptModel(BaseModel):
    """新增部门模型"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    name: str = Field(..., min_length=1, max_length=255, description="部门名称")
    parent_id: int = Field(..., description="上级部门ID，-1表示根部门")
    order_num: int = Field(0, ge=0, description="排序")


class UpdateDeptModel(CreateDeptModel):
    """修改部门模型，parentId为-1时保持原上级部门"""
    id: int = Field(..., ge=0, description="部门ID")


class DeleteDeptModel(BaseModel):
    """删除部门模型"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    department_id: int = Field(..., ge=0, description="部门ID")


class TransferDeptModel(BaseModel):
    """账号转移部门模型"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    user_ids: List[int] = Field(..., min_length=1, description="账号ID列表")
    department_id: int = Field(..., ge=0, description="目标部门ID")


class MoveDeptItemModel(BaseModel):
    """单个部门的移动信息"""
    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    id: int = Field(..., ge=0, description="部门ID")
    parent_id: Optional[int] = Field(None, description="新的上级部门ID，为空表示移到根部门")


class MoveDeptModel(BaseModel):
    """部门移动模型"""
    depts: List[MoveDeptItemModel] = Field(..., min_length=1, description="待移动的部门")
