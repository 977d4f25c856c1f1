"""
账号管理相关的Pydantic模型
"""
from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from admin_console.modules.system.schemas.common import PageOptionsModel


CAMEL_CONFIG = {
    "populate_by_name": True,
    "alias_generator": to_camel
}


class CreateUserModel(BaseModel):
    """新增账号模型"""
    model_config = CAMEL_CONFIG

    department_id: int = Field(..., ge=0, description="所属部门ID")
    name: str = Field(..., min_length=1, max_length=255, description="姓名")
    nick_name: Optional[str] = Field(None, max_length=255, description="昵称")
    roles: List[int] = Field(..., min_length=1, max_length=3, description="角色ID列表")
    username: str = Field(..., min_length=6, max_length=20, pattern=r"^[a-zA-Z0-9]+$", description="登录账号")
    remark: Optional[str] = Field(None, max_length=255, description="备注")
    email: Optional[str] = Field(None, max_length=255, description="邮箱")
    phone: Optional[str] = Field(None, max_length=255, description="手机号")
    status: Literal[0, 1] = Field(1, description="状态 0:禁用 1:启用")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v and "@" not in v:
            raise ValueError("邮箱格式不正确")
        return v


class UpdateUserModel(CreateUserModel):
    """修改账号模型"""
    id: int = Field(..., ge=0, description="账号ID")


class DeleteUserModel(BaseModel):
    """删除账号模型"""
    model_config = CAMEL_CONFIG

    user_ids: List[int] = Field(..., min_length=1, description="账号ID列表")


class PageSearchUserModel(PageOptionsModel):
    """账号分页查询模型"""
    department_ids: Optional[List[int]] = Field(None, description="部门ID列表")


class PasswordUserModel(BaseModel):
    """管理员重置账号密码模型"""
    model_config = CAMEL_CONFIG

    user_id: int = Field(..., ge=0, description="账号ID")
    password: str = Field(..., min_length=6, max_length=20, pattern=r"^\S+$", description="新密码")


class UpdatePasswordModel(BaseModel):
    """修改个人密码模型"""
    model_config = CAMEL_CONFIG

    origin_password: str = Field(..., min_length=6, max_length=20, description="原密码")
    new_password: str = Field(..., min_length=6, max_length=20, pattern=r"^\S+$", description="新密码")


class UpdatePersonInfoModel(BaseModel):
    """修改个人信息模型"""
    model_config = CAMEL_CONFIG

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    nick_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=255)
    remark: Optional[str] = Field(None, max_length=255)
    head_img: Optional[str] = Field(None, max_length=255)


class UserBaseModel(BaseModel):
    """账号信息（不含密码与盐）"""
    model_config = {**CAMEL_CONFIG, "from_attributes": True}

    id: int
    department_id: int
    name: str
    username: str
    nick_name: Optional[str] = None
    head_img: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    remark: Optional[str] = None
    status: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserDetailModel(UserBaseModel):
    """账号详情"""
    roles: List[int] = Field(default=[], description="角色ID列表")
    department_name: Optional[str] = Field(None, description="部门名称")


class UserPageItemModel(UserBaseModel):
    """账号分页列表项"""
    department_name: Optional[str] = Field(None, description="部门名称")
    role_names: List[str] = Field(default=[], description="角色名称列表")


class AccountInfoModel(BaseModel):
    """个人信息"""
    model_config = {**CAMEL_CONFIG, "from_attributes": True}

    name: str
    username: str
    nick_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    remark: Optional[str] = None
    head_img: Optional[str] = None
    login_ip: Optional[str] = None
