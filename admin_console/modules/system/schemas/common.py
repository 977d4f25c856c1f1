"""
通用的分页和响应模型
"""
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

class PageOptionsModel(BaseModel):
    """
    分页查询模型
    """
    page: int = Field(default=1, ge=1, description="当前页码")
    limit: int = Field(default=10, ge=1, le=100, description="每页显示条数")

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

class PaginationModel(BaseModel):
    """分页信息"""
    total: int = Field(default=0, description="总条数")
    page: int = Field(default=1, description="当前页码")
    size: int = Field(default=10, description="每页显示条数")

class PageResultModel(BaseModel, Generic[T]):
    """
    分页响应模型
    """
    items: List[T] = Field(default=[], alias="list", description="数据列表")
    pagination: PaginationModel = Field(default_factory=PaginationModel, description="分页信息")

    model_config = {
        "populate_by_name": True,
        "alias_generator": to_camel
    }

class ResponseModel(BaseModel, Generic[T]):
    """通用响应模型"""
    code: int = Field(200, description="响应代码")
    msg: str = Field("success", description="响应消息")
    data: Optional[T] = Field(None, description="响应数据")
