"""工位数据结构定义

定义工位相关的Pydantic模型
"""

from pydantic import BaseModel
from typing import Optional


class LocationBase(BaseModel):
    """工位基础模型"""
    name: str
    used_order: int
    is_primary: bool = False
    skip_auto_queue: bool = False
    count_multiplier: float = 1.0
    no_count: bool = False


class LocationCreate(LocationBase):
    """创建工位时的模型"""
    pass


class LocationUpdate(BaseModel):
    """更新工位时的模型（id 不可修改）"""
    name: Optional[str] = None
    used_order: Optional[int] = None
    is_primary: Optional[bool] = None
    skip_auto_queue: Optional[bool] = None
    count_multiplier: Optional[float] = None
    no_count: Optional[bool] = None


class LocationRead(LocationBase):
    """读取工位时的模型"""
    id: int

    class Config:
        from_attributes = True
