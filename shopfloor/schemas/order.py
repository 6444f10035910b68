"""订单数据结构定义

定义订单相关的Pydantic模型
"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from ..models.enums import Readiness
from .order_location import OrderLocationRead


class OrderBase(BaseModel):
    """订单基础模型"""
    order_number: str
    reference_number: str
    client: str
    due_date: datetime
    total_quantity: int
    description: Optional[str] = None
    notes: Optional[str] = None


class OrderCreate(OrderBase):
    """创建订单时的模型

    location_ids 为空时，订单会自动加入所有未设置 skip_auto_queue 的工位队列
    """
    location_ids: Optional[List[int]] = None


class OrderUpdate(BaseModel):
    """更新订单时的模型"""
    order_number: Optional[str] = None
    reference_number: Optional[str] = None
    client: Optional[str] = None
    due_date: Optional[datetime] = None
    total_quantity: Optional[int] = None
    description: Optional[str] = None
    notes: Optional[str] = None


class OrderRead(OrderBase):
    """读取订单时的模型"""
    id: int
    shipped_quantity: int
    is_shipped: bool
    partially_shipped: bool
    is_finished: bool
    rush: bool
    rush_set_at: Optional[datetime] = None
    global_queue_position: Optional[int] = None
    created_at: Optional[datetime] = None
    created_by: Optional[int] = None

    class Config:
        from_attributes = True


class OrderDetail(OrderRead):
    """订单详情：含各工位状态与派生的完成度、就绪度"""
    locations: List[OrderLocationRead] = []
    completion_percentage: int = 0
    readiness: Readiness = Readiness.not_ready
