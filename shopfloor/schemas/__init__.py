"""API数据模型模块

定义所有 Pydantic 模型（请求/响应结构体与工作流命令）
"""

from typing import List, Optional

from pydantic import BaseModel

from .user import UserBase, UserRead, Token
from .location import LocationBase, LocationCreate, LocationUpdate, LocationRead
from .order_location import OrderLocationRead
from .order import OrderBase, OrderCreate, OrderUpdate, OrderRead, OrderDetail
from .audit import AuditEntryRead, HelpRequestRead
from .commands import (
    EnqueueCommand,
    FinishCommand,
    GlobalQueuePositionCommand,
    HelpRequestCommand,
    PauseCommand,
    ReorderLocationQueueCommand,
    ShipCommand,
    StartCommand,
    UpdateQuantityCommand,
)


class LocationQueueItem(BaseModel):
    """工位队列中的一项"""
    order_location: OrderLocationRead
    order: OrderRead


class NeededOrders(BaseModel):
    """主工位待处理订单（仅提示）"""
    location_id: int
    orders: List[OrderRead]


class QuantityBody(BaseModel):
    completed_quantity: int


class ShipBody(BaseModel):
    quantity: int


class PositionBody(BaseModel):
    position: int


class HelpBody(BaseModel):
    notes: Optional[str] = None


class EnqueueBody(BaseModel):
    order_id: int


class ReorderBody(BaseModel):
    order_id: int
    position: int


__all__ = [
    "UserBase",
    "UserRead",
    "Token",
    "LocationBase",
    "LocationCreate",
    "LocationUpdate",
    "LocationRead",
    "OrderLocationRead",
    "OrderBase",
    "OrderCreate",
    "OrderUpdate",
    "OrderRead",
    "OrderDetail",
    "AuditEntryRead",
    "HelpRequestRead",
    "LocationQueueItem",
    "NeededOrders",
    "QuantityBody",
    "ShipBody",
    "PositionBody",
    "HelpBody",
    "EnqueueBody",
    "ReorderBody",
    "EnqueueCommand",
    "FinishCommand",
    "GlobalQueuePositionCommand",
    "HelpRequestCommand",
    "PauseCommand",
    "ReorderLocationQueueCommand",
    "ShipCommand",
    "StartCommand",
    "UpdateQuantityCommand",
]
