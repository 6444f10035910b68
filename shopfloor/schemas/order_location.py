"""订单工位数据结构定义"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from ..models.enums import OrderLocationStatus


class OrderLocationRead(BaseModel):
    id: int
    order_id: int
    location_id: int
    status: OrderLocationStatus
    queue_position: Optional[int] = None
    completed_quantity: int
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
