"""工作流命令

每个对外命令对应一个经过校验的请求结构。这里只校验字段类型与非空，
数量与队列位置的取值范围依赖订单数据，由状态机/队列管理器校验并抛出
InvalidQuantity、QueuePositionOutOfRange。
"""

from pydantic import BaseModel, StrictInt
from typing import Optional


class LocationCommand(BaseModel):
    """针对某订单在某工位上的命令"""
    order_id: StrictInt
    location_id: StrictInt


class StartCommand(LocationCommand):
    pass


class PauseCommand(LocationCommand):
    pass


class EnqueueCommand(LocationCommand):
    pass


class FinishCommand(LocationCommand):
    completed_quantity: StrictInt


class UpdateQuantityCommand(LocationCommand):
    completed_quantity: StrictInt


class HelpRequestCommand(LocationCommand):
    notes: Optional[str] = None


class ReorderLocationQueueCommand(LocationCommand):
    position: StrictInt


class ShipCommand(BaseModel):
    order_id: StrictInt
    quantity: StrictInt


class GlobalQueuePositionCommand(BaseModel):
    order_id: StrictInt
    position: StrictInt
