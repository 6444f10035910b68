"""工位状态机

校验并执行单个（订单, 工位）记录的状态变更：

    not_started → in_queue → in_progress ⇄ paused → done

done 为终态。这里只修改内存中的 OrderLocation 对象，不访问数据库；
队列重排、审计记录与事务提交由编排器负责。
"""

from datetime import datetime
from typing import Optional

from ..models import OrderLocation
from ..models.enums import OrderLocationStatus as Status
from .errors import InvalidQuantity, InvalidTransition

STARTABLE = frozenset({Status.not_started, Status.in_queue, Status.paused})
ACTIVE = frozenset({Status.in_progress, Status.paused})


def validate_quantity(quantity: int, limit: int) -> None:
    """完成数量必须在 [0, limit] 之间"""
    if quantity is None or quantity < 0 or quantity > limit:
        raise InvalidQuantity(
            f"Completed quantity {quantity} must be between 0 and {limit}",
            field="completed_quantity",
        )


def enqueue(ol: OrderLocation, position: int) -> None:
    """not_started → in_queue，队列位置由队列管理器分配"""
    if ol.status != Status.not_started:
        raise InvalidTransition(ol.status, "enqueue")
    ol.status = Status.in_queue
    ol.queue_position = position


def dequeue(ol: OrderLocation) -> None:
    """in_queue → not_started，出队后由队列管理器重排"""
    if ol.status != Status.in_queue:
        raise InvalidTransition(ol.status, "dequeue")
    ol.status = Status.not_started
    ol.queue_position = None


def start(ol: OrderLocation, now: datetime) -> Status:
    """开始或恢复加工，返回变更前的状态

    started_at 只在首次开始时写入，暂停后恢复不覆盖。
    """
    previous = ol.status
    if previous not in STARTABLE:
        raise InvalidTransition(previous, "start")
    ol.status = Status.in_progress
    if ol.started_at is None:
        ol.started_at = now
    ol.queue_position = None
    return previous


def pause(ol: OrderLocation) -> None:
    if ol.status != Status.in_progress:
        raise InvalidTransition(ol.status, "pause")
    ol.status = Status.paused


def finish(
    ol: OrderLocation,
    completed_quantity: int,
    limit: int,
    now: datetime,
    no_count: bool = False,
) -> int:
    """完成加工，返回实际记录的完成数量

    不计数的工位忽略提交的数量，直接记为该工位的有效总数。
    """
    if ol.status not in ACTIVE:
        raise InvalidTransition(ol.status, "finish")
    if no_count:
        completed_quantity = limit
    validate_quantity(completed_quantity, limit)
    ol.status = Status.done
    ol.completed_at = now
    ol.completed_quantity = completed_quantity
    ol.queue_position = None
    return completed_quantity


def update_quantity(
    ol: OrderLocation,
    completed_quantity: int,
    limit: int,
    no_count: bool = False,
) -> Optional[int]:
    """加工中修正完成数量（允许向下修正），返回原数量"""
    if ol.status not in ACTIVE:
        raise InvalidTransition(ol.status, "update quantity")
    if no_count:
        raise InvalidQuantity("Quantity tracking is disabled at this location", field="completed_quantity")
    validate_quantity(completed_quantity, limit)
    previous = ol.completed_quantity
    ol.completed_quantity = completed_quantity
    return previous
