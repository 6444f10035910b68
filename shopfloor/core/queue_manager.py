"""队列管理

维护两套相互独立的排序：

- 工位队列：某工位上 status 为 in_queue 的订单工位记录，按 queue_position 升序
- 全局队列：global_queue_position 非空的订单，用于跨工位的优先级

两者都是从 1 开始、连续无空位的整数序列，每次变更后在同一事务内重排。
queue_position / global_queue_position 只能通过这里的方法修改。
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from .. import crud, models
from ..models.enums import OrderLocationStatus as Status
from . import readiness, state_machine
from .errors import InvalidTransition, NotFound, QueuePositionOutOfRange

logger = logging.getLogger(__name__)


def _clamp(position: int, upper: int) -> int:
    return max(1, min(position, upper))


def _check_position(position: int) -> None:
    if position is None or position < 1:
        raise QueuePositionOutOfRange(
            f"Queue position must be a positive integer, got {position}",
            field="position",
        )


def sort_for_display(orders: Iterable[models.Order], sort_field: str = "created_at", descending: bool = False) -> List[models.Order]:
    """展示排序：加急订单在前（加急越早越靠前），再按全局队列位置（未排队在后），
    最后按调用方指定字段。只影响展示，不写回队列位置。"""

    def field_key(order):
        value = getattr(order, sort_field, None)
        return (value is None, value if value is not None else 0)

    result = sorted(orders, key=field_key, reverse=descending)

    def priority_key(order):
        if order.rush:
            rushed = order.rush_set_at or datetime.min
            return (0, rushed, 0)
        position = order.global_queue_position
        return (1, datetime.min, position if position is not None else float("inf"))

    # sorted 是稳定排序，调用方字段的顺序在优先级相同的订单之间保留
    return sorted(result, key=priority_key)


class QueueManager:
    """工位队列与全局队列的唯一写入口"""

    def __init__(self, db: Session):
        self.db = db

    # ---- 工位队列 ----

    def repack_location(self, location_id: int) -> List[models.OrderLocation]:
        """按现有顺序把工位队列重排为 1..N"""
        self.db.flush()
        queue = crud.list_location_queue(self.db, location_id, for_update=True)
        self._assign(queue)
        return queue

    def enqueue_at_location(self, order_id: int, location_id: int) -> models.OrderLocation:
        """加入工位队列末尾，记录不存在时先建为 not_started；已在队列中则不变"""
        ol = crud.get_order_location(self.db, order_id, location_id, for_update=True)
        if ol is None:
            ol = crud.create_order_location(self.db, order_id, location_id)
        if ol.status == Status.in_queue:
            return ol
        self.db.flush()
        position = crud.max_queue_position(self.db, location_id) + 1
        state_machine.enqueue(ol, position)
        self.db.flush()
        logger.debug("order %s queued at location %s position %s", order_id, location_id, position)
        return ol

    def remove_from_location_queue(self, order_id: int, location_id: int) -> models.OrderLocation:
        """移出工位队列（回到 not_started），其余记录保持相对顺序重排"""
        ol = crud.get_order_location(self.db, order_id, location_id, for_update=True)
        if ol is None or ol.status != Status.in_queue:
            raise NotFound("Queue entry", f"order {order_id} at location {location_id}")
        state_machine.dequeue(ol)
        self.repack_location(location_id)
        return ol

    def reorder_location_queue(self, order_id: int, location_id: int, position: int) -> List[models.OrderLocation]:
        """把订单移动到工位队列中的指定位置（超出范围时取边界）"""
        _check_position(position)
        self.db.flush()
        queue = crud.list_location_queue(self.db, location_id, for_update=True)
        target = next((ol for ol in queue if ol.order_id == order_id), None)
        if target is None:
            raise NotFound("Queue entry", f"order {order_id} at location {location_id}")
        others = [ol for ol in queue if ol is not target]
        slot = _clamp(position, len(others) + 1)
        others.insert(slot - 1, target)
        self._assign(others)
        return others

    def location_queue(self, location_id: int) -> List[Tuple[models.OrderLocation, models.Order]]:
        """工位队列（不含已出货订单）"""
        rows = (
            self.db.query(models.OrderLocation, models.Order)
            .join(models.Order, models.Order.id == models.OrderLocation.order_id)
            .filter(
                models.OrderLocation.location_id == location_id,
                models.OrderLocation.status == Status.in_queue,
                models.Order.is_shipped.is_(False),
            )
            .order_by(models.OrderLocation.queue_position)
            .all()
        )
        return [(ol, order) for ol, order in rows]

    def auto_enqueue_new_order(self, order: models.Order, location_ids: Optional[Sequence[int]] = None) -> List[models.OrderLocation]:
        """新订单自动排队

        未指定工位时加入所有 skip_auto_queue 为 False 的工位；指定工位时只为这些工位建记录，
        其中 skip_auto_queue 的工位保持 not_started，需要手动加入队列。
        """
        if location_ids is None:
            locations = crud.list_auto_queue_locations(self.db)
        else:
            locations = []
            for location_id in dict.fromkeys(location_ids):
                location = crud.get_location(self.db, location_id)
                if location is None:
                    raise NotFound("Location", location_id)
                locations.append(location)
            locations.sort(key=lambda loc: (loc.used_order, loc.id))

        created = []
        for location in locations:
            if location.skip_auto_queue:
                created.append(crud.create_order_location(self.db, order.id, location.id))
            else:
                created.append(self.enqueue_at_location(order.id, location.id))
        return created

    def advance_to_next_location(self, order_id: int, location: models.Location) -> Optional[models.OrderLocation]:
        """当前工位完成后，把订单加入下一道工位的队列

        只处理订单自身已有记录、状态为 not_started 且允许自动排队的下一道工位。
        """
        rows = crud.list_order_locations(self.db, order_id)
        following = [ol for ol in rows if ol.location.used_order > location.used_order]
        if not following:
            return None
        nxt = following[0]
        if nxt.status != Status.not_started or nxt.location.skip_auto_queue:
            return None
        return self.enqueue_at_location(order_id, nxt.location_id)

    # ---- 全局队列 ----

    def repack_global(self) -> List[models.Order]:
        self.db.flush()
        queue = crud.list_global_queue(self.db, for_update=True)
        for index, order in enumerate(queue, start=1):
            order.global_queue_position = index
        self.db.flush()
        return queue

    def set_global_queue_position(self, order_id: int, position: int) -> models.Order:
        """插入或移动订单到全局队列的指定位置，其后的订单依次后移

        位置取值范围 [1, N]，N 为其他已排队订单数 + 1，超出时取边界。
        """
        _check_position(position)
        order = crud.get_order(self.db, order_id, for_update=True)
        if order is None:
            raise NotFound("Order", order_id)
        if order.is_shipped:
            raise InvalidTransition("shipped", "queue")
        self.db.flush()
        others = [o for o in crud.list_global_queue(self.db, for_update=True) if o.id != order.id]
        slot = _clamp(position, len(others) + 1)
        others.insert(slot - 1, order)
        for index, queued in enumerate(others, start=1):
            queued.global_queue_position = index
        self.db.flush()
        return order

    def remove_from_global_queue(self, order: models.Order) -> bool:
        if order.global_queue_position is None:
            return False
        order.global_queue_position = None
        self.repack_global()
        return True

    def global_queue(self) -> List[models.Order]:
        return [o for o in crud.list_global_queue(self.db) if not o.is_shipped]

    def remove_from_all_queues(self, order_id: int) -> int:
        """移出全局队列及所有工位队列，返回移出的队列数"""
        order = crud.get_order(self.db, order_id, for_update=True)
        if order is None:
            raise NotFound("Order", order_id)
        removed = 1 if self.remove_from_global_queue(order) else 0
        touched = set()
        for ol in crud.list_order_locations(self.db, order_id, for_update=True):
            if ol.status == Status.in_queue:
                state_machine.dequeue(ol)
                touched.add(ol.location_id)
        for location_id in sorted(touched):
            self.repack_location(location_id)
        return removed + len(touched)

    # ---- 主工位提示 ----

    def orders_needing_location(self, location_id: int) -> List[models.Order]:
        """主工位上尚需处理的订单：没有该工位记录，或记录仍为 not_started / in_queue。
        非主工位返回空列表。仅用于提示，不阻止其他工位开始加工。"""
        location = crud.get_location(self.db, location_id)
        if location is None:
            raise NotFound("Location", location_id)
        if not location.is_primary:
            return []
        rows = {ol.order_id: ol for ol in crud.list_location_order_locations(self.db, location_id)}
        return [
            order for order in crud.list_active_orders(self.db)
            if readiness.is_needed_at(location, rows.get(order.id))
        ]

    def _assign(self, queue: Sequence[models.OrderLocation]) -> None:
        for index, ol in enumerate(queue, start=1):
            ol.queue_position = index
        self.db.flush()
