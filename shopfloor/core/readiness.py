"""完成度与出货就绪度计算

根据订单的各工位记录派生：
- 完成度：sum(完成数量) / (订单总数 × 工位数)，整数百分比，最多 100
- 就绪度：not_ready / part_ready / fully_ready
只读计算，不修改任何数据。
"""

from typing import Iterable, List, Optional

from ..models import Location, Order, OrderLocation
from ..models.enums import OrderLocationStatus as Status, Readiness
from ..utils.helpers import round_half_up


def countable_locations(order_locations: Iterable[OrderLocation]) -> List[OrderLocation]:
    """只统计真实工位（location_id > 0）"""
    return [ol for ol in order_locations if ol.location_id is not None and ol.location_id > 0]


def _multiplier(ol: OrderLocation) -> float:
    location = ol.location
    if location is None or not location.count_multiplier or location.count_multiplier <= 0:
        return 1.0
    return float(location.count_multiplier)


def completion_percentage(order: Order, order_locations: Iterable[OrderLocation]) -> int:
    rows = countable_locations(order_locations)
    if not rows or not order.total_quantity or order.total_quantity <= 0:
        return 0
    # 计数倍数不为 1 的工位，完成数量先折算回订单件数
    completed = sum((ol.completed_quantity or 0) / _multiplier(ol) for ol in rows)
    percentage = round_half_up(completed / (order.total_quantity * len(rows)) * 100)
    return min(100, percentage)


def ship_readiness(order: Order, order_locations: Iterable[OrderLocation]) -> Readiness:
    """出货就绪度

    fully_ready：所有工位 done
    part_ready：每个工位要么 done，要么 in_progress 且已有完成数量，并且至少一个 done
    其余（含已出货、无工位记录）为 not_ready
    """
    if order.is_shipped:
        return Readiness.not_ready
    rows = countable_locations(order_locations)
    if not rows:
        return Readiness.not_ready
    if all(ol.status == Status.done for ol in rows):
        return Readiness.fully_ready
    progressed = all(
        ol.status == Status.done
        or (ol.status == Status.in_progress and (ol.completed_quantity or 0) > 0)
        for ol in rows
    )
    any_done = any(ol.status == Status.done for ol in rows)
    if progressed and any_done:
        return Readiness.part_ready
    return Readiness.not_ready


def is_ready_to_ship(order: Order, order_locations: Iterable[OrderLocation]) -> bool:
    return ship_readiness(order, order_locations) != Readiness.not_ready


def all_locations_done(order_locations: Iterable[OrderLocation]) -> bool:
    rows = countable_locations(order_locations)
    return bool(rows) and all(ol.status == Status.done for ol in rows)


def is_needed_at(location: Location, ol: Optional[OrderLocation]) -> bool:
    """订单是否仍需在主工位处理（仅提示用途）"""
    if not location.is_primary:
        return False
    return ol is None or ol.status in (Status.not_started, Status.in_queue)
