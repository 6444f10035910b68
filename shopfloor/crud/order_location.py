"""数据库操作（CRUD）- 订单工位相关

队列位置字段只允许队列管理器修改，这里只提供读取与建行。
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models
from ..models.enums import OrderLocationStatus


def get_order_location(
    db: Session, order_id: int, location_id: int, for_update: bool = False
) -> Optional[models.OrderLocation]:
    query = db.query(models.OrderLocation).filter(
        models.OrderLocation.order_id == order_id,
        models.OrderLocation.location_id == location_id,
    )
    if for_update:
        query = query.with_for_update()
    return query.first()


def list_for_order(db: Session, order_id: int, for_update: bool = False) -> List[models.OrderLocation]:
    """订单在各工位的记录，按工位加工顺序"""
    query = (
        db.query(models.OrderLocation)
        .join(models.Location, models.Location.id == models.OrderLocation.location_id)
        .filter(models.OrderLocation.order_id == order_id)
    )
    if for_update:
        query = query.with_for_update()
    return query.order_by(models.Location.used_order, models.Location.id).all()


def list_for_location(db: Session, location_id: int) -> List[models.OrderLocation]:
    return (
        db.query(models.OrderLocation)
        .filter(models.OrderLocation.location_id == location_id)
        .order_by(models.OrderLocation.id)
        .all()
    )


def list_queue(db: Session, location_id: int, for_update: bool = False) -> List[models.OrderLocation]:
    """某工位 in_queue 的记录，按 queue_position 升序"""
    query = db.query(models.OrderLocation).filter(
        models.OrderLocation.location_id == location_id,
        models.OrderLocation.status == OrderLocationStatus.in_queue,
    )
    if for_update:
        query = query.with_for_update()
    return query.order_by(models.OrderLocation.queue_position, models.OrderLocation.id).all()


def max_queue_position(db: Session, location_id: int) -> int:
    result = (
        db.query(func.max(models.OrderLocation.queue_position))
        .filter(
            models.OrderLocation.location_id == location_id,
            models.OrderLocation.status == OrderLocationStatus.in_queue,
        )
        .scalar()
    )
    return result or 0


def create_order_location(
    db: Session,
    order_id: int,
    location_id: int,
    status: OrderLocationStatus = OrderLocationStatus.not_started,
) -> models.OrderLocation:
    db_ol = models.OrderLocation(
        order_id=order_id,
        location_id=location_id,
        status=status,
        queue_position=None,
        completed_quantity=0,
    )
    db.add(db_ol)
    db.flush()
    return db_ol
