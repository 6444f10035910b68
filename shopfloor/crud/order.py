"""数据库操作（CRUD）- 订单相关

订单的读写只做 add/flush，不提交事务；提交与回滚由工作流编排器统一负责，
保证一个命令内的状态变更、队列重排和审计记录一起生效或一起回滚。
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models, schemas


def create_order(db: Session, order: schemas.OrderCreate, created_by: Optional[int] = None) -> models.Order:
    db_order = models.Order(
        order_number=order.order_number,
        reference_number=order.reference_number,
        client=order.client,
        due_date=order.due_date,
        total_quantity=order.total_quantity,
        description=order.description,
        notes=order.notes,
        shipped_quantity=0,
        is_shipped=False,
        partially_shipped=False,
        is_finished=False,
        rush=False,
        created_by=created_by,
    )
    db.add(db_order)
    db.flush()
    return db_order


def get_order(db: Session, order_id: int, for_update: bool = False) -> Optional[models.Order]:
    """根据ID获取订单，for_update 时加行锁"""
    query = db.query(models.Order).filter(models.Order.id == order_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_order_by_number(db: Session, order_number: str) -> Optional[models.Order]:
    return db.query(models.Order).filter(models.Order.order_number == order_number).first()


def list_orders(db: Session, include_shipped: bool = False) -> List[models.Order]:
    """获取订单列表，默认不含已出货订单"""
    query = db.query(models.Order)
    if not include_shipped:
        query = query.filter(models.Order.is_shipped.is_(False))
    return query.order_by(models.Order.created_at.desc(), models.Order.id.desc()).all()


def list_active_orders(db: Session) -> List[models.Order]:
    """未出货且未完工的订单"""
    return (
        db.query(models.Order)
        .filter(models.Order.is_shipped.is_(False), models.Order.is_finished.is_(False))
        .order_by(models.Order.id)
        .all()
    )


def list_global_queue(db: Session, for_update: bool = False) -> List[models.Order]:
    """全局队列中的订单，按 global_queue_position 升序"""
    query = db.query(models.Order).filter(models.Order.global_queue_position.isnot(None))
    if for_update:
        query = query.with_for_update()
    return query.order_by(models.Order.global_queue_position, models.Order.id).all()


def update_order(db: Session, db_order: models.Order, update_data: dict) -> models.Order:
    """按字段更新订单"""
    for field, value in update_data.items():
        setattr(db_order, field, value)
    db.flush()
    return db_order


def delete_order(db: Session, db_order: models.Order) -> None:
    """删除订单，关联的订单工位与求助记录级联删除"""
    db.delete(db_order)
    db.flush()
