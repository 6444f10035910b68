"""工位数据操作

工位由管理员维护，属于基础资料，增改操作直接提交
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models import Location
from ..schemas import LocationCreate, LocationUpdate


def create_location(db: Session, location: LocationCreate) -> Location:
    """创建工位"""
    db_location = Location(**location.model_dump())
    db.add(db_location)
    db.commit()
    db.refresh(db_location)
    return db_location


def get_location(db: Session, location_id: int) -> Optional[Location]:
    """根据ID获取工位"""
    return db.query(Location).filter(Location.id == location_id).first()


def list_locations(db: Session) -> List[Location]:
    """按加工顺序列出所有工位"""
    return db.query(Location).order_by(Location.used_order, Location.id).all()


def list_auto_queue_locations(db: Session) -> List[Location]:
    """可自动排队的工位，按加工顺序"""
    return (
        db.query(Location)
        .filter(Location.skip_auto_queue.is_(False))
        .order_by(Location.used_order, Location.id)
        .all()
    )


def update_location(db: Session, location_id: int, location_update: LocationUpdate) -> Optional[Location]:
    """更新工位"""
    db_location = get_location(db, location_id)
    if not db_location:
        return None

    update_data = location_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_location, field, value)

    db.commit()
    db.refresh(db_location)
    return db_location
