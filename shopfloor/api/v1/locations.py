"""工位API路由

工位基础资料（管理员维护）及主工位待处理订单提示
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...auth import get_current_actor
from ...core import Actor, QueueManager, require_role
from ...core.errors import NotFound
from ...database.connection import get_db
from ...models.enums import UserRole

router = APIRouter(prefix="/locations", tags=["locations"])


@router.post("/", response_model=schemas.LocationRead, status_code=201)
def create_location_endpoint(
    location: schemas.LocationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """创建工位（仅管理员）"""
    require_role(actor, UserRole.admin, "create locations")
    return crud.create_location(db, location)


@router.get("/", response_model=List[schemas.LocationRead])
def list_locations_endpoint(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    """按加工顺序获取工位列表"""
    return crud.list_locations(db)


@router.get("/{location_id}", response_model=schemas.LocationRead)
def get_location_endpoint(location_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    location = crud.get_location(db, location_id)
    if not location:
        raise NotFound("Location", location_id)
    return location


@router.put("/{location_id}", response_model=schemas.LocationRead)
def update_location_endpoint(
    location_id: int,
    location_update: schemas.LocationUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """更新工位（仅管理员）"""
    require_role(actor, UserRole.admin, "edit locations")
    location = crud.update_location(db, location_id, location_update)
    if not location:
        raise NotFound("Location", location_id)
    return location


@router.get("/{location_id}/needed", response_model=schemas.NeededOrders)
def needed_orders_endpoint(location_id: int, db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    """主工位尚需处理的订单（仅提示，不限制其他工位开工）"""
    orders = QueueManager(db).orders_needing_location(location_id)
    return schemas.NeededOrders(
        location_id=location_id,
        orders=[schemas.OrderRead.model_validate(o) for o in orders],
    )
