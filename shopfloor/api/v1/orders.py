"""订单API路由

订单的创建、修改、删除、出货与加急。所有变更都经由工作流编排器。
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...auth import get_current_actor
from ...core import Actor, WorkflowOrchestrator, sort_for_display
from ...core.errors import NotFound
from ...database.connection import get_db
from ..deps import get_orchestrator

router = APIRouter(prefix="/orders", tags=["orders"])

SORT_FIELDS = {"created_at", "due_date", "order_number", "client", "total_quantity"}


@router.post("/", response_model=schemas.OrderRead, status_code=201)
def create_order_endpoint(
    order: schemas.OrderCreate,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """创建新订单"""
    return workflow.create_order(order, actor)


@router.get("/", response_model=List[schemas.OrderRead])
def list_orders_endpoint(
    include_shipped: bool = False,
    sort: str = Query("created_at", description="排序字段: created_at, due_date, order_number, client, total_quantity"),
    descending: bool = False,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """订单列表：加急在前，其次全局队列位置，最后按指定字段"""
    sort_field = sort if sort in SORT_FIELDS else "created_at"
    return sort_for_display(crud.list_orders(db, include_shipped=include_shipped), sort_field, descending)


@router.get("/{order_id}", response_model=schemas.OrderDetail)
def get_order_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.describe_order(order_id)


@router.put("/{order_id}", response_model=schemas.OrderRead)
def update_order_endpoint(
    order_id: int,
    order_update: schemas.OrderUpdate,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.edit_order(order_id, order_update, actor)


@router.delete("/{order_id}", status_code=204)
def delete_order_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """删除指定ID的订单（仅管理员）"""
    workflow.delete_order(order_id, actor)


@router.post("/{order_id}/ship", response_model=schemas.OrderRead)
def ship_order_endpoint(
    order_id: int,
    body: schemas.ShipBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.ship_order(schemas.ShipCommand(order_id=order_id, quantity=body.quantity), actor)


@router.post("/{order_id}/rush", response_model=schemas.OrderRead)
def rush_order_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.set_rush(order_id, actor)


@router.delete("/{order_id}/rush", response_model=schemas.OrderRead)
def unrush_order_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.clear_rush(order_id, actor)


@router.get("/{order_id}/audit", response_model=List[schemas.AuditEntryRead])
def order_audit_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """订单审计记录，最新的在前；订单删除后仍可查询"""
    entries = workflow.audit.for_order(order_id)
    if not entries and crud.get_order(workflow.db, order_id) is None:
        raise NotFound("Order", order_id)
    return entries
