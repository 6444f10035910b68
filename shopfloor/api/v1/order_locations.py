"""订单工位API路由

工位终端调用：开始、暂停、完成、修正数量、求助
"""

from fastapi import APIRouter, Depends

from ... import schemas
from ...auth import get_current_actor
from ...core import Actor, WorkflowOrchestrator
from ..deps import get_orchestrator

router = APIRouter(prefix="/order-locations", tags=["order-locations"])


@router.post("/{order_id}/{location_id}/start", response_model=schemas.OrderLocationRead)
def start_endpoint(
    order_id: int,
    location_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """开始（或恢复）加工"""
    command = schemas.StartCommand(order_id=order_id, location_id=location_id)
    return workflow.start_at_location(command, actor)


@router.post("/{order_id}/{location_id}/pause", response_model=schemas.OrderLocationRead)
def pause_endpoint(
    order_id: int,
    location_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    command = schemas.PauseCommand(order_id=order_id, location_id=location_id)
    return workflow.pause_at_location(command, actor)


@router.post("/{order_id}/{location_id}/finish", response_model=schemas.OrderLocationRead)
def finish_endpoint(
    order_id: int,
    location_id: int,
    body: schemas.QuantityBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """完成加工并记录完成数量"""
    command = schemas.FinishCommand(
        order_id=order_id, location_id=location_id, completed_quantity=body.completed_quantity
    )
    return workflow.finish_at_location(command, actor)


@router.post("/{order_id}/{location_id}/quantity", response_model=schemas.OrderLocationRead)
def update_quantity_endpoint(
    order_id: int,
    location_id: int,
    body: schemas.QuantityBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    command = schemas.UpdateQuantityCommand(
        order_id=order_id, location_id=location_id, completed_quantity=body.completed_quantity
    )
    return workflow.update_quantity_at_location(command, actor)


@router.post("/{order_id}/{location_id}/help", response_model=schemas.HelpRequestRead, status_code=201)
def request_help_endpoint(
    order_id: int,
    location_id: int,
    body: schemas.HelpBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """工位求助（不改变工位状态）"""
    command = schemas.HelpRequestCommand(order_id=order_id, location_id=location_id, notes=body.notes)
    return workflow.request_help(command, actor)
