"""队列API路由

全局队列与各工位队列的查询和调整
"""

from typing import List

from fastapi import APIRouter, Depends

from ... import crud, schemas
from ...auth import get_current_actor
from ...core import Actor, WorkflowOrchestrator
from ...core.errors import NotFound
from ..deps import get_orchestrator

router = APIRouter(prefix="/queue", tags=["queue"])


@router.get("/global", response_model=List[schemas.OrderRead])
def global_queue_endpoint(
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.queue.global_queue()


@router.post("/global/{order_id}", response_model=schemas.OrderRead)
def set_global_position_endpoint(
    order_id: int,
    body: schemas.PositionBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """把订单放到全局队列的指定位置，其后订单顺延"""
    command = schemas.GlobalQueuePositionCommand(order_id=order_id, position=body.position)
    return workflow.set_global_queue_position(command, actor)


@router.post("/global/{order_id}/remove")
def remove_from_all_queues_endpoint(
    order_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    removed = workflow.remove_from_all_queues(order_id, actor)
    return {"success": True, "removed": removed}


@router.get("/location/{location_id}", response_model=List[schemas.LocationQueueItem])
def location_queue_endpoint(
    location_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    if crud.get_location(workflow.db, location_id) is None:
        raise NotFound("Location", location_id)
    return [
        schemas.LocationQueueItem(
            order_location=schemas.OrderLocationRead.model_validate(ol),
            order=schemas.OrderRead.model_validate(order),
        )
        for ol, order in workflow.queue.location_queue(location_id)
    ]


@router.post("/location/{location_id}", response_model=schemas.OrderLocationRead, status_code=201)
def enqueue_endpoint(
    location_id: int,
    body: schemas.EnqueueBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    """手动把订单加入工位队列末尾"""
    command = schemas.EnqueueCommand(order_id=body.order_id, location_id=location_id)
    return workflow.enqueue_at_location(command, actor)


@router.post("/location/{location_id}/reorder", response_model=List[schemas.OrderLocationRead])
def reorder_location_queue_endpoint(
    location_id: int,
    body: schemas.ReorderBody,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    command = schemas.ReorderLocationQueueCommand(
        order_id=body.order_id, location_id=location_id, position=body.position
    )
    return workflow.reorder_location_queue(command, actor)
