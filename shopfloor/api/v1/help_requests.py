from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...auth import get_current_actor
from ...core import Actor, WorkflowOrchestrator
from ...database.connection import get_db
from ..deps import get_orchestrator

router = APIRouter(prefix="/help-requests", tags=["help-requests"])


@router.get("/active", response_model=List[schemas.HelpRequestRead])
def active_help_requests(db: Session = Depends(get_db), actor: Actor = Depends(get_current_actor)):
    return crud.list_active_help_requests(db)


@router.post("/{help_request_id}/resolve", response_model=schemas.HelpRequestRead)
def resolve_help_request(
    help_request_id: int,
    workflow: WorkflowOrchestrator = Depends(get_orchestrator),
    actor: Actor = Depends(get_current_actor),
):
    return workflow.resolve_help_request(help_request_id, actor)
