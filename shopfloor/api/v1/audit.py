"""审计记录API路由（只读）"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ... import schemas
from ...auth import get_current_actor
from ...core import Actor, AuditRecorder
from ...database.connection import get_db

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/", response_model=List[schemas.AuditEntryRead])
def recent_audit(
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """最近的审计记录，最新的在前"""
    return AuditRecorder(db).recent(limit=limit)
