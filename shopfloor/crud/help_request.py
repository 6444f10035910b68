"""数据库操作（CRUD）- 求助记录"""

from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..utils.helpers import utcnow


def create_help_request(
    db: Session, order_id: int, location_id: int, user_id: Optional[int], notes: Optional[str]
) -> models.HelpRequest:
    db_help = models.HelpRequest(
        order_id=order_id,
        location_id=location_id,
        user_id=user_id,
        notes=notes,
        is_resolved=False,
    )
    db.add(db_help)
    db.flush()
    return db_help


def get_help_request(db: Session, help_request_id: int, for_update: bool = False) -> Optional[models.HelpRequest]:
    query = db.query(models.HelpRequest).filter(models.HelpRequest.id == help_request_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def list_active(db: Session) -> List[models.HelpRequest]:
    """未解决的求助，最早的在前"""
    return (
        db.query(models.HelpRequest)
        .filter(models.HelpRequest.is_resolved.is_(False))
        .order_by(models.HelpRequest.created_at, models.HelpRequest.id)
        .all()
    )


def mark_resolved(db: Session, db_help: models.HelpRequest) -> models.HelpRequest:
    db_help.is_resolved = True
    db_help.resolved_at = utcnow()
    db.flush()
    return db_help
