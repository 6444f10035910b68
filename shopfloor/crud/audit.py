"""数据库操作（CRUD）- 审计记录

只提供追加与查询，不提供修改和删除
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from .. import models
from ..models.enums import AuditAction
from ..utils.helpers import utcnow


def create_audit_entry(
    db: Session,
    action: AuditAction,
    order_id: int,
    user_id: Optional[int] = None,
    location_id: Optional[int] = None,
    details: Optional[str] = None,
) -> models.AuditEntry:
    entry = models.AuditEntry(
        action=action,
        order_id=order_id,
        user_id=user_id,
        location_id=location_id,
        details=details,
        created_at=utcnow(),
    )
    db.add(entry)
    db.flush()
    return entry


def list_for_order(db: Session, order_id: int) -> List[models.AuditEntry]:
    """订单的审计记录，最新的在前"""
    return (
        db.query(models.AuditEntry)
        .filter(models.AuditEntry.order_id == order_id)
        .order_by(models.AuditEntry.created_at.desc(), models.AuditEntry.id.desc())
        .all()
    )


def list_recent(db: Session, limit: int = 100) -> List[models.AuditEntry]:
    return (
        db.query(models.AuditEntry)
        .order_by(models.AuditEntry.created_at.desc(), models.AuditEntry.id.desc())
        .limit(limit)
        .all()
    )
