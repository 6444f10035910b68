"""审计记录器

每个变更命令在同一事务内写入且只写入一条审计记录。写入失败时抛出
AuditWriteFailed，由编排器回滚整个命令：没有审计记录的变更视为没有发生。
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import crud, models
from ..models.enums import AuditAction
from .errors import AuditWriteFailed

logger = logging.getLogger(__name__)


class AuditRecorder:

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        action: AuditAction,
        order_id: int,
        user_id: Optional[int] = None,
        location_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> models.AuditEntry:
        # 命令本身的变更先写入，下面只捕获审计行的写入错误
        self.db.flush()
        try:
            return crud.create_audit_entry(
                self.db,
                action=action,
                order_id=order_id,
                user_id=user_id,
                location_id=location_id,
                details=details,
            )
        except SQLAlchemyError as exc:
            logger.error("audit write failed for %s on order %s: %s", action.value, order_id, exc)
            raise AuditWriteFailed(f"Could not record '{action.value}' for order {order_id}") from exc

    def for_order(self, order_id: int) -> List[models.AuditEntry]:
        return crud.list_audit_for_order(self.db, order_id)

    def recent(self, limit: int = 100) -> List[models.AuditEntry]:
        return crud.list_recent_audit(self.db, limit=limit)
