"""路由依赖

每个请求创建一个新的编排器，绑定本次请求的数据库会话
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ..core import LoggingNotificationSink, NotificationSink, WorkflowOrchestrator
from ..database.connection import get_db

_default_sink = LoggingNotificationSink()


def get_notifier() -> NotificationSink:
    return _default_sink


def get_orchestrator(
    db: Session = Depends(get_db),
    notifier: NotificationSink = Depends(get_notifier),
) -> WorkflowOrchestrator:
    return WorkflowOrchestrator(db, notifier=notifier)
