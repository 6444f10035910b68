"""工作流核心

状态机、队列管理、完成度/就绪度计算、审计记录与编排器
"""

from . import errors, readiness, state_machine
from .audit import AuditRecorder
from .identity import SYSTEM_ACTOR, Actor, require_role
from .notifications import (
    LoggingNotificationSink,
    MemoryNotificationSink,
    NotificationEvent,
    NotificationSink,
)
from .queue_manager import QueueManager, sort_for_display
from .workflow import WorkflowOrchestrator

__all__ = [
    "errors",
    "readiness",
    "state_machine",
    "AuditRecorder",
    "SYSTEM_ACTOR",
    "Actor",
    "require_role",
    "LoggingNotificationSink",
    "MemoryNotificationSink",
    "NotificationEvent",
    "NotificationSink",
    "QueueManager",
    "sort_for_display",
    "WorkflowOrchestrator",
]
