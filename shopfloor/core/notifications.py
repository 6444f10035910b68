"""通知出口

编排器在事务提交后把事件交给通知出口，对编排器而言是“发出即忘”：
出口的异常只记录日志，不影响已提交的命令。
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..utils.helpers import utcnow

logger = logging.getLogger(__name__)

HELP_REQUESTED = "help_requested"
ORDER_STARTED = "order_started"
LOCATION_FINISHED = "location_finished"
ORDER_COMPLETED = "order_completed"


@dataclass
class NotificationEvent:
    kind: str
    order_id: int
    location_id: Optional[int] = None
    actor_id: Optional[int] = None
    message: str = ""
    created_at: datetime = field(default_factory=utcnow)


class NotificationSink:
    """通知出口接口"""

    def notify(self, event: NotificationEvent) -> None:
        raise NotImplementedError


class LoggingNotificationSink(NotificationSink):
    """默认出口：写入日志"""

    def notify(self, event: NotificationEvent) -> None:
        logger.info("[%s] order=%s location=%s %s", event.kind, event.order_id, event.location_id, event.message)


class MemoryNotificationSink(NotificationSink):
    """内存出口，便于测试与调试"""

    def __init__(self):
        self.events: List[NotificationEvent] = []

    def notify(self, event: NotificationEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[str]:
        return [e.kind for e in self.events]


def deliver(sink: NotificationSink, events: Iterable[NotificationEvent]) -> None:
    for event in events:
        try:
            sink.notify(event)
        except Exception:
            logger.exception("notification sink failed for %s on order %s", event.kind, event.order_id)
