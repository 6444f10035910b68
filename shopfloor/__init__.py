"""车间生产跟踪：订单工位流转与排队引擎

提供统一的模块导入接口
"""

from . import (
    config,
    crud,
    database,
    models,
    schemas,
    security,
    core,
)

# 从子模块导入关键组件
from .config import settings
from .database import get_db, engine, Base, SessionLocal
from .core import WorkflowOrchestrator, QueueManager, Actor, SYSTEM_ACTOR

__version__ = "1.0.0"

__all__ = [
    "config",
    "crud",
    "database",
    "models",
    "schemas",
    "security",
    "core",
    "settings",
    "get_db",
    "engine",
    "Base",
    "SessionLocal",
    "WorkflowOrchestrator",
    "QueueManager",
    "Actor",
    "SYSTEM_ACTOR",
]
