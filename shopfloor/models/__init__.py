"""数据库模型模块

定义所有 SQLAlchemy ORM 模型
"""

from ..database.connection import Base
from .enums import AuditAction, OrderLocationStatus, Readiness, UserRole
from .user import User
from .location import Location
from .order import Order
from .order_location import OrderLocation
from .audit_entry import AuditEntry
from .help_request import HelpRequest

__all__ = [
    "Base",
    "User",
    "Location",
    "Order",
    "OrderLocation",
    "AuditEntry",
    "HelpRequest",
    "AuditAction",
    "OrderLocationStatus",
    "Readiness",
    "UserRole",
]
