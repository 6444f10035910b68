"""审计记录数据库模型

只追加、不修改、不删除。order_id 不设外键，订单删除后审计记录仍保留。
"""

from sqlalchemy import Column, DateTime, Enum, Integer, Text
from sqlalchemy.sql import func
from ..database.connection import Base
from .enums import AuditAction


class AuditEntry(Base):
    """审计记录表"""
    __tablename__ = "audit_entries"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(Enum(AuditAction, name="audit_action", native_enum=False, length=32), nullable=False)
    user_id = Column(Integer, nullable=True)  # 为空表示系统操作
    order_id = Column(Integer, nullable=False, index=True)
    location_id = Column(Integer, nullable=True)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
