"""审计记录与求助记录数据结构定义"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from ..models.enums import AuditAction


class AuditEntryRead(BaseModel):
    id: int
    action: AuditAction
    user_id: Optional[int] = None
    order_id: int
    location_id: Optional[int] = None
    details: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class HelpRequestRead(BaseModel):
    id: int
    order_id: int
    location_id: int
    user_id: Optional[int] = None
    notes: Optional[str] = None
    is_resolved: bool
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True
