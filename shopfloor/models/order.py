"""订单模型定义"""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database.connection import Base


class Order(Base):
    """订单模型"""
    __tablename__ = "orders"
    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(64), nullable=False, unique=True, index=True)
    # 外部参考号（客户/ERP 单号）
    reference_number = Column(String(64), nullable=False)
    client = Column(String(255), nullable=False)
    due_date = Column(DateTime, nullable=False)
    total_quantity = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    # 所有工位均完成后置位
    is_finished = Column(Boolean, nullable=False, default=False)
    # 出货状态
    is_shipped = Column(Boolean, nullable=False, default=False)
    partially_shipped = Column(Boolean, nullable=False, default=False)
    shipped_quantity = Column(Integer, nullable=False, default=0)
    # 全局队列位置（从1开始），为空表示不在全局队列中
    global_queue_position = Column(Integer, nullable=True, index=True)
    # 加急标记及加急时间，仅影响展示排序
    rush = Column(Boolean, nullable=False, default=False)
    rush_set_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    created_by = Column(Integer, nullable=True)

    locations = relationship(
        "OrderLocation",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLocation.location_id",
    )
    help_requests = relationship(
        "HelpRequest",
        back_populates="order",
        cascade="all, delete-orphan",
    )
