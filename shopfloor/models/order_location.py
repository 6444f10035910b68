"""订单工位数据库模型

订单在每个工位上的流转状态，是工作流状态的基本单元
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database.connection import Base
from .enums import OrderLocationStatus


class OrderLocation(Base):
    """订单工位表"""
    __tablename__ = "order_locations"
    __table_args__ = (
        UniqueConstraint("order_id", "location_id", name="uq_order_location"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False, index=True)
    status = Column(
        Enum(OrderLocationStatus, name="order_location_status", native_enum=False, length=16),
        nullable=False,
        default=OrderLocationStatus.not_started,
    )
    # 工位内队列位置，仅在 in_queue 状态下非空
    queue_position = Column(Integer, nullable=True)
    completed_quantity = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    order = relationship("Order", back_populates="locations")
    location = relationship("Location", back_populates="order_locations")

    def __repr__(self):
        return (
            f"<OrderLocation order={self.order_id} location={self.location_id} "
            f"status={self.status} queue={self.queue_position}>"
        )
