"""工位数据库模型

定义车间工位（加工站）的数据模型
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database.connection import Base


class Location(Base):
    """工位表"""
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)  # 工位名称
    used_order = Column(Integer, nullable=False, index=True)  # 加工顺序
    # 主工位：用于提示尚需首道加工的订单（仅作提示，不强制先后）
    is_primary = Column(Boolean, nullable=False, default=False)
    # 创建订单时不自动排队，需手动加入
    skip_auto_queue = Column(Boolean, nullable=False, default=False)
    # 计数倍数，例如一件产品在该工位需要加工两次则为 2
    count_multiplier = Column(Float, nullable=False, default=1.0)
    # 不统计数量
    no_count = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    order_locations = relationship("OrderLocation", back_populates="location")
