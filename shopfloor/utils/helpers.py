"""工具函数模块

包含一些常用的工具函数
"""

import math
from datetime import datetime


def round_half_up(value: float) -> int:
    """四舍五入到整数（0.5 向上取整，与前端 Math.round 一致）"""
    return int(math.floor(value + 0.5))


def effective_quantity(total_quantity: int, count_multiplier) -> int:
    """根据工位计数倍数计算该工位的有效总数

    有效总数 = ceil(订单总数 * 计数倍数)，倍数为空或非正数时按 1 处理
    """
    multiplier = count_multiplier if count_multiplier and count_multiplier > 0 else 1
    return int(math.ceil(total_quantity * multiplier))


def utcnow() -> datetime:
    """当前 UTC 时间（不带时区，与数据库字段保持一致）"""
    return datetime.utcnow()

