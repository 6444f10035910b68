"""枚举定义

工位状态、审计动作、用户角色、出货就绪度均为封闭的字符串枚举，
数据库中以字符串存储，避免拼写错误产生不可达状态。
"""

import enum


class OrderLocationStatus(str, enum.Enum):
    """订单在某工位上的状态"""
    not_started = "not_started"
    in_queue = "in_queue"
    in_progress = "in_progress"
    paused = "paused"
    done = "done"


class AuditAction(str, enum.Enum):
    """审计记录动作"""
    created = "created"
    updated = "updated"
    deleted = "deleted"
    started = "started"
    finished = "finished"
    paused = "paused"
    updated_quantity = "updated_quantity"
    shipped = "shipped"
    help_requested = "help_requested"
    help_resolved = "help_resolved"
    queued = "queued"
    queue_removed = "queue_removed"
    queue_reordered = "queue_reordered"
    global_queue_set = "global_queue_set"
    rush_set = "rush_set"
    rush_cleared = "rush_cleared"


class UserRole(str, enum.Enum):
    """用户角色，按权限从低到高"""
    shop = "shop"
    manager = "manager"
    admin = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def at_least(self, other: "UserRole") -> bool:
        return self.rank >= other.rank


_ROLE_RANK = {UserRole.shop: 0, UserRole.manager: 1, UserRole.admin: 2}


class Readiness(str, enum.Enum):
    """出货就绪度"""
    not_ready = "not_ready"
    part_ready = "part_ready"
    fully_ready = "fully_ready"
