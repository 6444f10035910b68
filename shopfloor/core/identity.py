"""操作人身份

编排器只依赖 Actor（用户ID + 角色）做审计归属和权限校验，
令牌解析在 shopfloor.auth 中完成。
"""

from dataclasses import dataclass
from typing import Optional

from ..models.enums import UserRole
from .errors import PermissionDenied


@dataclass(frozen=True)
class Actor:
    user_id: Optional[int]
    role: UserRole = UserRole.shop


# 系统操作：审计记录中 user_id 为空
SYSTEM_ACTOR = Actor(user_id=None, role=UserRole.admin)


def require_role(actor: Actor, role: UserRole, action: str) -> None:
    if not actor.role.at_least(role):
        raise PermissionDenied(f"Role '{actor.role.value}' may not {action}; requires '{role.value}'")
