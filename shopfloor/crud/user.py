"""用户数据操作

定义对用户数据的增删改查操作
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..models import User
from ..models.enums import UserRole
from ..security import get_password_hash, password_needs_rehash, verify_password


def get_user(db: Session, user_id: int) -> Optional[User]:
    """根据ID获取用户"""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """根据用户名获取用户"""
    return db.query(User).filter(User.username == username).first()


def create_user(
    db: Session,
    username: str,
    password: str,
    full_name: Optional[str] = None,
    role: UserRole = UserRole.shop,
) -> User:
    """创建用户（密码哈希后存储）"""
    db_user = User(
        username=username,
        hashed_password=get_password_hash(password),
        full_name=full_name,
        role=role,
        active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def set_password(db: Session, db_user: User, password: str) -> User:
    """重置用户密码"""
    db_user.hashed_password = get_password_hash(password)
    db.commit()
    db.refresh(db_user)
    return db_user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """验证用户凭据，停用的用户视为验证失败"""
    user = get_user_by_username(db, username)
    if not user or not user.active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    if password_needs_rehash(user.hashed_password):
        set_password(db, user, password)
    return user
