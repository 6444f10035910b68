"""用户数据结构定义

定义用户相关的Pydantic模型
"""

from pydantic import BaseModel
from typing import Optional

from ..models.enums import UserRole


class UserBase(BaseModel):
    """用户基础模型"""
    username: str
    full_name: Optional[str] = None
    role: UserRole = UserRole.shop


class UserRead(UserBase):
    """读取用户时的模型"""
    id: int
    active: bool

    class Config:
        from_attributes = True


class Token(BaseModel):
    """登录令牌"""
    access_token: str
    token_type: str = "bearer"
