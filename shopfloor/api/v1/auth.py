from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ... import crud, schemas
from ...auth import create_access_token, get_current_actor
from ...core import Actor
from ...database.connection import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=schemas.Token)
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """用户名密码登录，返回 Bearer 令牌"""
    user = crud.authenticate_user(db, form.username, form.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials", headers={"WWW-Authenticate": "Bearer"})
    token = create_access_token({"sub": user.username, "role": user.role.value})
    return schemas.Token(access_token=token)


@router.get("/me", response_model=schemas.UserRead)
def whoami(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """当前登录用户"""
    return crud.get_user(db, actor.user_id)
