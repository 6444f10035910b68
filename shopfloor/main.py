"""FastAPI主应用入口

车间生产跟踪系统的API服务：订单、工位流转、队列、求助与审计
- 使用依赖注入管理数据库会话与工作流编排器
- 工作流错误统一映射为带 error_type 的JSON响应
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1 import (
    audit_router,
    auth_router,
    help_requests_router,
    locations_router,
    order_locations_router,
    orders_router,
    queue_router,
)
from . import crud
from .config.settings import settings
from .core.errors import WorkflowError
from .database.connection import Base, SessionLocal, engine
from .models import User
from .models.enums import UserRole

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 启动时建表并确保存在管理员
    create_tables()
    yield


# 创建FastAPI应用实例
app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# 挂载API路由
app.include_router(auth_router, prefix="/api/v1")
app.include_router(orders_router, prefix="/api/v1")
app.include_router(order_locations_router, prefix="/api/v1")
app.include_router(queue_router, prefix="/api/v1")
app.include_router(locations_router, prefix="/api/v1")
app.include_router(help_requests_router, prefix="/api/v1")
app.include_router(audit_router, prefix="/api/v1")


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    """工作流错误 -> HTTP 响应"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_tables():
    # 开发环境下自动建表；生产环境由 DBA 管理表结构
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as exc:  # 数据库不可达时服务仍可启动，请求时再报错
        logger.warning("could not create tables on startup: %s", exc)
        return
    ensure_admin_user()


def ensure_admin_user():
    """没有任何用户时，按配置创建初始管理员"""
    with SessionLocal() as db:
        if db.query(User.id).first() is not None:
            return
        crud.create_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD, role=UserRole.admin)
        logger.warning("created initial admin user '%s'; change its password", settings.ADMIN_USERNAME)


@app.get("/health")
def health():
    return {"status": "ok", "version": settings.APP_VERSION}
