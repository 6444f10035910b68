from .auth import router as auth_router
from .orders import router as orders_router
from .order_locations import router as order_locations_router
from .queue import router as queue_router
from .locations import router as locations_router
from .help_requests import router as help_requests_router
from .audit import router as audit_router

__all__ = [
    "auth_router",
    "orders_router",
    "order_locations_router",
    "queue_router",
    "locations_router",
    "help_requests_router",
    "audit_router",
]
