# routers/__init__.py

from fastapi import APIRouter

from .health import router as health_router
from .session import router as session_router
from .access import router as access_router
from .roles import router as roles_router
from .lists import router as lists_router
from .notifications import router as notifications_router


# Master router for embedding the gateway in another app
api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(session_router)
api_router.include_router(access_router)
api_router.include_router(roles_router)
api_router.include_router(lists_router)
api_router.include_router(notifications_router)

__all__ = ["api_router"]
