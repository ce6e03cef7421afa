from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core
from core.backend_client import create_backend_client
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import FetchError
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.health import router as health_router
from routers.session import router as session_router
from routers.access import router as access_router
from routers.roles import router as roles_router
from routers.lists import router as lists_router
from routers.notifications import router as notifications_router

from services.list_registry import get_list_registry


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app(backend_transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """
    `backend_transport` replaces the network transport of the backend
    client (tests route it to a stub app).
    """
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Textile ERP client core: access control and server-driven lists for page views",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup / shutdown
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"🚀 Starting {settings.PROJECT_NAME}")
        validate_config_on_startup()
        app.state.backend_client = create_backend_client(backend_transport)
        for route in app.routes:
            methods = ",".join(getattr(route, "methods", None) or [])
            logger.debug(f"➡️ {methods:10s} {getattr(route, 'path', route)}")

    @app.on_event("shutdown")
    async def on_shutdown():
        get_list_registry().close_all()
        client = getattr(app.state, "backend_client", None)
        if client is not None:
            await client.aclose()
            app.state.backend_client = None
        logger.info("Backend client closed")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500, 502):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(FetchError)
    async def handle_fetch(request: Request, exc: FetchError):
        logger.error(f"Backend call failed at {request.url}: {exc.message}")
        return JSONResponse(status_code=502, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(session_router)
    app.include_router(access_router)
    app.include_router(roles_router)
    app.include_router(lists_router)
    app.include_router(notifications_router)
    app.include_router(health_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse("/docs")

    return app


# Create the global FastAPI instance
app = create_app()
