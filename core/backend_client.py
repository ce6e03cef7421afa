# core/backend_client.py

from typing import Optional

import httpx

from core.config import settings
from core.errors import extract_http_error
from core.logging_config import logger


# ============================================================
# Backend HTTP Client Factory
# ============================================================

def create_backend_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Creates the shared async client for the REST backend.

    Endpoints are passed relative ("/inventory/raw/list") and resolved
    against API_URL. `transport` lets tests route requests to a stub app.
    Credentials are NOT baked in: each request attaches the current token.
    """
    base_url = settings.API_URL or ""
    if not base_url:
        logger.warning("API_URL not set, backend requests use relative URLs")

    return httpx.AsyncClient(
        base_url=base_url,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
        transport=transport,
        headers={"Content-Type": "application/json"},
    )


# ============================================================
# Ping the backend for health checks
# ============================================================

async def ping_backend(client: httpx.AsyncClient) -> dict:
    """
    Simple reachability check: any HTTP answer counts as reachable.
    """
    if client is None:
        return {"service": "Backend", "status": "not_configured"}

    try:
        response = await client.get("/", timeout=5.0)
        return {
            "service": "Backend",
            "status": "ok",
            "http_status": response.status_code,
        }
    except httpx.HTTPError as e:
        detail = extract_http_error(e)
        logger.error(f"Backend Ping Error: {detail}")
        return {"service": "Backend", "status": "error", "detail": detail}
