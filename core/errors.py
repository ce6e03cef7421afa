# core/errors.py

from typing import Optional

import httpx
from fastapi import HTTPException


class FetchError(Exception):
    """
    Raised by backend helpers when a request fails or returns an
    unusable body. Carries the HTTP status when there was one.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_http_error(error: Exception) -> str:
    """
    Safely extract readable details from httpx / backend errors.
    Handles:
      • HTTP status errors (Laravel-style {"message": ...} or {"detail": ...} bodies)
      • Transport errors (timeouts, refused connections)
      • FetchError raised by our own helpers
      • Generic Python exceptions
    """

    # Case 1: our own wrapper
    if isinstance(error, FetchError):
        return error.message

    # Case 2: non-2xx responses
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            for key in ("message", "detail", "error"):
                if body.get(key):
                    return f"HTTP {response.status_code}: {body[key]}"

        return f"HTTP {response.status_code}"

    # Case 3: transport level (no response at all)
    if isinstance(error, httpx.TimeoutException):
        return "Request timed out"

    if isinstance(error, httpx.RequestError):
        return f"Network error: {error.__class__.__name__}"

    # Case 4: plain string fallback
    try:
        return str(error) or error.__class__.__name__
    except Exception:
        return "Unknown error"


def handle_fetch_error(error: Exception, operation: str = "Fetch") -> str:
    """
    Log a failed backend call and return the user-facing message
    shown in the transient notification. Never raises.
    """
    from core.logging_config import logger

    detail = extract_http_error(error)
    logger.error(f"{operation}: {detail}")

    status_code = getattr(error, "status_code", None)
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code

    if status_code == 401:
        return f"{operation} failed: your session has expired"
    if status_code == 403:
        return f"{operation} failed: access denied"
    if status_code == 404:
        return f"{operation} failed: resource not found"
    if isinstance(error, httpx.RequestError):
        return f"{operation} failed: backend unreachable"

    return f"{operation} failed"


def backend_error(error: Exception, message: str = "Backend error"):
    """
    Convert backend failures into clean HTTPExceptions for the gateway.
    Always raises; caller should wrap with try/except.
    """

    detail = extract_http_error(error)

    raise HTTPException(
        status_code=502,
        detail=f"{message}: {detail}"
    )
