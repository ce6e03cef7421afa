# core/config_validator.py

from typing import List

from core.config import settings
from core.logging_config import logger


def _route_problems(name: str, value: str) -> List[str]:
    if not value or not value.startswith("/"):
        return [f"{name} (must start with '/')"]
    return []


def validate_required_config() -> List[str]:
    """Settings the controllers cannot work without. Returns the problems found."""
    problems = []

    if settings.DEFAULT_PAGE_SIZE < 1:
        problems.append("DEFAULT_PAGE_SIZE (must be >= 1)")
    if settings.SEARCH_DEBOUNCE_MS < 0:
        problems.append("SEARCH_DEBOUNCE_MS (must be >= 0)")
    if settings.HTTP_TIMEOUT_SECONDS <= 0:
        problems.append("HTTP_TIMEOUT_SECONDS (must be > 0)")
    if not settings.PAGE_SIZE_PARAM:
        problems.append("PAGE_SIZE_PARAM (must not be empty)")

    problems += _route_problems("DEFAULT_ROUTE", settings.DEFAULT_ROUTE)
    problems += _route_problems("PERMISSIONS_ENDPOINT", settings.PERMISSIONS_ENDPOINT)
    problems += _route_problems("VALIDATE_TOKEN_ENDPOINT", settings.VALIDATE_TOKEN_ENDPOINT)
    for path in settings.PUBLIC_PATHS:
        problems += _route_problems("PUBLIC_PATHS entry", path)

    return problems


def validate_optional_config() -> List[str]:
    """Recommended settings. Returns warnings only."""
    warnings = []

    if not settings.API_URL:
        warnings.append("API_URL (backend calls will use relative URLs)")
    elif not settings.API_URL.startswith(("http://", "https://")):
        warnings.append(f"API_URL '{settings.API_URL}' has no http(s) scheme")

    if settings.AUTH_ROUTE not in settings.PUBLIC_PATHS:
        warnings.append(f"AUTH_ROUTE '{settings.AUTH_ROUTE}' is not public; signed-out users cannot reach it")

    return warnings


def validate_config_on_startup():
    """
    Raises RuntimeError when a required setting is unusable.
    Optional problems are logged as warnings.
    """
    required = validate_required_config()
    if required:
        error_msg = f"Invalid configuration: {', '.join(required)}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    for warning in validate_optional_config():
        logger.warning(f"Optional configuration missing: {warning}")

    logger.info("Configuration validation passed")
