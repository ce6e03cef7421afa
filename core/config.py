from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Textile ERP Client Core"
    ENV: str = "development"
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # -------------------------------------------------
    # Backend (REST API the pages are wired to)
    # -------------------------------------------------
    API_URL: Optional[str] = Field(None, env="API_URL")
    HTTP_TIMEOUT_SECONDS: float = Field(15.0, env="HTTP_TIMEOUT_SECONDS")

    PERMISSIONS_ENDPOINT: str = "/permissions"
    VALIDATE_TOKEN_ENDPOINT: str = "/validate-token"

    # -------------------------------------------------
    # List controller defaults
    # -------------------------------------------------
    SEARCH_DEBOUNCE_MS: int = Field(500, env="SEARCH_DEBOUNCE_MS", description="Delay after the last keystroke before a search fetch fires")
    DEFAULT_PAGE_SIZE: int = Field(10, env="DEFAULT_PAGE_SIZE")
    PAGE_SIZE_PARAM: str = "per_page"

    # -------------------------------------------------
    # Session / credential storage
    # -------------------------------------------------
    AUTH_STORAGE_PATH: str = Field(".textile_erp/auth.json", env="AUTH_STORAGE_PATH")

    # -------------------------------------------------
    # Navigation
    # -------------------------------------------------
    DEFAULT_ROUTE: str = "/"
    AUTH_ROUTE: str = "/auth"
    PUBLIC_PATHS: List[str] = ["/auth"]

    # -------------------------------------------------
    # CORS (page views served from another origin)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # -------------------------------------------------
    # Notifications (toasts)
    # -------------------------------------------------
    NOTIFICATION_HISTORY: int = Field(50, env="NOTIFICATION_HISTORY")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Normalize the backend URL once after loading settings
# -------------------------------------------------
if settings.API_URL:
    settings.API_URL = settings.API_URL.rstrip("/")
