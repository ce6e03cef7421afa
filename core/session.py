# core/session.py

"""
Signed-in credential state.

The bearer token and user record are persisted to a small JSON file (the
client's durable storage) and re-read on every access, so controllers always
see the current credential. login() and logout() are the only writers.
"""

import json
from pathlib import Path
from threading import Lock
from typing import Optional

import httpx
from pydantic import ValidationError

from core.cache import cache_delete_prefix
from core.config import settings
from core.errors import extract_http_error
from core.logging_config import logger
from models.auth import Credential, SessionUser
from models.enums import Role


PERMISSION_CACHE_PREFIX = "permissions:"


class Session:
    def __init__(self, storage_path: Optional[str] = None):
        self._path = Path(storage_path or settings.AUTH_STORAGE_PATH)
        self._lock = Lock()

    @property
    def storage_path(self) -> Path:
        return self._path

    # -------------------------------------------------
    # Storage
    # -------------------------------------------------
    def _read(self) -> Optional[Credential]:
        with self._lock:
            if not self._path.exists():
                return None
            try:
                raw = json.loads(self._path.read_text(encoding="utf-8"))
                return Credential.model_validate(raw)
            except (OSError, ValueError, ValidationError) as e:
                logger.warning(f"Stored credential unreadable ({self._path}): {e}")
                return None

    def _write(self, credential: Credential):
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(credential.model_dump_json(), encoding="utf-8")

    def _remove(self):
        with self._lock:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass

    # -------------------------------------------------
    # Accessors (read per call)
    # -------------------------------------------------
    @property
    def token(self) -> Optional[str]:
        credential = self._read()
        return credential.token if credential else None

    @property
    def user(self) -> Optional[SessionUser]:
        credential = self._read()
        return credential.user if credential else None

    @property
    def role(self) -> Optional[Role]:
        user = self.user
        return user.app_role if user else None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def auth_headers(self) -> dict:
        token = self.token
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # -------------------------------------------------
    # Lifecycle
    # -------------------------------------------------
    def login(self, token: str, user: SessionUser):
        """Store a freshly acquired credential. Cached permissions are dropped."""
        self._write(Credential(token=token, user=user))
        cache_delete_prefix(PERMISSION_CACHE_PREFIX)
        logger.info(f"Session started for {user.email or user.name or user.id} ({user.app_role})")

    def logout(self):
        self._remove()
        cache_delete_prefix(PERMISSION_CACHE_PREFIX)
        logger.info("Session ended")

    async def validate(self, client: httpx.AsyncClient) -> bool:
        """
        Ask the backend whether the stored token is still valid.

        Invalid tokens and network failures both clear the stored credential.
        A fresh user record from the backend replaces the stored one.
        """
        credential = self._read()
        if credential is None:
            return False

        try:
            response = await client.post(
                settings.VALIDATE_TOKEN_ENDPOINT,
                headers=self.auth_headers(),
            )
            data = response.json() if response.content else {}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Token validation failed: {extract_http_error(e)}")
            self.logout()
            return False

        if not response.is_success or not isinstance(data, dict) or not data.get("valid"):
            logger.info("Stored token rejected by backend")
            self.logout()
            return False

        if isinstance(data.get("user"), dict):
            try:
                fresh_user = SessionUser.model_validate(data["user"])
                self._write(Credential(token=credential.token, user=fresh_user))
                if fresh_user.app_role != credential.user.app_role:
                    cache_delete_prefix(PERMISSION_CACHE_PREFIX)
            except ValidationError as e:
                logger.warning(f"Ignoring malformed user from token validation: {e}")

        return True


# Global instance for the running client
_session: Optional[Session] = None


def get_session() -> Session:
    global _session
    if _session is None:
        _session = Session()
    return _session


def set_session(session: Session) -> Session:
    """Swap the process-wide session (tests, alternate storage paths)."""
    global _session
    _session = session
    return session
