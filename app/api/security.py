"""HTTP Basic authentication for the write boundary API."""

from __future__ import annotations

import secrets
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.config import AppSettings


def api_build_basic_auth_dependency(settings: AppSettings) -> Callable[..., None]:
    """Build a dependency enforcing Basic auth when API credentials are configured.

    Args:
        settings: Runtime settings carrying optional API credentials.

    Returns:
        Callable[..., None]: FastAPI dependency; a no-op when credentials are not configured.

    Raises:
        ValueError: Raised when settings are missing.
    """

    if settings is None:
        raise ValueError("settings must not be None")

    if settings.api_username is None or settings.api_password is None:

        def api_allow_anonymous() -> None:
            return None

        return api_allow_anonymous

    expected_username = settings.api_username.encode("utf-8")
    expected_password = settings.api_password.encode("utf-8")
    basic_security = HTTPBasic()

    def api_require_basic_auth(credentials: HTTPBasicCredentials = Depends(basic_security)) -> None:
        username_matches = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username)
        password_matches = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password)
        if not (username_matches and password_matches):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="invalid credentials",
                headers={"WWW-Authenticate": "Basic"},
            )

    return api_require_basic_auth
