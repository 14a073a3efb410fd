"""Session cookie attributes shared by the issuing and clearing endpoints."""

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict
from starlette.responses import Response

from portal.config import Config
from portal.core.modules.session.models import AuthToken


class SessionCookieOptions(BaseModel):
    """Canonical cookie attributes; issue and clear must use the same instance."""

    name: str
    httponly: bool = True
    secure: bool
    samesite: Literal["lax", "strict", "none"]
    path: str
    domain: str | None = None
    max_age: int

    model_config = ConfigDict(frozen=True)


def session_cookie_options(config: Config) -> SessionCookieOptions:
    """Derive cookie options from configuration.

    `secure` follows `cookie_secure` when set, otherwise it is on for every
    environment except development. SameSite=None always requires Secure.
    """
    secure = config.cookie_secure if config.cookie_secure is not None else config.environment != "development"
    if config.cookie_samesite == "none":
        secure = True
    return SessionCookieOptions(
        name=config.cookie_name,
        secure=secure,
        samesite=config.cookie_samesite,
        path=config.base_path.rstrip("/") or "/",
        domain=config.cookie_domain,
        max_age=config.session_max_age,
    )


def issue_session_cookie(response: Response, options: SessionCookieOptions, auth_token: AuthToken) -> None:
    response.set_cookie(
        key=options.name,
        value=auth_token,
        max_age=options.max_age,
        path=options.path,
        domain=options.domain,
        secure=options.secure,
        httponly=options.httponly,
        samesite=options.samesite,
    )


def clear_session_cookie(response: Response, options: SessionCookieOptions) -> None:
    """Overwrite the session cookie with an empty value and max-age 0."""
    response.set_cookie(
        key=options.name,
        value="",
        max_age=0,
        path=options.path,
        domain=options.domain,
        secure=options.secure,
        httponly=options.httponly,
        samesite=options.samesite,
    )


def read_session_cookie(cookies: Mapping[str, str], options: SessionCookieOptions) -> AuthToken | None:
    value = cookies.get(options.name, "")
    return AuthToken(value) if value else None
