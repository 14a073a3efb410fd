from typing import Annotated, cast

from fastapi import Depends, Request

from portal.app import App
from portal.core.modules.session.models import AuthToken
from portal.errors import AuthenticationError
from portal.web.cookies import SessionCookieOptions, read_session_cookie


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_cookie_options(request: Request) -> SessionCookieOptions:
    return cast(SessionCookieOptions, request.app.state.cookie_options)


async def get_optional_auth_token(
    request: Request,
    options: Annotated[SessionCookieOptions, Depends(get_cookie_options)],
) -> AuthToken | None:
    """Read the session token from the request cookie, if present."""
    return read_session_cookie(request.cookies, options)


async def get_auth_token(
    auth_token: Annotated[AuthToken | None, Depends(get_optional_auth_token)],
) -> AuthToken:
    """Require a session cookie; the token itself is validated by the App facade."""
    if auth_token is None:
        raise AuthenticationError("Not authenticated")
    return auth_token


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
CookieOptionsDep = Annotated[SessionCookieOptions, Depends(get_cookie_options)]
OptionalAuthTokenDep = Annotated[AuthToken | None, Depends(get_optional_auth_token)]
AuthTokenDep = Annotated[AuthToken, Depends(get_auth_token)]
