"""Per-view session checks for the login and dashboard views."""

from dataclasses import dataclass
from enum import StrEnum

import structlog

from portal.client.api import PortalApiError, PortalClient, SessionState
from portal.core.modules.investor.models import InvestorType, InvestorView

logger = structlog.get_logger(__name__)

EMPTY_CREDENTIALS_MESSAGE = "Please enter email and password."


class View(StrEnum):
    LOGIN = "/"
    DASHBOARD = "/dashboard"


@dataclass(frozen=True)
class Redirect:
    view: View
    url: str


@dataclass(frozen=True)
class LoginResult:
    redirect: Redirect | None = None
    error: str | None = None


def is_session_usable(state: SessionState) -> bool:
    """Single predicate shared by both views, so they can never redirect to each other in a loop."""
    return state.authenticated and state.investor is not None and state.investor.is_active


class SessionGuard:
    def __init__(self, client: PortalClient, base_path: str = "/portal") -> None:
        self._client = client
        self._base_path = base_path.rstrip("/")

    def redirect_to(self, view: View) -> Redirect:
        return Redirect(view=view, url=f"{self._base_path}{view.value}")

    async def current_investor(self) -> InvestorView | None:
        """Investor of a usable session, None otherwise (including when the check itself fails)."""
        try:
            state = await self._client.get_session()
        except PortalApiError as exc:
            logger.debug("session_check_failed", error=exc.message, status_code=exc.status_code)
            return None
        return state.investor if is_session_usable(state) else None

    async def enter_dashboard(self) -> InvestorView | Redirect:
        """Return the investor to render the dashboard for, or a redirect to the login view."""
        investor = await self.current_investor()
        if investor is None:
            return self.redirect_to(View.LOGIN)
        return investor

    async def enter_login(self) -> Redirect | None:
        """Return a redirect to the dashboard when already signed in, else None to render the form."""
        if await self.current_investor() is not None:
            return self.redirect_to(View.DASHBOARD)
        return None

    async def login(self, email: str, password: str, investor_type: InvestorType = InvestorType.ANY) -> LoginResult:
        email, password = email.strip(), password.strip()
        if not email or not password:
            return LoginResult(error=EMPTY_CREDENTIALS_MESSAGE)
        try:
            await self._client.login(email, password, investor_type)
        except PortalApiError as exc:
            return LoginResult(error=exc.message or "Login failed")
        return LoginResult(redirect=self.redirect_to(View.DASHBOARD))

    async def logout(self) -> Redirect:
        """Clear the session; the redirect to login happens even if the call fails."""
        try:
            await self._client.logout()
        except PortalApiError as exc:
            logger.debug("logout_failed", error=exc.message)
        return self.redirect_to(View.LOGIN)
