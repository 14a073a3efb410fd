from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from portal.config import Config
from portal.core.core import Core
from portal.core.modules.access_log.models import AccessAction, AccessLog
from portal.core.modules.document.models import Document, DocumentQuery
from portal.core.modules.investor.models import InvestorType, InvestorView
from portal.core.modules.session.models import AuthToken
from portal.errors import AuthenticationError, ValidationError

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations, validates sessions before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        """Check if authentication token is valid."""
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def login(self, email: str, password: str, investor_type: InvestorType) -> tuple[AuthToken, InvestorView]:
        """Validate credentials and create a session.

        All credential failures raise the same AuthenticationError.
        """
        if not email.strip() or not password.strip():
            raise ValidationError("Please enter email and password.")

        investor = await self._core.services.investor.validate_credentials(email, password, investor_type)
        if investor is None:
            raise AuthenticationError
        auth_token = await self._core.services.session.create_session(investor.id)
        logger.info("investor_logged_in", investor_id=investor.id)
        return auth_token, InvestorView.from_domain(investor)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate the stored session if any. Never raises."""
        if auth_token is None:
            return
        try:
            await self._core.services.session.invalidate_session(auth_token)
        except Exception:
            logger.exception("session_invalidate_failed")

    async def get_session(self, auth_token: AuthToken | None) -> InvestorView | None:
        """Resolve the current session to an investor, None when not authenticated.

        Store and internal failures also yield None.
        """
        if auth_token is None:
            return None
        try:
            investor = await self._core.services.access.ensure_authenticated(auth_token)
        except AuthenticationError:
            return None
        except Exception:
            logger.exception("session_check_failed")
            return None
        return InvestorView.from_domain(investor)

    async def get_current_investor(self, auth_token: AuthToken) -> InvestorView:
        investor = await self._core.services.access.ensure_authenticated(auth_token)
        return InvestorView.from_domain(investor)

    async def list_documents(self, auth_token: AuthToken, query: DocumentQuery) -> list[Document]:
        """List documents for an authenticated investor."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.document.list_documents(query)

    async def log_access(
        self, auth_token: AuthToken, document_id: str, document_title: str, action: AccessAction
    ) -> AccessLog:
        """Record a document access event against the requesting investor."""
        investor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.access_log.log_access(investor.id, document_id, document_title, action)

    async def get_access_logs(self, auth_token: AuthToken, limit: int = 100) -> list[AccessLog]:
        """Get recent access events (admin only)."""
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.access_log.get_recent(limit)
