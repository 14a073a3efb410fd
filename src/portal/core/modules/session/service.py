import secrets
from datetime import UTC, timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from portal.core.core import Service
from portal.core.db import store_errors
from portal.core.modules.investor.models import Investor
from portal.core.modules.session.models import AuthToken, Session
from portal.errors import AuthenticationError, NotFoundError
from portal.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing investor sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("investor_id", 1)])
        # TTL index removes sessions the cookie would no longer be sent for
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=self.core.config.session_max_age)

    async def create_session(self, investor_id: str) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(investor_id=investor_id, auth_token=auth_token)
        with store_errors("create_session"):
            await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    async def get_authenticated_investor(self, auth_token: AuthToken) -> Investor:
        """Resolve a token to its investor, re-reading the investor on every call.

        Raises AuthenticationError for unknown or expired tokens and for
        investors that are missing or inactive.
        """
        with store_errors("get_session"):
            doc = await self._collection.find_one({"auth_token": auth_token})
        if doc is None:
            raise AuthenticationError("Invalid or expired session")

        session = Session.model_validate(doc)
        created_at = session.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=UTC)
        if now() - created_at > timedelta(seconds=self.core.config.session_max_age):
            raise AuthenticationError("Invalid or expired session")

        try:
            investor = await self.core.services.investor.get_investor(session.investor_id)
        except NotFoundError as exc:
            raise AuthenticationError("Invalid or expired session") from exc

        if not investor.is_active:
            logger.info("session_rejected_inactive", investor_id=investor.id)
            raise AuthenticationError("Invalid or expired session")
        return investor

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_authenticated_investor(auth_token)
        except AuthenticationError:
            return False
        return True

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        with store_errors("invalidate_session"):
            await self._collection.delete_one({"auth_token": auth_token})
