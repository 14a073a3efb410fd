from typing import Any

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.collation import Collation, CollationStrength

from portal.core.core import Service
from portal.core.db import store_errors
from portal.core.modules.investor.models import Investor, InvestorType
from portal.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

# Emails written by the CMS keep their original case
EMAIL_COLLATION = Collation(locale="en", strength=CollationStrength.SECONDARY)

# Verified against when the email is unknown so every failure costs one bcrypt check
_DUMMY_PASSWORD_HASH = bcrypt.hashpw(b"unknown-investor", bcrypt.gensalt())


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password(password: str, password_hash: bytes) -> bool:
    """Verify a password against a bcrypt hash; passwords beyond the bcrypt limit never match."""
    encoded = password.encode("utf-8")
    matched = bcrypt.checkpw(encoded[:BCRYPT_MAX_PASSWORD_BYTES], password_hash)
    return matched and len(encoded) <= BCRYPT_MAX_PASSWORD_BYTES


class InvestorService(Service):
    """Reads investors from the identity store.

    Records are never cached: activation changes in the store take effect
    on the next request.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("investors")

    async def on_start(self) -> None:
        await self._collection.create_index([("email", 1)], unique=True, collation=EMAIL_COLLATION)
        await self._collection.create_index([("investor_id", 1)], unique=True)

    async def get_investor(self, investor_id: str) -> Investor:
        """Get investor by internal ID."""
        with store_errors("get_investor"):
            doc = await self._collection.find_one({"_id": investor_id})
        if doc is None:
            raise NotFoundError(f"Investor '{investor_id}' not found")
        return Investor.model_validate(doc)

    async def find_by_email(self, email: str) -> Investor | None:
        """Case-insensitive lookup by email."""
        with store_errors("find_investor_by_email"):
            doc = await self._collection.find_one({"email": email.strip()}, collation=EMAIL_COLLATION)
        return Investor.model_validate(doc) if doc is not None else None

    async def validate_credentials(self, email: str, password: str, investor_type: InvestorType) -> Investor | None:
        """Return the investor if email, password, type selector and active flag all check out.

        Every failure returns None; the reason is only logged.
        """
        investor = await self.find_by_email(email)
        if investor is None:
            check_password(password, _DUMMY_PASSWORD_HASH)
            logger.info("investor_login_failed", reason="unknown_email")
            return None
        if not check_password(password, investor.password_hash.encode("utf-8")):
            logger.info("investor_login_failed", reason="wrong_password", investor_id=investor.id)
            return None
        if investor_type != InvestorType.ANY and investor.investor_type != investor_type:
            logger.info("investor_login_failed", reason="type_mismatch", investor_id=investor.id)
            return None
        if not investor.is_active:
            logger.info("investor_login_failed", reason="inactive", investor_id=investor.id)
            return None
        return investor

    async def create_investor(
        self,
        investor_id: str,
        name: str,
        email: str,
        password: str,
        investor_type: InvestorType = InvestorType.ANY,
        is_active: bool = True,
        is_admin: bool = False,
    ) -> Investor:
        """Create investor with hashed password (used for seeding the identity store)."""
        if await self.find_by_email(email) is not None:
            raise ValidationError(f"Investor with email '{email}' already exists")

        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        investor = Investor(
            investor_id=investor_id,
            name=name,
            email=normalize_email(email),
            investor_type=investor_type,
            is_active=is_active,
            is_admin=is_admin,
            password_hash=password_hash,
        )
        with store_errors("create_investor"):
            await self._collection.insert_one(investor.to_mongo())
        logger.debug("investor_created", investor_id=investor.id)
        return investor

    async def set_active(self, investor_id: str, is_active: bool) -> None:
        """Activate or deactivate an investor."""
        with store_errors("set_investor_active"):
            result = await self._collection.update_one({"_id": investor_id}, {"$set": {"is_active": is_active}})
        if result.matched_count == 0:
            raise NotFoundError(f"Investor '{investor_id}' not found")
