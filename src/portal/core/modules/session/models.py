"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import Field

from portal.core.db import MongoModel
from portal.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """Investor authentication session.

    Indexed on auth_token - unique, investor_id, created_at (TTL = session_max_age).
    """

    investor_id: str
    auth_token: str
    created_at: datetime = Field(default_factory=now)
