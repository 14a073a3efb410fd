from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from portal.core.core import Service
from portal.core.db import store_errors
from portal.core.modules.access_log.models import AccessAction, AccessLog

logger = structlog.get_logger(__name__)


class AccessLogService(Service):
    """Write-once audit sink for document access events."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("access_logs")

    async def on_start(self) -> None:
        await self._collection.create_index([("investor_id", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def log_access(
        self, investor_id: str, document_id: str, document_title: str, action: AccessAction
    ) -> AccessLog:
        entry = AccessLog(
            investor_id=investor_id,
            document_id=document_id,
            document_title=document_title,
            action=action,
        )
        with store_errors("log_access"):
            await self._collection.insert_one(entry.to_mongo())
        logger.info("access_logged", investor_id=investor_id, document_id=document_id, action=action)
        return entry

    async def get_recent(self, limit: int = 100) -> list[AccessLog]:
        """Most recent access events, newest first."""
        with store_errors("list_access_logs"):
            return await AccessLog.list_cursor(self._collection.find({}).sort("created_at", -1).limit(limit))
