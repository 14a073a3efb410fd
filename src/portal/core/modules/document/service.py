from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from portal.core.core import Service
from portal.core.db import store_errors
from portal.core.modules.document.filters import apply_query
from portal.core.modules.document.models import CategoryFilter, Document, DocumentQuery
from portal.utils import now

logger = structlog.get_logger(__name__)


class DocumentService(Service):
    """Reads documents from the CMS collection and applies listing rules."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("documents")

    async def on_start(self) -> None:
        await self._collection.create_index([("category", 1)])

    async def list_documents(self, query: DocumentQuery) -> list[Document]:
        """List documents matching the query, dates evaluated against the current UTC day."""
        mongo_filter: dict[str, Any] = {}
        if query.category != CategoryFilter.ALL:
            mongo_filter["category"] = query.category.value

        # Date rules and sorting run in Python: published_date is a free-form CMS string
        with store_errors("list_documents"):
            documents = await Document.list_cursor(self._collection.find(mongo_filter))

        result = apply_query(documents, query, now().date())
        logger.debug("documents_listed", query=query.model_dump(mode="json"), count=len(result))
        return result
