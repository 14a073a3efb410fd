"""Dashboard document browser state.

Server queries run whenever category, sort or date change. Each query takes
a generation number and its result is applied only if no newer query was
started meanwhile, so the latest selection always wins regardless of
response order. Search is local: it narrows the fetched set and never
queries the server. Download clicks log access in a background task whose
failure is ignored.
"""

import asyncio
from enum import StrEnum

import structlog
from pydantic import ValidationError

from portal.client.api import PortalApiError, PortalClient
from portal.core.modules.access_log.models import AccessAction
from portal.core.modules.document.models import CategoryFilter, DateRule, Document, DocumentQuery, SortRule
from portal.utils import is_downloadable_url

logger = structlog.get_logger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.12
DOWNLOAD_ERROR_SECONDS = 4.0
MISSING_LINK_MESSAGE = "Document link is unavailable. Please contact support."
FETCH_ERROR_MESSAGE = "Failed to load documents."


class BrowserStatus(StrEnum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


def matches_search(document: Document, term: str) -> bool:
    """Case-insensitive substring match on title, category or file type."""
    if not term:
        return True
    needle = term.casefold()
    return any(needle in value.casefold() for value in (document.title, document.category, document.file_type))


class DocumentBrowser:
    def __init__(
        self,
        client: PortalClient,
        query: DocumentQuery | None = None,
        search_debounce: float = SEARCH_DEBOUNCE_SECONDS,
        download_error_seconds: float = DOWNLOAD_ERROR_SECONDS,
    ) -> None:
        self._client = client
        self._search_debounce = search_debounce
        self._download_error_seconds = download_error_seconds
        self.query = query or DocumentQuery()
        self.documents: list[Document] = []
        self.search_term = ""
        self.loading = False
        self.fetch_error: str | None = None
        self.download_error: str | None = None
        self._generation = 0
        self._search_task: asyncio.Task[None] | None = None
        self._dismiss_task: asyncio.Task[None] | None = None
        self._log_tasks: set[asyncio.Task[None]] = set()

    @property
    def visible_documents(self) -> list[Document]:
        return [d for d in self.documents if matches_search(d, self.search_term)]

    @property
    def status(self) -> BrowserStatus:
        if self.loading:
            return BrowserStatus.LOADING
        if self.fetch_error:
            return BrowserStatus.ERROR
        if not self.visible_documents:
            return BrowserStatus.EMPTY
        return BrowserStatus.READY

    async def refresh(self) -> None:
        """Query the server for the current selection; superseded responses are dropped."""
        self._generation += 1
        generation = self._generation
        query = self.query
        self.loading = True
        try:
            documents = await self._client.list_documents(query)
        except PortalApiError as exc:
            self._fail_fetch(generation, exc.message or FETCH_ERROR_MESSAGE)
            return
        except ValidationError:
            logger.warning("malformed_documents_response", generation=generation)
            self._fail_fetch(generation, FETCH_ERROR_MESSAGE)
            return

        if generation != self._generation:
            logger.debug("stale_documents_ignored", generation=generation, latest=self._generation)
            return
        self.documents = documents
        self.fetch_error = None
        self.loading = False

    def _fail_fetch(self, generation: int, message: str) -> None:
        if generation == self._generation:
            self.fetch_error = message
            self.loading = False

    async def set_filters(
        self,
        category: CategoryFilter | None = None,
        sort: SortRule | None = None,
        date: DateRule | None = None,
    ) -> None:
        """Change any of the server-side filters and re-query."""
        changes = {
            key: value for key, value in (("category", category), ("sort", sort), ("date", date)) if value is not None
        }
        self.query = self.query.model_copy(update=changes)
        await self.refresh()

    def type_search(self, text: str) -> None:
        """Schedule a search term update; a newer keystroke cancels the pending one."""
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.create_task(self._apply_search(text))

    async def _apply_search(self, text: str) -> None:
        await asyncio.sleep(self._search_debounce)
        self.search_term = text

    def click_download(self, document: Document) -> bool:
        """Handle a download click; returns whether the link navigation may proceed.

        Access logging is scheduled in both cases and never delays the answer.
        """
        self._schedule_access_log(document)
        if is_downloadable_url(document.file_url):
            return True
        self._show_download_error(MISSING_LINK_MESSAGE)
        return False

    def _schedule_access_log(self, document: Document) -> None:
        task = asyncio.create_task(self._log_access(document))
        # Keep a reference until done so the task is not garbage collected
        self._log_tasks.add(task)
        task.add_done_callback(self._log_tasks.discard)

    async def _log_access(self, document: Document) -> None:
        try:
            await self._client.log_access(document.document_id or document.id, document.title, AccessAction.DOWNLOAD)
        except PortalApiError as exc:
            logger.debug("access_log_failed", document_id=document.id, error=exc.message)

    def _show_download_error(self, message: str) -> None:
        self.download_error = message
        if self._dismiss_task is not None and not self._dismiss_task.done():
            self._dismiss_task.cancel()
        self._dismiss_task = asyncio.create_task(self._dismiss_download_error())

    async def _dismiss_download_error(self) -> None:
        await asyncio.sleep(self._download_error_seconds)
        self.download_error = None

    async def wait_pending(self) -> None:
        """Wait for pending search updates and access-log calls."""
        pending = [t for t in (self._search_task, *self._log_tasks) if t is not None]
        await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel timers and let in-flight access-log calls finish."""
        for task in (self._search_task, self._dismiss_task):
            if task is not None and not task.done():
                task.cancel()
        await asyncio.gather(*self._log_tasks, return_exceptions=True)
