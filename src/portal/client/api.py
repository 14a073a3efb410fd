"""HTTP client for the portal API, used by the browser-side session guard and document browser."""

from typing import Any, Self

import httpx
from pydantic import BaseModel

from portal.core.modules.access_log.models import AccessAction
from portal.core.modules.document.models import Document, DocumentQuery
from portal.core.modules.investor.models import InvestorType, InvestorView

UNREACHABLE_MESSAGE = "Cannot reach API. Please try again."


class PortalApiError(Exception):
    """Raised for non-2xx responses and transport failures (status_code None)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SessionState(BaseModel):
    authenticated: bool
    investor: InvestorView | None = None


class PortalClient:
    """Cookie-holding API client; one instance plays the role of one browser."""

    def __init__(self, base_url: str, base_path: str = "/portal", http_client: httpx.AsyncClient | None = None) -> None:
        self._http = http_client or httpx.AsyncClient(base_url=base_url)
        self._api = f"{base_path.rstrip('/')}/api"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_session(self) -> SessionState:
        data = await self._request("GET", "/auth/session")
        return SessionState.model_validate(data)

    async def login(self, email: str, password: str, investor_type: InvestorType = InvestorType.ANY) -> InvestorView:
        data = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password, "investorType": investor_type.value},
        )
        state = SessionState.model_validate(data)
        if state.investor is None:
            raise PortalApiError("Login failed")
        return state.investor

    async def logout(self) -> None:
        await self._request("POST", "/auth/logout")

    async def list_documents(self, query: DocumentQuery) -> list[Document]:
        data = await self._request("GET", "/documents", params=query.model_dump(mode="json"))
        return [Document.model_validate(item) for item in data.get("documents") or []]

    async def log_access(self, document_id: str, document_title: str, action: AccessAction) -> None:
        await self._request(
            "POST",
            "/documents/log-access",
            json={"documentId": document_id, "documentTitle": document_title, "action": action.value},
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._http.request(method, f"{self._api}{path}", **kwargs)
        except httpx.HTTPError as exc:
            raise PortalApiError(UNREACHABLE_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = data.get("error") if isinstance(data, dict) else None
            raise PortalApiError(message or f"Request failed ({response.status_code})", response.status_code)
        return data if isinstance(data, dict) else {}
