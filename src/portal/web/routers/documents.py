from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from portal.core.modules.access_log.models import AccessAction, AccessLog
from portal.core.modules.document.models import CategoryFilter, DateRule, Document, DocumentQuery, SortRule
from portal.web.deps import AppDep, AuthTokenDep
from portal.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["documents"])


class DocumentListResponse(BaseModel):
    documents: list[Document] = Field(..., description="Documents after category, date and sort rules")


class LogAccessRequest(BaseModel):
    """Document interaction to record in the audit log."""

    document_id: str = Field(..., alias="documentId", description="Document ID as shown to the investor")
    document_title: str = Field("", alias="documentTitle", description="Document title as shown to the investor")
    action: AccessAction = Field(AccessAction.DOWNLOAD, description="Interaction type")

    model_config = ConfigDict(populate_by_name=True)


class LogAccessResponse(BaseModel):
    logged: bool = Field(..., description="Whether the event was stored")


@router.get(
    "/documents",
    summary="List documents",
    description=(
        "List documents visible to the current investor.\n\n"
        "Filters apply in order: category (exact match or `all`), published date window "
        "(`last7`, `last30`, `last90` inclusive, `thisyear`, `all`), then sort. "
        "Documents with an unparseable published date only appear under `date=all` and sort last by date."
    ),
    operation_id="listDocuments",
    responses={
        200: {"description": "Filtered document list (may be empty)"},
        400: {"model": ErrorResponse, "description": "Invalid filter value"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_documents(
    app: AppDep,
    auth_token: AuthTokenDep,
    category: Annotated[CategoryFilter, Query(description="Category or `all`")] = CategoryFilter.ALL,
    sort: Annotated[SortRule, Query(description="Sort order")] = SortRule.NEWEST,
    date: Annotated[DateRule, Query(description="Published date window")] = DateRule.ALL,
) -> DocumentListResponse:
    documents = await app.list_documents(auth_token, DocumentQuery(category=category, sort=sort, date=date))
    return DocumentListResponse(documents=documents)


@router.post(
    "/documents/log-access",
    summary="Record document access",
    description="Record a document interaction for the current investor. The document is not required to exist.",
    operation_id="logDocumentAccess",
    responses={
        200: {"description": "Event recorded"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        502: {"model": ErrorResponse, "description": "Audit store unavailable, safe to retry"},
    },
)
async def log_access(request: LogAccessRequest, app: AppDep, auth_token: AuthTokenDep) -> LogAccessResponse:
    await app.log_access(auth_token, request.document_id, request.document_title, request.action)
    return LogAccessResponse(logged=True)


@router.get(
    "/documents/access-logs",
    summary="List recent access events",
    description="Get the most recent document access events (admin only).",
    operation_id="listAccessLogs",
    responses={
        200: {"description": "Access events, newest first"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def list_access_logs(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=500, description="Maximum events to return")] = 100,
) -> list[AccessLog]:
    return await app.get_access_logs(auth_token, limit)
