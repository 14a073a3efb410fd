from fastapi import APIRouter, Response
from pydantic import BaseModel, ConfigDict, Field

from portal.core.modules.investor.models import InvestorType, InvestorView
from portal.web.cookies import clear_session_cookie, issue_session_cookie
from portal.web.deps import AppDep, CookieOptionsDep, OptionalAuthTokenDep
from portal.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Investor email address")
    password: str = Field(..., description="Password for authentication")
    investor_type: InvestorType = Field(
        InvestorType.ANY,
        alias="investorType",
        description="Required investor type, `any` accepts every type",
    )

    model_config = ConfigDict(populate_by_name=True)


class SessionResponse(BaseModel):
    """Authentication state of the current browser session."""

    authenticated: bool = Field(..., description="Whether the session cookie resolves to an active investor")
    investor: InvestorView | None = Field(None, description="Current investor, present only when authenticated")


@router.post(
    "/auth/login",
    summary="Authenticate investor",
    description="Authenticate with email, password and investor type; sets the session cookie on success.",
    operation_id="login",
    response_model_exclude_none=True,
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    login_data: LoginRequest, app: AppDep, cookie_options: CookieOptionsDep, response: Response
) -> SessionResponse:
    auth_token, investor = await app.login(login_data.email, login_data.password, login_data.investor_type)
    issue_session_cookie(response, cookie_options, auth_token)
    return SessionResponse(authenticated=True, investor=investor)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Clear the session cookie. Succeeds whether or not a session exists.",
    operation_id="logout",
    response_model_exclude_none=True,
    responses={200: {"description": "Session cleared"}},
)
async def logout(
    app: AppDep, cookie_options: CookieOptionsDep, auth_token: OptionalAuthTokenDep, response: Response
) -> SessionResponse:
    await app.logout(auth_token)
    clear_session_cookie(response, cookie_options)
    return SessionResponse(authenticated=False)


@router.get(
    "/auth/session",
    summary="Check session",
    description="Report whether the session cookie belongs to an active investor.",
    operation_id="getSession",
    response_model_exclude_none=True,
    responses={200: {"description": "Current authentication state"}},
)
async def get_session(app: AppDep, auth_token: OptionalAuthTokenDep) -> SessionResponse:
    investor = await app.get_session(auth_token)
    if investor is None:
        return SessionResponse(authenticated=False)
    return SessionResponse(authenticated=True, investor=investor)
