from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from portal.web.cookies import SessionCookieOptions


def set_custom_openapi(app: FastAPI, cookie_options: SessionCookieOptions, api_prefix: str) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Investor Portal API",
            version="0.1.0",
            summary="Investor login and document access",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": cookie_options.name,
                "description": "Opaque session token set by the login endpoint",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [{"SessionCookie": []}]

        public_endpoints = {
            ("POST", f"{api_prefix}/auth/login"),
            ("POST", f"{api_prefix}/auth/logout"),
            ("GET", f"{api_prefix}/auth/session"),
            ("GET", "/health"),
        }

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in public_endpoints:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "Invalid credentials", "type": "authentication_error"},
                {"error": "Not authenticated", "type": "authentication_error"},
                {"error": "Admin privileges required", "type": "access_denied"},
            ]
        }
    }
