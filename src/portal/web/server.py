from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from portal.app import App
from portal.config import Config
from portal.errors import UpstreamError, UserError
from portal.web.cookies import session_cookie_options
from portal.web.error_handlers import (
    general_exception_handler,
    request_validation_error_handler,
    upstream_error_handler,
    user_error_handler,
)
from portal.web.openapi import set_custom_openapi
from portal.web.routers import auth_router, documents_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Investor Portal API",
        lifespan=lifespan,
        openapi_tags=[],  # Tags will be added by custom OpenAPI function
    )

    # Handlers read these through deps; set here so they exist before lifespan runs
    cookie_options = session_cookie_options(config)
    app.state.app = app_instance
    app.state.config = config
    app.state.cookie_options = cookie_options

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    api_prefix = f"{config.base_path.rstrip('/')}/api"
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(documents_router, prefix=api_prefix)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, cookie_options, api_prefix)

    return app
