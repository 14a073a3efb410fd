from portal.web.routers.auth import router as auth_router
from portal.web.routers.documents import router as documents_router

__all__ = [
    "auth_router",
    "documents_router",
]
