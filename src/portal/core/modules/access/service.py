from portal.core.core import Service
from portal.core.modules.investor.models import Investor
from portal.core.modules.session.models import AuthToken
from portal.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> Investor:
        """Ensure the investor is authenticated and active."""
        return await self.core.services.session.get_authenticated_investor(auth_token)

    async def ensure_admin(self, auth_token: AuthToken) -> Investor:
        """Ensure the authenticated investor is admin, raise AccessDeniedError if not."""
        investor = await self.core.services.session.get_authenticated_investor(auth_token)
        if not investor.is_admin:
            raise AccessDeniedError("Admin privileges required")
        return investor
