from enum import StrEnum

from pydantic import BaseModel, Field

from portal.core.db import MongoModel


class InvestorType(StrEnum):
    """Investor classification. ANY is only meaningful as a login selector."""

    DII = "DII"
    FII = "FII"
    ANY = "any"


class Investor(MongoModel):
    """Investor record owned by the external identity store."""

    investor_id: str
    name: str
    email: str
    investor_type: InvestorType = InvestorType.ANY
    is_active: bool = True
    is_admin: bool = False
    password_hash: str  # bcrypt hash


class InvestorView(BaseModel):
    """Investor information returned to the browser (no secrets)."""

    id: str = Field(..., description="Internal investor ID")
    investor_id: str = Field(..., description="External investor ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    investor_type: InvestorType = Field(..., description="DII, FII or any")
    is_active: bool = Field(..., description="Whether the investor may use the portal")
    is_admin: bool = Field(..., description="Whether the investor has admin privileges")

    @classmethod
    def from_domain(cls, investor: Investor) -> "InvestorView":
        """Create view model from domain model."""
        return cls(
            id=investor.id,
            investor_id=investor.investor_id,
            name=investor.name,
            email=investor.email,
            investor_type=investor.investor_type,
            is_active=investor.is_active,
            is_admin=investor.is_admin,
        )
