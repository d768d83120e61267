"""User domain entity."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.automarket.entities._base import Entity


class UserRole(StrEnum):
    SELLER = "SELLER"
    CUSTOMER = "CUSTOMER"


class AccountStatus(StrEnum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING_VERIFICATION = "PENDING_VERIFICATION"


class User(Entity):
    """Marketplace account, keyed by the identity provider's subject id.

    ``role`` is fixed when the account is first created; profile updates and
    repeat logins never change it.
    """

    id: str = Field(description="Identity provider subject id")

    email: str | None = Field(default=None, description="Email from the last verified token")
    first_name: str | None = Field(default=None, description="User's first name")
    last_name: str | None = Field(default=None, description="User's last name")
    phone_number: str | None = Field(default=None, description="User's phone number")
    profile_image_url: str | None = Field(default=None)

    role: UserRole = Field(description="Seller or customer")
    status: AccountStatus = Field(default=AccountStatus.ACTIVE)
    last_login_at: datetime | None = Field(default=None)

    company_name: str | None = Field(default=None, description="Seller's company")
    business_license: str | None = Field(default=None)
    address: str | None = Field(default=None)
    specializations: list[str] = Field(default_factory=list, description="Seller focus tags")

    @property
    def is_seller(self) -> bool:
        return self.role == UserRole.SELLER

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
