"""Request bodies for the user profile endpoints."""

from pydantic import AliasChoices, Field

from src.automarket.api.http.schemas import CamelModel
from src.automarket.entities.user import UserRole


class ProfileCreateRequest(CamelModel):
    """Sent after sign-in; email always comes from the verified token."""

    first_name: str | None = None
    last_name: str | None = None
    role: UserRole = Field(validation_alias=AliasChoices("role", "userType"))


class ProfileUpdateRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    profile_image_url: str | None = None


class SellerInfoRequest(CamelModel):
    company_name: str | None = None
    business_license: str | None = None
    address: str | None = None
    specializations: list[str] = Field(default_factory=list)


class MessageResponse(CamelModel):
    message: str
