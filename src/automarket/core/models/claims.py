"""Identity models produced by token verification."""

from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of verified JWT claims."""

    raw_token: str = Field(default="", description="Original JWT token")

    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (user ID)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    not_before: int | None = Field(default=None, description="Not before")

    email: str | None = Field(default=None, description="Email address")
    email_verified: bool = Field(default=False, description="Email verification status")
    name: str | None = Field(default=None, description="Full name")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Claims not mapped to a dedicated field"
    )

    def to_principal(self) -> "AuthenticatedPrincipal":
        return AuthenticatedPrincipal(
            subject=self.subject,
            email=self.email,
            email_verified=self.email_verified,
            name=self.name,
        )


class AuthenticatedPrincipal(BaseModel):
    """The verified caller attached to a request."""

    model_config = {"frozen": True}

    subject: str
    email: str | None = None
    email_verified: bool = False
    name: str | None = None
