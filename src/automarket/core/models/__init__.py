"""Identity models."""

from .claims import AuthenticatedPrincipal, TokenClaims

__all__ = ["AuthenticatedPrincipal", "TokenClaims"]
