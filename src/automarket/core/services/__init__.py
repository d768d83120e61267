"""Core services exports.

Domain services live in ``car`` and ``user`` and are imported from there;
they depend on the entity packages, which in turn depend on the storage
layer built on top of these infrastructure services.
"""

from .database.db_session import DbSessionService
from .jwt.jwks import JWKSCache, JWKSCacheInMemory, JwksService
from .jwt.jwt_verify import JwtVerificationService

__all__ = [
    # JWT Services
    "JWKSCache",
    "JWKSCacheInMemory",
    "JwksService",
    "JwtVerificationService",
    # Database Service
    "DbSessionService",
]
