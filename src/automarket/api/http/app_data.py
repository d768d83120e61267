from dataclasses import dataclass

from src.automarket.core.services import (
    DbSessionService,
    JWKSCacheInMemory,
    JwksService,
    JwtVerificationService,
)
from src.automarket.core.storage.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    SqlDocumentStore,
)
from src.automarket.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    jwks_cache: JWKSCacheInMemory
    jwks_service: JwksService
    jwt_verify_service: JwtVerificationService
    document_store: DocumentStore
    database_service: DbSessionService | None = None


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct the process-wide services described by ``config``."""
    jwks_cache = JWKSCacheInMemory(ttl=config.oidc.jwks_cache_ttl)
    jwks_service = JwksService(jwks_cache, timeout=config.oidc.jwks_timeout)

    database_service = None
    if config.store.backend == "sql":
        database_service = DbSessionService()
        database_service.create_all()
        document_store: DocumentStore = SqlDocumentStore(database_service)
    else:
        document_store = InMemoryDocumentStore()

    return ApplicationDependencies(
        jwks_cache=jwks_cache,
        jwks_service=jwks_service,
        jwt_verify_service=JwtVerificationService(jwks_service),
        document_store=document_store,
        database_service=database_service,
    )
