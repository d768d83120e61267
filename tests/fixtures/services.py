"""Service fixtures for testing."""

from typing import Any

import pytest

from src.automarket.core.services import (
    JWKSCache,
    JWKSCacheInMemory,
    JwksService,
    JwtVerificationService,
)
from src.automarket.core.services.car import CarService
from src.automarket.core.services.user import UserService
from src.automarket.core.storage.document_store import InMemoryDocumentStore
from src.automarket.entities.car import CarRepository
from src.automarket.entities.user import UserRepository
from src.automarket.runtime.config.config_data import OIDCProviderConfig


@pytest.fixture
def jwks_cache() -> JWKSCache:
    """Get a JWKS cache instance for testing."""
    return JWKSCacheInMemory()


@pytest.fixture
def jwks_service(jwks_cache: JWKSCache) -> JwksService:
    """Real JWKS service; tests patch httpx underneath it."""
    return JwksService(cache=jwks_cache)


@pytest.fixture
def jwks_service_fake(jwks_data: dict[str, Any]) -> JwksService:
    """JWKS service that serves the test key set without network access."""
    class MockJwksService(JwksService):
        async def fetch_jwks(self, provider: OIDCProviderConfig):
            return jwks_data

    return MockJwksService(cache=JWKSCacheInMemory())


@pytest.fixture
def jwt_verify_service(jwks_service_fake: JwksService) -> JwtVerificationService:
    return JwtVerificationService(jwks_service=jwks_service_fake)


@pytest.fixture
def user_repo(memory_store: InMemoryDocumentStore) -> UserRepository:
    return UserRepository(memory_store)


@pytest.fixture
def car_repo(memory_store: InMemoryDocumentStore) -> CarRepository:
    return CarRepository(memory_store)


@pytest.fixture
def user_service(user_repo: UserRepository) -> UserService:
    return UserService(user_repo)


@pytest.fixture
def car_service(car_repo: CarRepository, user_repo: UserRepository) -> CarService:
    return CarService(car_repo, user_repo)
