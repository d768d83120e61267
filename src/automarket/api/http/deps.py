"""FastAPI dependency implementations."""

from fastapi import Depends, HTTPException, Request

from src.automarket.api.http.app_data import ApplicationDependencies
from src.automarket.core.models.claims import AuthenticatedPrincipal
from src.automarket.core.services import JwksService
from src.automarket.core.services.car import CarService
from src.automarket.core.services.user import UserService
from src.automarket.core.storage.document_store import DocumentStore
from src.automarket.entities.car import CarRepository
from src.automarket.entities.user import UserRepository
from src.automarket.runtime.context import get_config


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_document_store(request: Request) -> DocumentStore:
    """Get the document store instance."""
    return get_app_dependencies(request).document_store


def get_jwks_service(request: Request) -> JwksService:
    """Get the JWKS service instance."""
    return get_app_dependencies(request).jwks_service


def get_user_repository(store: DocumentStore = Depends(get_document_store)) -> UserRepository:
    return UserRepository(store, get_config().store.users_collection)


def get_car_repository(store: DocumentStore = Depends(get_document_store)) -> CarRepository:
    return CarRepository(store, get_config().store.cars_collection)


def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
) -> UserService:
    return UserService(user_repo)


def get_car_service(
    car_repo: CarRepository = Depends(get_car_repository),
    user_repo: UserRepository = Depends(get_user_repository),
) -> CarService:
    return CarService(car_repo, user_repo)


def get_current_principal(request: Request) -> AuthenticatedPrincipal:
    """The verified caller, as attached by the access control middleware."""
    principal: AuthenticatedPrincipal | None = getattr(request.state, "principal", None)
    if principal is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return principal
