"""User profile API router."""

from fastapi import APIRouter, Depends, Query

from src.automarket.api.http.deps import get_current_principal, get_user_service
from src.automarket.api.http.schemas.users import (
    MessageResponse,
    ProfileCreateRequest,
    ProfileUpdateRequest,
    SellerInfoRequest,
)
from src.automarket.core.errors import NotFoundError
from src.automarket.core.models.claims import AuthenticatedPrincipal
from src.automarket.core.services.user import UserService
from src.automarket.entities.user import User

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/profile", response_model=User)
def create_or_update_profile(
    payload: ProfileCreateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    """Create the caller's profile, or refresh it on a repeat sign-in."""
    return users.create_or_update_user(
        subject=principal.subject,
        email=principal.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        role=payload.role,
    )


@router.get("/me", response_model=User)
def get_my_profile(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    user = users.get_user(principal.subject)
    if user is None:
        raise NotFoundError("User", principal.subject)
    return user


@router.put("/me", response_model=User)
def update_my_profile(
    payload: ProfileUpdateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    return users.update_profile(
        principal.subject,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone_number=payload.phone_number,
        profile_image_url=payload.profile_image_url,
    )


@router.put("/seller-info", response_model=User)
def update_seller_info(
    payload: SellerInfoRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    """Seller-only: company details and specialization tags."""
    return users.update_seller_info(
        principal.subject,
        company_name=payload.company_name,
        business_license=payload.business_license,
        address=payload.address,
        specializations=payload.specializations,
    )


@router.get("/sellers", response_model=list[User])
def list_sellers(users: UserService = Depends(get_user_service)) -> list[User]:
    return users.list_active_sellers()


@router.get("/sellers/search", response_model=list[User])
def search_sellers(
    specialization: str = Query(min_length=1),
    users: UserService = Depends(get_user_service),
) -> list[User]:
    return users.find_sellers_by_specialization(specialization)


@router.delete("/me", response_model=MessageResponse)
def deactivate_my_account(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    users: UserService = Depends(get_user_service),
) -> MessageResponse:
    users.deactivate_user(principal.subject)
    return MessageResponse(message="Account deactivated successfully")
