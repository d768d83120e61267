from loguru import logger

from src.automarket.core.errors import NotFoundError, PermissionDeniedError
from src.automarket.entities._base import utcnow
from src.automarket.entities.user import AccountStatus, User, UserRepository, UserRole


class UserService:
    """Profile management for marketplace accounts."""

    def __init__(self, user_repo: UserRepository):
        self._user_repo = user_repo

    def _require(self, subject: str) -> User:
        user = self._user_repo.get(subject)
        if user is None:
            raise NotFoundError("User", subject)
        return user

    def create_or_update_user(
        self,
        subject: str,
        email: str | None,
        first_name: str | None,
        last_name: str | None,
        role: UserRole,
    ) -> User:
        """Upsert the caller's profile.

        An existing account gets its email and names refreshed and a new login
        timestamp. Its role is never changed, even if a different one is sent.
        """
        now = utcnow()
        user = self._user_repo.get(subject)

        if user is None:
            user = User(
                id=subject,
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role,
                created_at=now,
                updated_at=now,
                last_login_at=now,
            )
            logger.info(f"Creating {role.value.lower()} profile for {subject}")
        else:
            if role != user.role:
                logger.info(
                    f"Ignoring role change {user.role.value} -> {role.value} for {subject}"
                )
            user.email = email
            user.first_name = first_name
            user.last_name = last_name
            user.last_login_at = now
            user.updated_at = now

        return self._user_repo.save(user)

    def get_user(self, subject: str) -> User | None:
        return self._user_repo.get(subject)

    def find_by_email(self, email: str) -> User | None:
        return self._user_repo.find_by_email(email)

    def is_email_taken(self, email: str) -> bool:
        return self._user_repo.exists_by_email(email)

    def is_registered(self, subject: str) -> bool:
        return self._user_repo.exists(subject)

    def update_profile(
        self,
        subject: str,
        first_name: str | None,
        last_name: str | None,
        phone_number: str | None,
        profile_image_url: str | None,
    ) -> User:
        user = self._require(subject)
        user.first_name = first_name
        user.last_name = last_name
        user.phone_number = phone_number
        user.profile_image_url = profile_image_url
        user.touch()
        return self._user_repo.save(user)

    def update_seller_info(
        self,
        subject: str,
        company_name: str | None,
        business_license: str | None,
        address: str | None,
        specializations: list[str] | None,
    ) -> User:
        user = self._require(subject)
        if not user.is_seller:
            raise PermissionDeniedError("Only sellers can update seller information")

        user.company_name = company_name
        user.business_license = business_license
        user.address = address
        user.specializations = list(specializations or [])
        user.touch()
        return self._user_repo.save(user)

    def list_active_sellers(self) -> list[User]:
        return self._user_repo.find_active_by_role(UserRole.SELLER)

    def list_active_customers(self) -> list[User]:
        return self._user_repo.find_active_by_role(UserRole.CUSTOMER)

    def find_sellers_by_specialization(self, specialization: str) -> list[User]:
        return self._user_repo.find_sellers_by_specialization(specialization)

    def search_users_by_name(self, term: str) -> list[User]:
        return self._user_repo.search_by_name(term)

    def deactivate_user(self, subject: str) -> User:
        """Soft-delete: the record is kept with status INACTIVE."""
        user = self._require(subject)
        user.status = AccountStatus.INACTIVE
        user.touch()
        logger.info(f"Deactivated user {subject}")
        return self._user_repo.save(user)
