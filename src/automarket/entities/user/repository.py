from src.automarket.core.storage.document_store import DocumentStore

from .entity import AccountStatus, User, UserRole


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, store: DocumentStore, collection: str = "users") -> None:
        self._store = store
        self._collection = collection

    def save(self, user: User) -> User:
        self._store.save(self._collection, user.id, user.to_document())
        return user

    def get(self, user_id: str) -> User | None:
        record = self._store.get(self._collection, user_id)
        return User.from_document(record) if record else None

    def exists(self, user_id: str) -> bool:
        return self._store.exists(self._collection, user_id)

    def delete(self, user_id: str) -> None:
        self._store.delete(self._collection, user_id)

    def find_all(self) -> list[User]:
        return [User.from_document(r) for r in self._store.get_all(self._collection)]

    def find_by_email(self, email: str) -> User | None:
        matches = self._store.query_equal(self._collection, "email", email)
        return User.from_document(matches[0]) if matches else None

    def exists_by_email(self, email: str) -> bool:
        return bool(self._store.query_equal(self._collection, "email", email))

    def find_by_role(self, role: UserRole) -> list[User]:
        return [
            User.from_document(r)
            for r in self._store.query_equal(self._collection, "role", role.value)
        ]

    def find_active_by_role(self, role: UserRole) -> list[User]:
        return [u for u in self.find_by_role(role) if u.status == AccountStatus.ACTIVE]

    def find_sellers_by_specialization(self, specialization: str) -> list[User]:
        wanted = specialization.casefold()
        return [
            u
            for u in self.find_active_by_role(UserRole.SELLER)
            if any(tag.casefold() == wanted for tag in u.specializations)
        ]

    def search_by_name(self, term: str) -> list[User]:
        """Case-insensitive substring match on first or last name."""
        needle = term.casefold()
        return [
            u
            for u in self.find_all()
            if needle in (u.first_name or "").casefold()
            or needle in (u.last_name or "").casefold()
        ]
