"""User entity module.

- User: Domain entity with role and account status
- UserRepository: Data access layer over the document store
"""

from .entity import AccountStatus, User, UserRole
from .repository import UserRepository

__all__ = ["AccountStatus", "User", "UserRepository", "UserRole"]
