"""Entities grouped by business concept.

Each entity package holds the domain model (entity.py) and its
document-store repository (repository.py).
"""

from .car import Car, CarRepository, CarStatus
from .user import AccountStatus, User, UserRepository, UserRole

__all__ = [
    "AccountStatus",
    "Car",
    "CarRepository",
    "CarStatus",
    "User",
    "UserRepository",
    "UserRole",
]
