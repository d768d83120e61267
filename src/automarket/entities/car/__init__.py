"""Car listing entity module."""

from .entity import Car, CarStatus
from .repository import CarRepository

__all__ = ["Car", "CarRepository", "CarStatus"]
