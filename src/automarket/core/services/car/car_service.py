from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger

from src.automarket.core.errors import BusinessRuleError, NotFoundError, PermissionDeniedError
from src.automarket.entities._base import utcnow
from src.automarket.entities.car import Car, CarRepository, CarStatus
from src.automarket.entities.user import UserRepository

CarPredicate = Callable[[Car], bool]

SIMILAR_PRICE_LOW = Decimal("0.8")
SIMILAR_PRICE_HIGH = Decimal("1.2")

# Server-managed fields a listing update never touches
_PROTECTED_FIELDS = frozenset(
    {"id", "seller_id", "status", "sold_at", "created_at", "updated_at"}
)


@dataclass(frozen=True)
class CarSearchCriteria:
    """Optional search filters; unset fields do not constrain the result."""

    brand: str | None = None
    model: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    min_year: int | None = None
    max_year: int | None = None
    fuel_type: str | None = None
    transmission: str | None = None

    def predicates(self) -> list[CarPredicate]:
        preds: list[CarPredicate] = []
        if self.brand:
            brand = self.brand.casefold()
            preds.append(lambda c: brand in c.brand.casefold())
        if self.model:
            model = self.model.casefold()
            preds.append(lambda c: model in c.model.casefold())
        if self.min_price is not None:
            preds.append(lambda c: c.price >= self.min_price)
        if self.max_price is not None:
            preds.append(lambda c: c.price <= self.max_price)
        if self.min_year is not None:
            preds.append(lambda c: c.year >= self.min_year)
        if self.max_year is not None:
            preds.append(lambda c: c.year <= self.max_year)
        if self.fuel_type:
            fuel = self.fuel_type.casefold()
            preds.append(lambda c: c.fuel_type.casefold() == fuel)
        if self.transmission:
            transmission = self.transmission.casefold()
            preds.append(lambda c: c.transmission.casefold() == transmission)
        return preds


@dataclass(frozen=True)
class ListingStats:
    total: int
    by_status: dict[CarStatus, int]

    @property
    def active(self) -> int:
        return self.by_status.get(CarStatus.ACTIVE, 0)

    @property
    def sold(self) -> int:
        return self.by_status.get(CarStatus.SOLD, 0)


class CarService:
    """Listing lifecycle, ownership checks, and search."""

    def __init__(self, car_repo: CarRepository, user_repo: UserRepository):
        self._car_repo = car_repo
        self._user_repo = user_repo

    def _require(self, car_id: str) -> Car:
        car = self._car_repo.get(car_id)
        if car is None:
            raise NotFoundError("Car", car_id)
        return car

    def _require_owned(self, car_id: str, subject: str) -> Car:
        car = self._require(car_id)
        if not car.is_owned_by(subject):
            logger.warning(f"User {subject} attempted to modify car {car_id} owned by {car.seller_id}")
            raise PermissionDeniedError("You can only modify your own listings")
        return car

    def create_car(self, fields: Mapping[str, Any], seller_id: str) -> Car:
        """Create a listing owned by ``seller_id``.

        Any owner or status in ``fields`` is ignored; new listings always start
        as PENDING_APPROVAL.
        """
        seller = self._user_repo.get(seller_id)
        if seller is None:
            raise NotFoundError("User", seller_id)
        if not seller.is_active:
            raise BusinessRuleError("Deactivated accounts cannot create listings")

        now = utcnow()
        data = {k: v for k, v in fields.items() if k not in _PROTECTED_FIELDS}
        car = Car(
            **data,
            seller_id=seller_id,
            status=CarStatus.PENDING_APPROVAL,
            created_at=now,
            updated_at=now,
        )
        car = self._car_repo.save(car)
        logger.info(f"Created car listing {car.id} for seller {seller_id}")
        return car

    def get_car(self, car_id: str) -> Car:
        return self._require(car_id)

    def list_active_cars(self) -> list[Car]:
        return self._car_repo.find_by_status(CarStatus.ACTIVE)

    def list_cars_by_brand(self, brand: str) -> list[Car]:
        return [c for c in self._car_repo.find_by_brand(brand) if c.status == CarStatus.ACTIVE]

    def list_seller_cars(self, seller_id: str) -> list[Car]:
        if not self._user_repo.exists(seller_id):
            raise NotFoundError("User", seller_id)
        return self._car_repo.find_by_seller(seller_id)

    def list_seller_cars_by_status(self, seller_id: str, status: CarStatus) -> list[Car]:
        if not self._user_repo.exists(seller_id):
            raise NotFoundError("User", seller_id)
        return self._car_repo.find_by_seller_and_status(seller_id, status)

    def update_car(self, car_id: str, changes: Mapping[str, Any], subject: str) -> Car:
        """Apply the supplied fields to an owned listing."""
        car = self._require_owned(car_id, subject)
        for field, value in changes.items():
            if field not in _PROTECTED_FIELDS:
                setattr(car, field, value)
        car.touch()
        return self._car_repo.save(car)

    def update_car_status(self, car_id: str, status: CarStatus, subject: str) -> Car:
        car = self._require_owned(car_id, subject)
        car.status = status
        car.touch()
        if status == CarStatus.SOLD:
            car.sold_at = car.updated_at
        logger.info(f"Car {car_id} moved to {status.value}")
        return self._car_repo.save(car)

    def delete_car(self, car_id: str, subject: str) -> None:
        self._require_owned(car_id, subject)
        self._car_repo.delete(car_id)
        logger.info(f"Deleted car listing {car_id}")

    def search_cars(self, criteria: CarSearchCriteria) -> list[Car]:
        preds = criteria.predicates()
        return [
            car
            for car in self._car_repo.find_by_status(CarStatus.ACTIVE)
            if all(pred(car) for pred in preds)
        ]

    def find_similar_cars(self, car_id: str) -> list[Car]:
        reference = self._require(car_id)
        return self._car_repo.find_similar(
            brand=reference.brand,
            low=reference.price * SIMILAR_PRICE_LOW,
            high=reference.price * SIMILAR_PRICE_HIGH,
            exclude_id=car_id,
        )

    def count_all(self) -> int:
        return self._car_repo.count()

    def count_by_status(self, status: CarStatus) -> int:
        return self._car_repo.count_by_status(status)

    def count_seller_active(self, seller_id: str) -> int:
        return self._car_repo.count_by_seller_and_status(seller_id, CarStatus.ACTIVE)

    def listing_stats(self) -> ListingStats:
        return ListingStats(
            total=self.count_all(),
            by_status={status: self.count_by_status(status) for status in CarStatus},
        )
