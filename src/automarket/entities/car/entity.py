"""Car listing domain entity."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import Field, PlainSerializer

from src.automarket.entities._base import Entity

Price = Annotated[
    Decimal,
    Field(gt=0, max_digits=12, decimal_places=2),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class CarStatus(StrEnum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    INACTIVE = "INACTIVE"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    REJECTED = "REJECTED"


class Car(Entity):
    """A vehicle listing owned by a single seller."""

    seller_id: str = Field(description="Subject id of the owning user")

    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    year: int = Field(ge=1900, le=2030)
    price: Price
    mileage: int = Field(ge=0)
    fuel_type: str = Field(min_length=1)
    transmission: str = Field(min_length=1)

    color: str | None = None
    doors: int | None = Field(default=None, ge=2, le=6)
    seats: int | None = Field(default=None, ge=1, le=9)
    body_type: str | None = None
    engine_size: str | None = None
    horsepower: int | None = Field(default=None, ge=1)
    drivetrain: str | None = None

    condition: str = Field(min_length=1)
    previous_owners: int | None = Field(default=None, ge=0)
    accident_free: bool = True
    service_history: str | None = None

    features: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    main_image_url: str | None = None

    description: str = Field(min_length=50)
    location: str | None = None
    zip_code: str | None = None

    status: CarStatus = CarStatus.PENDING_APPROVAL
    sold_at: datetime | None = None

    def is_owned_by(self, subject: str) -> bool:
        return self.seller_id == subject
