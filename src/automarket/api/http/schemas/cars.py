"""Request and response bodies for the car listing endpoints."""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import Field, StringConstraints

from src.automarket.api.http.schemas import CamelModel
from src.automarket.entities.car import CarStatus

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, min_length=50)]
Year = Annotated[int, Field(ge=1900, le=2030)]
Price = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Mileage = Annotated[int, Field(ge=0)]
Doors = Annotated[int, Field(ge=2, le=6)]
Seats = Annotated[int, Field(ge=1, le=9)]
Horsepower = Annotated[int, Field(ge=1)]
Owners = Annotated[int, Field(ge=0)]


class CarCreateRequest(CamelModel):
    """Listing payload. Owner and status are assigned by the server."""

    brand: NonBlank
    model: NonBlank
    year: Year
    price: Price
    mileage: Mileage
    fuel_type: NonBlank
    transmission: NonBlank
    color: str | None = None
    doors: Doors | None = None
    seats: Seats | None = None
    body_type: str | None = None
    engine_size: str | None = None
    horsepower: Horsepower | None = None
    drivetrain: str | None = None
    condition: NonBlank
    previous_owners: Owners | None = None
    accident_free: bool = True
    service_history: str | None = None
    features: list[str] = Field(default_factory=list)
    image_urls: list[str] = Field(default_factory=list)
    main_image_url: str | None = None
    description: Description
    location: str | None = None
    zip_code: str | None = None

    def listing_fields(self) -> dict[str, Any]:
        return self.model_dump()


class CarUpdateRequest(CamelModel):
    """Partial update; omitted or null fields keep their stored value."""

    brand: NonBlank | None = None
    model: NonBlank | None = None
    year: Year | None = None
    price: Price | None = None
    mileage: Mileage | None = None
    fuel_type: NonBlank | None = None
    transmission: NonBlank | None = None
    color: str | None = None
    doors: Doors | None = None
    seats: Seats | None = None
    body_type: str | None = None
    engine_size: str | None = None
    horsepower: Horsepower | None = None
    drivetrain: str | None = None
    condition: NonBlank | None = None
    previous_owners: Owners | None = None
    accident_free: bool | None = None
    service_history: str | None = None
    features: list[str] | None = None
    image_urls: list[str] | None = None
    main_image_url: str | None = None
    description: Description | None = None
    location: str | None = None
    zip_code: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class CarStatusUpdateRequest(CamelModel):
    status: CarStatus
