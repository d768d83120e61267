"""Car listing API router."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response, status

from src.automarket.api.http.deps import get_car_service, get_current_principal
from src.automarket.api.http.schemas.cars import (
    CarCreateRequest,
    CarStatusUpdateRequest,
    CarUpdateRequest,
)
from src.automarket.core.models.claims import AuthenticatedPrincipal
from src.automarket.core.services.car import CarSearchCriteria, CarService
from src.automarket.entities.car import Car, CarStatus

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("", response_model=list[Car])
def list_cars(cars: CarService = Depends(get_car_service)) -> list[Car]:
    """Active listings, the public catalogue."""
    return cars.list_active_cars()


@router.post("", response_model=Car, status_code=status.HTTP_201_CREATED)
def create_car(
    payload: CarCreateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> Car:
    """Create a listing owned by the caller."""
    return cars.create_car(payload.listing_fields(), seller_id=principal.subject)


@router.get("/my", response_model=list[Car])
def my_cars(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> list[Car]:
    """All of the caller's listings, whatever their status."""
    return cars.list_seller_cars(principal.subject)


@router.get("/my/status/{car_status}", response_model=list[Car])
def my_cars_by_status(
    car_status: CarStatus,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> list[Car]:
    return cars.list_seller_cars_by_status(principal.subject, car_status)


@router.get("/search", response_model=list[Car])
def search_cars(
    brand: str | None = None,
    model: str | None = None,
    min_price: Decimal | None = Query(default=None, alias="minPrice"),
    max_price: Decimal | None = Query(default=None, alias="maxPrice"),
    min_year: int | None = Query(default=None, alias="minYear"),
    max_year: int | None = Query(default=None, alias="maxYear"),
    fuel_type: str | None = Query(default=None, alias="fuelType"),
    transmission: str | None = None,
    cars: CarService = Depends(get_car_service),
) -> list[Car]:
    """Filter active listings; every parameter is optional and they combine with AND."""
    criteria = CarSearchCriteria(
        brand=brand,
        model=model,
        min_price=min_price,
        max_price=max_price,
        min_year=min_year,
        max_year=max_year,
        fuel_type=fuel_type,
        transmission=transmission,
    )
    return cars.search_cars(criteria)


@router.get("/brand/{brand}", response_model=list[Car])
def cars_by_brand(brand: str, cars: CarService = Depends(get_car_service)) -> list[Car]:
    return cars.list_cars_by_brand(brand)


@router.get("/{car_id}", response_model=Car)
def get_car(car_id: str, cars: CarService = Depends(get_car_service)) -> Car:
    return cars.get_car(car_id)


@router.get("/{car_id}/similar", response_model=list[Car])
def similar_cars(car_id: str, cars: CarService = Depends(get_car_service)) -> list[Car]:
    """Active listings of the same brand priced within 20% of this one."""
    return cars.find_similar_cars(car_id)


@router.put("/{car_id}", response_model=Car)
def update_car(
    car_id: str,
    payload: CarUpdateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> Car:
    return cars.update_car(car_id, payload.changes(), principal.subject)


@router.patch("/{car_id}/status", response_model=Car)
def update_car_status(
    car_id: str,
    payload: CarStatusUpdateRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> Car:
    return cars.update_car_status(car_id, payload.status, principal.subject)


@router.delete("/{car_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_car(
    car_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    cars: CarService = Depends(get_car_service),
) -> Response:
    cars.delete_car(car_id, principal.subject)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
