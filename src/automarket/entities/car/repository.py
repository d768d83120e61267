from decimal import Decimal

from src.automarket.core.storage.document_store import DocumentStore

from .entity import Car, CarStatus


class CarRepository:
    """Data-access layer for car listings.

    Only single-field equality is pushed down to the store. Range, compound and
    case-insensitive queries load the candidate set and filter it here.
    """

    def __init__(self, store: DocumentStore, collection: str = "cars") -> None:
        self._store = store
        self._collection = collection

    def _load(self, records: list[dict]) -> list[Car]:
        return [Car.from_document(r) for r in records]

    def save(self, car: Car) -> Car:
        car.id = self._store.save(self._collection, car.id, car.to_document())
        return car

    def get(self, car_id: str) -> Car | None:
        record = self._store.get(self._collection, car_id)
        return Car.from_document(record) if record else None

    def exists(self, car_id: str) -> bool:
        return self._store.exists(self._collection, car_id)

    def delete(self, car_id: str) -> None:
        self._store.delete(self._collection, car_id)

    def find_all(self) -> list[Car]:
        return self._load(self._store.get_all(self._collection))

    def find_by_seller(self, seller_id: str) -> list[Car]:
        return self._load(self._store.query_equal(self._collection, "seller_id", seller_id))

    def find_by_status(self, status: CarStatus) -> list[Car]:
        return self._load(self._store.query_equal(self._collection, "status", status.value))

    def find_by_brand(self, brand: str) -> list[Car]:
        return self._load(self._store.query_equal(self._collection, "brand", brand))

    def find_by_seller_and_status(self, seller_id: str, status: CarStatus) -> list[Car]:
        return [c for c in self.find_by_seller(seller_id) if c.status == status]

    def find_by_brand_and_model(self, brand: str, model: str) -> list[Car]:
        wanted = (brand.casefold(), model.casefold())
        return [c for c in self.find_all() if (c.brand.casefold(), c.model.casefold()) == wanted]

    def find_by_price_between(self, low: Decimal, high: Decimal) -> list[Car]:
        return [c for c in self.find_all() if low <= c.price <= high]

    def find_by_year_between(self, low: int, high: int) -> list[Car]:
        return [c for c in self.find_all() if low <= c.year <= high]

    def find_similar(
        self, brand: str, low: Decimal, high: Decimal, exclude_id: str
    ) -> list[Car]:
        """Active listings of ``brand`` (any case) priced within ``[low, high]``."""
        wanted = brand.casefold()
        return [
            c
            for c in self.find_by_status(CarStatus.ACTIVE)
            if c.id != exclude_id
            and c.brand.casefold() == wanted
            and low <= c.price <= high
        ]

    def count(self) -> int:
        return len(self._store.get_all(self._collection))

    def count_by_status(self, status: CarStatus) -> int:
        return len(self._store.query_equal(self._collection, "status", status.value))

    def count_by_seller_and_status(self, seller_id: str, status: CarStatus) -> int:
        return len(self.find_by_seller_and_status(seller_id, status))
