from .car_service import CarSearchCriteria, CarService, ListingStats

__all__ = ["CarSearchCriteria", "CarService", "ListingStats"]
