"""Car listing endpoints, end to end through the ASGI app."""

import pytest
from fastapi.testclient import TestClient

from tests.fixtures.auth import OTHER_SELLER_ID, SELLER_ID
from tests.utils import car_payload

pytestmark = pytest.mark.usefixtures("registered_users")


def create_listing(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    response = client.post("/cars", json=car_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def activate(client: TestClient, headers: dict[str, str], car_id: str) -> dict:
    response = client.patch(f"/cars/{car_id}/status", json={"status": "ACTIVE"}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestCreateListing:
    def test_create(self, client: TestClient, seller_headers):
        body = create_listing(client, seller_headers)

        assert body["id"]
        assert body["sellerId"] == SELLER_ID
        assert body["status"] == "PENDING_APPROVAL"
        assert body["fuelType"] == "Diesel"
        assert body["price"] == 25000
        assert body["createdAt"] == body["updatedAt"]
        assert body["soldAt"] is None

    def test_owner_and_status_in_body_ignored(self, client: TestClient, seller_headers):
        body = create_listing(client, seller_headers, sellerId=OTHER_SELLER_ID, status="ACTIVE")

        assert body["sellerId"] == SELLER_ID
        assert body["status"] == "PENDING_APPROVAL"

    def test_snake_case_input_accepted(self, client: TestClient, seller_headers):
        payload = car_payload()
        payload["fuel_type"] = payload.pop("fuelType")

        response = client.post("/cars", json=payload, headers=seller_headers)

        assert response.status_code == 201
        assert response.json()["fuelType"] == "Diesel"

    def test_requires_authentication(self, client: TestClient):
        response = client.post("/cars", json=car_payload())

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_invalid_token(self, client: TestClient):
        response = client.post(
            "/cars", json=car_payload(), headers={"Authorization": "Bearer abc.def.ghi"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_requires_profile(self, client: TestClient, auth_headers):
        response = client.post("/cars", json=car_payload(), headers=auth_headers("no-profile"))

        assert response.status_code == 404

    @pytest.mark.parametrize(
        "overrides",
        [
            {"description": "Too short"},
            {"year": 1899},
            {"price": 0},
            {"mileage": -5},
            {"doors": 9},
            {"brand": "   "},
            {"price": "12.345"},
        ],
    )
    def test_validation(self, client: TestClient, seller_headers, overrides):
        response = client.post("/cars", json=car_payload(**overrides), headers=seller_headers)

        assert response.status_code == 422
        assert "request_id" in response.json()

    def test_missing_required_field(self, client: TestClient, seller_headers):
        payload = car_payload()
        del payload["transmission"]

        response = client.post("/cars", json=payload, headers=seller_headers)

        assert response.status_code == 422


class TestReadListings:
    def test_public_list_only_shows_active(self, client: TestClient, seller_headers):
        pending = create_listing(client, seller_headers)
        active = activate(client, seller_headers, create_listing(client, seller_headers)["id"])

        ids = [car["id"] for car in client.get("/cars").json()]

        assert ids == [active["id"]]
        assert pending["id"] not in ids

    def test_get_by_id_any_status(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        response = client.get(f"/cars/{car['id']}")

        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_APPROVAL"

    def test_get_missing(self, client: TestClient):
        response = client.get("/cars/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "Car not found with id: does-not-exist"

    def test_my_cars(self, client: TestClient, seller_headers, other_seller_headers):
        mine = create_listing(client, seller_headers)
        create_listing(client, other_seller_headers)

        response = client.get("/cars/my", headers=seller_headers)

        assert response.status_code == 200
        assert [car["id"] for car in response.json()] == [mine["id"]]

    def test_my_cars_requires_auth(self, client: TestClient):
        assert client.get("/cars/my").status_code == 401

    def test_my_cars_by_status(self, client: TestClient, seller_headers):
        pending = create_listing(client, seller_headers)
        active = activate(client, seller_headers, create_listing(client, seller_headers)["id"])

        pending_ids = [c["id"] for c in client.get("/cars/my/status/PENDING_APPROVAL", headers=seller_headers).json()]
        active_ids = [c["id"] for c in client.get("/cars/my/status/ACTIVE", headers=seller_headers).json()]

        assert pending_ids == [pending["id"]]
        assert active_ids == [active["id"]]
        assert client.get("/cars/my/status/BOGUS", headers=seller_headers).status_code == 422

    def test_my_cars_by_status_requires_profile(self, client: TestClient, auth_headers):
        response = client.get("/cars/my/status/ACTIVE", headers=auth_headers("no-profile"))

        assert response.status_code == 404

    def test_by_brand(self, client: TestClient, seller_headers):
        bmw = activate(client, seller_headers, create_listing(client, seller_headers)["id"])
        activate(client, seller_headers, create_listing(client, seller_headers, brand="Audi", model="A4")["id"])

        assert [c["id"] for c in client.get("/cars/brand/BMW").json()] == [bmw["id"]]
        assert client.get("/cars/brand/Tesla").json() == []

    def test_search(self, client: TestClient, seller_headers):
        cheap = activate(client, seller_headers, create_listing(client, seller_headers, price=15000, year=2014)["id"])
        activate(client, seller_headers, create_listing(client, seller_headers, price=45000, year=2022)["id"])
        activate(
            client,
            seller_headers,
            create_listing(client, seller_headers, brand="Toyota", model="Yaris", fuelType="Hybrid")["id"],
        )

        by_price = client.get("/cars/search", params={"brand": "bmw", "maxPrice": 15000}).json()
        by_year = client.get("/cars/search", params={"minYear": 2015, "maxYear": 2020}).json()
        by_fuel = client.get("/cars/search", params={"fuelType": "hybrid"}).json()
        everything = client.get("/cars/search").json()

        assert [c["id"] for c in by_price] == [cheap["id"]]
        assert [c["brand"] for c in by_year] == ["Toyota"]
        assert [c["model"] for c in by_fuel] == ["Yaris"]
        assert len(everything) == 3

    def test_search_price_bounds_inclusive(self, client: TestClient, seller_headers):
        car = activate(client, seller_headers, create_listing(client, seller_headers, price=20000)["id"])

        hits = client.get("/cars/search", params={"minPrice": 20000, "maxPrice": 20000}).json()

        assert [c["id"] for c in hits] == [car["id"]]

    def test_search_rejects_bad_number(self, client: TestClient):
        assert client.get("/cars/search", params={"minPrice": "cheap"}).status_code == 422


class TestModifyListings:
    def test_update(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        response = client.put(
            f"/cars/{car['id']}",
            json={"price": 23999.5, "mileage": 50500, "color": None},
            headers=seller_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 23999.5
        assert body["mileage"] == 50500
        assert body["color"] == "Black"
        assert body["brand"] == "BMW"

    def test_update_by_other_seller_forbidden(self, client: TestClient, seller_headers, other_seller_headers):
        car = create_listing(client, seller_headers)

        response = client.put(f"/cars/{car['id']}", json={"price": 1}, headers=other_seller_headers)

        assert response.status_code == 403
        assert client.get(f"/cars/{car['id']}").json()["price"] == 25000

    def test_update_missing(self, client: TestClient, seller_headers):
        response = client.put("/cars/nope", json={"price": 1}, headers=seller_headers)

        assert response.status_code == 404

    def test_update_validates(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        response = client.put(f"/cars/{car['id']}", json={"year": 3000}, headers=seller_headers)

        assert response.status_code == 422

    def test_mark_sold(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        body = client.patch(f"/cars/{car['id']}/status", json={"status": "SOLD"}, headers=seller_headers).json()

        assert body["status"] == "SOLD"
        assert body["soldAt"] is not None

    def test_status_change_after_sold_keeps_sold_at(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)
        sold = client.patch(f"/cars/{car['id']}/status", json={"status": "SOLD"}, headers=seller_headers).json()

        relisted = activate(client, seller_headers, car["id"])

        assert relisted["status"] == "ACTIVE"
        assert relisted["soldAt"] == sold["soldAt"]

    def test_status_change_forbidden_for_non_owner(self, client: TestClient, seller_headers, customer_headers):
        car = create_listing(client, seller_headers)

        response = client.patch(f"/cars/{car['id']}/status", json={"status": "SOLD"}, headers=customer_headers)

        assert response.status_code == 403
        assert client.get(f"/cars/{car['id']}").json()["status"] == "PENDING_APPROVAL"

    def test_invalid_status(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        response = client.patch(f"/cars/{car['id']}/status", json={"status": "GONE"}, headers=seller_headers)

        assert response.status_code == 422

    def test_delete(self, client: TestClient, seller_headers, other_seller_headers):
        car = create_listing(client, seller_headers)

        assert client.delete(f"/cars/{car['id']}", headers=other_seller_headers).status_code == 403
        response = client.delete(f"/cars/{car['id']}", headers=seller_headers)

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/cars/{car['id']}").status_code == 404

    def test_delete_requires_auth(self, client: TestClient, seller_headers):
        car = create_listing(client, seller_headers)

        assert client.delete(f"/cars/{car['id']}").status_code == 401
