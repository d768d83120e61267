"""A seller's listing moving through the marketplace, as buyers see it."""

from fastapi.testclient import TestClient

from tests.utils import car_payload


def test_listing_lifecycle(client: TestClient, auth_headers):
    seller = auth_headers("scenario-seller")
    rival = auth_headers("scenario-rival")

    for headers, first_name in ((seller, "Sally"), (rival, "Rick")):
        profile = client.post(
            "/api/users/profile",
            json={"firstName": first_name, "lastName": "Dealer", "role": "SELLER"},
            headers=headers,
        )
        assert profile.status_code == 200

    created = client.post("/cars", json=car_payload(brand="BMW", price=25000), headers=seller)
    assert created.status_code == 201
    listing = created.json()
    assert listing["sellerId"] == "scenario-seller"

    # Visible to its owner straight away, hidden from the public until approved
    assert [c["id"] for c in client.get("/cars/my", headers=seller).json()] == [listing["id"]]
    assert client.get("/cars").json() == []
    assert client.get("/cars/search", params={"brand": "bmw"}).json() == []

    client.patch(f"/cars/{listing['id']}/status", json={"status": "ACTIVE"}, headers=seller)
    assert [c["id"] for c in client.get("/cars").json()] == [listing["id"]]
    assert [c["id"] for c in client.get("/cars/search", params={"brand": "bmw"}).json()] == [listing["id"]]

    # Competing BMW listings around the same price point
    ids_by_price = {}
    for price in (19999, 20000, 30000, 30001):
        car = client.post("/cars", json=car_payload(brand="BMW", price=price), headers=rival).json()
        client.patch(f"/cars/{car['id']}/status", json={"status": "ACTIVE"}, headers=rival)
        ids_by_price[price] = car["id"]
    audi = client.post("/cars", json=car_payload(brand="Audi", model="A4", price=25000), headers=rival).json()
    client.patch(f"/cars/{audi['id']}/status", json={"status": "ACTIVE"}, headers=rival)

    similar = client.get(f"/cars/{listing['id']}/similar").json()
    assert {c["id"] for c in similar} == {ids_by_price[20000], ids_by_price[30000]}
    assert all(20000 <= c["price"] <= 30000 for c in similar)

    # The rival cannot touch the listing
    assert client.put(f"/cars/{listing['id']}", json={"price": 1}, headers=rival).status_code == 403
    assert client.delete(f"/cars/{listing['id']}", headers=rival).status_code == 403

    sold = client.patch(f"/cars/{listing['id']}/status", json={"status": "SOLD"}, headers=seller).json()
    assert sold["soldAt"] is not None
    assert listing["id"] not in {c["id"] for c in client.get("/cars").json()}
    assert [c["id"] for c in client.get("/cars/my/status/SOLD", headers=seller).json()] == [listing["id"]]
