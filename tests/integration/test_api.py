from __future__ import annotations

from fastapi.testclient import TestClient


USA = {
    "country_code": "USA",
    "country_code2": "US",
    "country_name": "United States of America",
    "continent": "North America",
    "country_capital": 8321,
    "country_population": 278357000,
}


def test_home_and_health(client: TestClient) -> None:
    res = client.get("/")
    assert res.status_code == 200
    assert "/countries" in res.json()["resources"]

    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_request_id_is_echoed(client: TestClient) -> None:
    res = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert res.headers["X-Request-Id"] == "abc-123"
    assert client.get("/health").headers["X-Request-Id"]


def test_initialize(client: TestClient) -> None:
    client.delete("/countries/USA")

    res = client.post("/initialize")

    assert res.status_code == 200
    payload = res.json()
    assert payload["code"] == 200
    assert payload["data"]["statements"] == 16
    assert client.get("/countries/USA").status_code == 200


def test_list_countries(client: TestClient) -> None:
    res = client.get("/countries")
    assert res.status_code == 200
    assert len(res.json()) == 20


def test_get_country_by_either_code(client: TestClient) -> None:
    res = client.get("/countries/us")
    assert res.status_code == 200
    payload = res.json()
    assert payload["country_code"] == "USA"
    assert payload["capital"] == {"city_id": 8321, "city_name": "Washington"}


def test_get_country_errors(client: TestClient) -> None:
    res = client.get("/countries/USAA")
    assert res.status_code == 400
    assert res.json()["code"] == 400

    res = client.get("/countries/ZZZ")
    assert res.status_code == 404
    assert res.json()["code"] == 404


def test_find_countries(client: TestClient) -> None:
    assert client.get("/countries/find").status_code == 400

    res = client.get("/countries/find", params={"country_name": "land"})
    assert res.status_code == 200
    assert [c["country_code"] for c in res.json()] == ["NZL", "CHE"]

    res = client.get("/countries/find", params={"continent": "Africa"})
    assert {c["country_code"] for c in res.json()} == {"EGY", "NGA", "CIV"}

    assert client.get("/countries/find", params={"continent": "Atlantis"}).status_code == 404


def test_add_country_validation(client: TestClient) -> None:
    res = client.post("/countries", json={**USA, "country_code": "US"})
    assert res.status_code == 400
    payload = res.json()
    assert payload["code"] == 400
    assert payload["data"]["errors"]

    res = client.post("/countries", json={"country_code": "NLD", "country_name": "Netherlands"})
    assert res.status_code == 400

    res = client.post("/countries", json=USA)
    assert res.status_code == 409


def test_replace_usa(client: TestClient) -> None:
    res = client.delete("/countries/USA")
    assert res.status_code == 200
    assert res.json()["data"]["country_code"] == "USA"
    assert client.get("/countries/US").status_code == 404

    res = client.post("/countries", json=USA)
    assert res.status_code == 200
    payload = res.json()
    assert payload["code"] == 200
    assert payload["data"]["country_code"] == "USA"
    assert payload["data"]["capital"]["city_name"] == "Washington"

    res = client.get("/countries/US")
    assert res.status_code == 200
    assert res.json()["country_population"] == 278357000


def test_update_country(client: TestClient) -> None:
    res = client.put("/countries/CAN", json={"country_population": 38000000})
    assert res.status_code == 200
    assert res.json()["data"]["country_population"] == 38000000

    res = client.put("/countries/CAN", json={"country_population": 38000000})
    assert res.status_code == 200
    assert res.json()["code"] == 304

    assert client.put("/countries/ZZZ", json={"country_name": "Nowhere"}).status_code == 404
    assert client.put("/countries/CAN", json={}).status_code == 400


def test_set_capital(client: TestClient) -> None:
    res = client.put("/countries/CAN/capital/1810")
    assert res.status_code == 200
    assert res.json()["data"]["capital"]["city_id"] == 1810

    assert client.put("/countries/CAN/capital/1").status_code == 404
    assert client.put("/countries/CAN/capital/0").status_code == 400


def test_country_cities(client: TestClient) -> None:
    res = client.get("/countries/US/cities")
    assert res.status_code == 200
    assert [c["city_name"] for c in res.json()] == ["Chicago", "Los Angeles", "New York", "Washington"]

    assert client.get("/countries/ZZZ/cities").status_code == 404
    assert client.get("/countries/ATA/cities").status_code == 404
    assert client.get("/countries/X/cities").status_code == 400


def test_cities(client: TestClient) -> None:
    res = client.get("/cities")
    assert res.status_code == 200
    assert len(res.json()) == 34

    res = client.get("/cities/8321")
    assert res.status_code == 200
    assert res.json()["country"] == {"country_code": "USA", "country_name": "United States of America"}

    assert client.get("/cities/1").status_code == 404
    assert client.get("/cities/0").status_code == 400
    assert client.get("/cities/abc").status_code == 400


def test_find_cities(client: TestClient) -> None:
    assert client.get("/cities/find").status_code == 400

    res = client.get("/cities/find", params={"is_capital": "true", "country_code": "FR"})
    assert res.status_code == 200
    assert [c["city_name"] for c in res.json()] == ["Paris"]

    res = client.get("/cities/find", params={"city_name": "york"})
    assert [c["city_id"] for c in res.json()] == [3793]


def test_update_washington_population(client: TestClient) -> None:
    res = client.put("/cities/8321", json={"city_population": 5400000})
    assert res.status_code == 200
    payload = res.json()
    assert payload["code"] == 200
    assert payload["data"]["city_population"] == 5400000
    assert payload["data"]["latitude"] == 38.9047

    res = client.put("/cities/8321", json={"city_population": 5400000})
    assert res.status_code == 200
    assert res.json()["code"] == 304

    assert client.get("/cities/8321").json()["city_population"] == 5400000


def test_add_and_delete_city(client: TestClient) -> None:
    res = client.post("/cities", json={"city_name": "Boston", "country_code": "US", "city_population": 617594})
    assert res.status_code == 200
    city_id = res.json()["data"]["city_id"]

    assert client.get(f"/cities/{city_id}").status_code == 200
    assert client.delete(f"/cities/{city_id}").status_code == 200
    assert client.delete(f"/cities/{city_id}").status_code == 404

    assert client.post("/cities", json={"city_name": "Atlantis", "country_code": "ZZZ"}).status_code == 404
    assert client.post("/cities", json={"city_name": "Nowhere", "latitude": 100}).status_code == 400


def test_usa_english_detail(client: TestClient) -> None:
    res = client.get("/countries/USA/languages/ENG")
    assert res.status_code == 200
    payload = res.json()
    assert payload["is_official"] is True
    assert payload["language_percentage"] == 86.2
    assert payload["country"]["country_name"] == "United States of America"
    assert payload["language"]["language_name"] == "English"

    assert client.get("/countries/USA/languages/FRA").status_code == 404


def test_country_languages(client: TestClient) -> None:
    res = client.get("/countries/US/languages")
    assert res.status_code == 200
    assert [d["language"]["language_code"] for d in res.json()] == ["ENG", "SPA"]

    assert client.get("/countries/ATA/languages").status_code == 404
    assert client.get("/countries/ZZZ/languages").status_code == 404


def test_language_detail_lifecycle(client: TestClient) -> None:
    assert client.post("/countries/USA/languages", json={"language_code": "ENG"}).status_code == 409

    res = client.post("/countries/USA/languages", json={"language_code": "fr", "language_percentage": 0.4})
    assert res.status_code == 200
    assert res.json()["data"]["language"]["language_code"] == "FRA"

    res = client.put("/countries/USA/languages/FRA", json={"is_official": True})
    assert res.status_code == 200
    assert res.json()["data"]["is_official"] is True

    res = client.put("/countries/USA/languages/FRA", json={"is_official": True})
    assert res.json()["code"] == 304

    assert client.delete("/countries/USA/languages/FRA").status_code == 200
    assert client.delete("/countries/USA/languages/FRA").status_code == 404
    assert client.post("/countries/USA/languages", json={"language_code": "XXX"}).status_code == 404


def test_languages(client: TestClient) -> None:
    res = client.get("/languages")
    assert res.status_code == 200
    assert len(res.json()) == 15

    assert client.get("/languages/en").json()["language_code"] == "ENG"
    assert client.get("/languages/XYZ").status_code == 404
    assert client.get("/languages/find").status_code == 400
    assert [l["language_code"] for l in client.get("/languages/find", params={"language_name": "span"}).json()] == ["SPA"]


def test_language_countries(client: TestClient) -> None:
    res = client.get("/languages/EN/countries")
    assert res.status_code == 200
    assert len(res.json()) == 7

    assert client.get("/languages/NLD/countries").status_code == 404
    assert client.get("/languages/XYZ/countries").status_code == 404


def test_language_crud(client: TestClient) -> None:
    res = client.post("/languages", json={"language_code": "SWE", "language_code2": "SV", "language_name": "Swedish"})
    assert res.status_code == 200
    assert client.post("/languages", json={"language_code": "SWE", "language_name": "Swedish"}).status_code == 409

    res = client.put("/languages/SV", json={"language_notes": "North Germanic"})
    assert res.status_code == 200
    assert res.json()["data"]["language_notes"] == "North Germanic"

    assert client.delete("/languages/SWE").status_code == 200
    assert client.get("/languages/SWE").status_code == 404


def test_unknown_route_uses_envelope(client: TestClient) -> None:
    res = client.get("/planets")
    assert res.status_code == 404
    assert res.json()["code"] == 404


def test_update_to_a_code_in_use_is_a_conflict(client: TestClient) -> None:
    res = client.put("/countries/CAN", json={"country_code2": "US"})
    assert res.status_code == 409
    assert res.json()["data"]["country_code"] == "USA"

    res = client.put("/languages/FRA", json={"language_code": "ENG"})
    assert res.status_code == 409


def test_find_cities_checks_country_code(client: TestClient) -> None:
    res = client.get("/cities/find", params={"country_code": "X"})
    assert res.status_code == 400
    assert res.json()["code"] == 400

    assert client.get("/cities/find", params={"country_code": "ZZZ"}).status_code == 404
