from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from offerbot.app import create_app
from offerbot.errors import NEEDS_LOCATION_MESSAGE, NOTHING_FOUND_MESSAGE, UNKNOWN_LOCATION_MESSAGE
from offerbot.partner_api.client import PartnerApiClient
from offerbot.partner_api.config import PartnerApiConfig
from offerbot.service import OfferSearchService


@pytest.fixture
def partner_handler(catalog_payload, geometries):
    """Routes requests to a canned partner API; events have always started."""

    def handler(request):
        path = request.url.path
        if path == "/offers/search-hints":
            return httpx.Response(200, json=catalog_payload)
        if path == "/geo/geocode":
            geometry = geometries.get(request.url.params["placeName"].lower())
            return httpx.Response(200, json={"isFound": geometry is not None, "geometry": geometry})
        if path == "/restaurants/search/authorised-restaurants":
            if request.url.params.get("cuisineTypes") != "Chinese":
                return httpx.Response(200, json={"results": []})
            return httpx.Response(200, json={"results": [
                {"restaurant": {"id": "r2"}, "walkingDistance": {"distanceInMeters": 300, "durationText": "4 mins"}},
            ]})
        if path == "/offers/search/active-events-by-restaurant-ids":
            return httpx.Response(200, json={"events": [{
                "event": {
                    "discount": 20,
                    "startTime": "12:00",
                    "endTime": "23:00",
                    "date": date.today().isoformat(),
                    "isToday": True,
                    "isActiveOnDate": True,
                    "hasStarted": True,
                    "hasEnded": False,
                },
                "offer": {"itemName": "Pho"},
                "restaurant": {"id": "r2", "name": "Pho & Bun", "streetName": "Old St"},
            }]})
        return httpx.Response(404)

    return handler


@pytest.fixture
def client(partner_handler):
    api = PartnerApiClient(
        PartnerApiConfig(base_url="https://partner.test", api_key="secret"),
        transport=httpx.MockTransport(partner_handler),
    )
    with TestClient(create_app(OfferSearchService(api))) as test_client:
        yield test_client


# ── Public endpoints ─────────────────────────────────────────────────────


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_catalog_stats_after_search(client):
    client.post("/search", json={"text": "chinese in old street"})
    stats = client.get("/catalog/stats").json()
    assert stats["ready"] is True
    assert stats["cuisine_types"] == 4


# ── Search ───────────────────────────────────────────────────────────────


class TestSearch:
    def test_results(self, client):
        response = client.post("/search", json={"text": "chinese food in old street please", "user_id": "u1"})
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "results"
        assert data["message"].startswith("*Next two hours near Old St*:")
        assert "20% off *Pho* at Pho & Bun (Old St)" in data["message"]
        assert "(4 mins away)" in data["message"]
        assert data["result"]["parsed_criteria"]["cuisine_type"] == "Chinese"
        assert data["result"]["save_location_options"] == ["work", "home"]

    def test_parse_failure(self, client):
        data = client.post("/search", json={"text": "blobblesquid near old street"}).json()
        assert data["type"] == "error"
        assert data["error_kind"] == "parse_failure"
        assert data["message"] == NOTHING_FOUND_MESSAGE
        assert data["result"] is None

    def test_needs_location(self, client):
        data = client.post("/search", json={"text": "around me", "user_id": "fresh-user"}).json()
        assert data["error_kind"] == "needs_location"
        assert data["message"] == NEEDS_LOCATION_MESSAGE

    def test_unknown_location(self, client):
        data = client.post("/search", json={"text": "chinese in floffalbum"}).json()
        assert data["error_kind"] == "location_not_found"
        assert data["message"] == UNKNOWN_LOCATION_MESSAGE

    def test_no_restaurants(self, client):
        data = client.post("/search", json={"text": "italian in soho"}).json()
        assert data["error_kind"] == "no_restaurants_found"
        assert data["message"] == NOTHING_FOUND_MESSAGE

    def test_near_me_after_located_search(self, client):
        client.post("/search", json={"text": "chinese in old street", "user_id": "u1"})
        data = client.post("/search", json={"text": "chinese near me", "user_id": "u1"}).json()
        assert data["type"] == "results"
        assert data["result"]["parsed_criteria"]["is_location_from_history"] is True

    def test_empty_text_is_rejected(self, client):
        assert client.post("/search", json={"text": ""}).status_code == 422


# ── Saved locations ──────────────────────────────────────────────────────


class TestSavedLocations:
    def test_options(self, client):
        assert list(client.get("/saved-locations/options").json()) == ["work", "home"]

    def test_save_then_search(self, client):
        response = client.post("/saved-locations", json={"user_id": "u1", "name": "home", "text": "old street"})
        assert response.status_code == 200
        assert response.json()["name"] == "Old St"

        data = client.post("/search", json={"text": "chinese near home", "user_id": "u1"}).json()
        assert data["type"] == "results"
        assert data["result"]["save_location_options"] == []

    def test_already_saved_names_are_not_offered_again(self, client):
        client.post("/saved-locations", json={"user_id": "u1", "name": "home", "text": "soho"})

        data = client.post("/search", json={"text": "chinese in old street", "user_id": "u1"}).json()
        assert data["type"] == "results"
        assert data["result"]["save_location_options"] == ["work"]

        other = client.post("/search", json={"text": "chinese in old street", "user_id": "u2"}).json()
        assert other["result"]["save_location_options"] == ["work", "home"]

    def test_unknown_name(self, client):
        response = client.post("/saved-locations", json={"user_id": "u1", "name": "gym", "text": "old street"})
        assert response.status_code == 422

    def test_unknown_place(self, client):
        response = client.post("/saved-locations", json={"user_id": "u1", "name": "work", "text": "floffalbum"})
        assert response.status_code == 404
        assert response.json()["detail"] == UNKNOWN_LOCATION_MESSAGE
