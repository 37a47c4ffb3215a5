import asyncio
from datetime import date, time

import httpx
import pytest

from offerbot.errors import ErrorKind, SearchError
from offerbot.partner_api.client import PartnerApiClient
from offerbot.partner_api.config import PartnerApiConfig

CONFIG = PartnerApiConfig(base_url="https://partner.test", api_key="secret")


def _call(handler, method, *args):
    """Run one client method against ``handler`` and return its result."""

    async def run():
        async with PartnerApiClient(CONFIG, transport=httpx.MockTransport(handler)) as client:
            return await getattr(client, method)(*args)

    return asyncio.run(run())


def test_sends_partner_headers():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"cuisineTypes": [], "restaurants": []})

    assert _call(handler, "fetch_search_hints") == {"cuisineTypes": [], "restaurants": []}
    [request] = seen
    assert request.url.path == "/offers/search-hints"
    assert request.headers["Authorization"] == "Partner secret"
    assert request.headers["Accept"] == "application/vnd.citymunch.v14+json"


class TestGeocode:
    def test_found(self, geometries):
        def handler(request):
            assert request.url.params["placeName"] == "soho"
            return httpx.Response(200, json={"isFound": True, "geometry": geometries["soho"]})

        assert _call(handler, "geocode", "soho") == geometries["soho"]

    def test_not_found(self):
        def handler(request):
            return httpx.Response(200, json={"isFound": False})

        assert _call(handler, "geocode", "floffalbum") is None


def test_search_restaurants():
    def handler(request):
        assert request.url.path == "/restaurants/search/authorised-restaurants"
        assert request.url.params["cuisineTypes"] == "Chinese"
        return httpx.Response(200, json={"results": [{"restaurant": {"id": "r1"}}]})

    assert _call(handler, "search_restaurants", {"cuisineTypes": "Chinese"}) == [{"restaurant": {"id": "r1"}}]


class TestActiveEvents:
    def test_query_params(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={"events": [{"event": {}}]})

        events = _call(
            handler, "search_active_events", ["r1", "r2"], date(2026, 10, 17), time(12, 0), time(14, 30),
        )
        assert events == [{"event": {}}]
        assert seen == [{
            "ids": "r1,r2",
            "includeEnded": "false",
            "startDate": "2026-10-17",
            "endDate": "2026-10-17",
            "startTime": "12:00",
            "endTime": "14:30",
        }]

    def test_without_time_window(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            return httpx.Response(200, json={})

        assert _call(handler, "search_active_events", ["r1"], date(2026, 10, 17)) == []
        assert "startTime" not in seen[0]
        assert "endTime" not in seen[0]


class TestFailures:
    def test_server_error(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        with pytest.raises(SearchError) as exc_info:
            _call(handler, "fetch_search_hints")
        assert exc_info.value.kind is ErrorKind.partner_api_error

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(SearchError) as exc_info:
            _call(handler, "geocode", "soho")
        assert exc_info.value.kind is ErrorKind.partner_api_error

    def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(SearchError) as exc_info:
            _call(handler, "geocode", "soho")
        assert exc_info.value.kind is ErrorKind.partner_api_error

    def test_non_object_body(self):
        def handler(request):
            return httpx.Response(200, json=["unexpected"])

        with pytest.raises(SearchError) as exc_info:
            _call(handler, "fetch_search_hints")
        assert exc_info.value.kind is ErrorKind.partner_api_error

    def test_empty_body(self):
        def handler(request):
            return httpx.Response(200)

        assert _call(handler, "get", "/anything") == {}
