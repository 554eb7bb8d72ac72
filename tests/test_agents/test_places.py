"""
Unit tests for the place lookup client.
"""

import httpx
import pytest
from dishpulse.agents.places import PlaceLookupClient, fallback_map_url

FALLBACK = "https://www.google.com/maps/search/Joe%27s%20Pizza%20New%20York"


def make_client(handler, api_key="maps-key"):
    return PlaceLookupClient(
        api_key=api_key,
        http_client=httpx.Client(transport=httpx.MockTransport(handler))
    )


def test_fallback_url_encodes_name_and_city():
    assert fallback_map_url("Joe's Pizza", "New York") == FALLBACK


def test_without_api_key_returns_fallback_without_request():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"results": []})

    place = make_client(handler, api_key="").lookup("Joe's Pizza", "New York")

    assert place.name == "Joe's Pizza"
    assert place.url == FALLBACK
    assert requests == []


def test_first_match_is_used():
    seen = {}

    def handler(request):
        seen["query"] = request.url.params["query"]
        seen["key"] = request.url.params["key"]
        return httpx.Response(200, json={"results": [
            {
                "name": "Joe's Pizza Broadway",
                "place_id": "abc123",
                "formatted_address": "1435 Broadway, New York"
            },
            {"name": "Other", "place_id": "zzz"}
        ]})

    place = make_client(handler).lookup("Joe's Pizza", "New York")

    assert seen == {"query": "Joe's Pizza restaurant New York", "key": "maps-key"}
    assert place.name == "Joe's Pizza Broadway"
    assert place.place_id == "abc123"
    assert place.formatted_address == "1435 Broadway, New York"
    assert place.url == (
        "https://www.google.com/maps/search/?api=1"
        "&query=Joe%27s%20Pizza%20Broadway&query_place_id=abc123"
    )


def test_no_results_returns_fallback():
    place = make_client(lambda request: httpx.Response(200, json={"results": []})).lookup(
        "Joe's Pizza", "New York"
    )

    assert place.name == "Joe's Pizza"
    assert place.url == FALLBACK


def test_http_error_returns_fallback():
    place = make_client(lambda request: httpx.Response(500)).lookup("Joe's Pizza", "New York")

    assert place.url == FALLBACK


def test_timeout_returns_fallback():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    place = make_client(handler).lookup("Joe's Pizza", "New York")

    assert place.url == FALLBACK


def test_lookup_batch_preserves_order():
    client = make_client(lambda request: httpx.Response(200, json={"results": []}), api_key="")

    places = client.lookup_batch(["Luna Verde", "Rusty Spoon"], "Austin")

    assert [p.name for p in places] == ["Luna Verde", "Rusty Spoon"]
    assert all(p.url.startswith("https://www.google.com/maps/search/") for p in places)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
