import json
import logging
import random

import httpx
import pytest

from prospectfinder.core.config import Settings
from prospectfinder.providers.base import SearchQuery
from prospectfinder.providers.google_places import GooglePlacesConfig, GooglePlacesProvider
from prospectfinder.providers.roster import build_default_providers
from prospectfinder.providers.simulated import (
    SimulatedDirectoryProvider,
    SimulatedMapsProvider,
    SimulatedSocialProvider,
)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(city="", country="USA", category="Cafe", requested_count=5),
        dict(city="Springfield", country=" ", category="Cafe", requested_count=5),
        dict(city="Springfield", country="USA", category="", requested_count=5),
        dict(city="Springfield", country="USA", category="Cafe", requested_count=0),
        dict(city="Springfield", country="USA", category="Cafe", requested_count=101),
    ],
)
def test_search_query_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SearchQuery(**kwargs)


def test_search_query_location_skips_missing_state():
    assert SearchQuery(city="Pune", country="India", category="Gym", requested_count=1).location == "Pune, India"


@pytest.mark.asyncio
@pytest.mark.parametrize("cls", [SimulatedMapsProvider, SimulatedDirectoryProvider, SimulatedSocialProvider])
async def test_simulated_providers_respect_limit_and_copy_category(cls, query):
    records = await cls(random.Random(7)).fetch(query, 4)

    assert len(records) == 4
    assert all(r.category == "Cafe" for r in records)
    assert all(r.source == cls.provider_name for r in records)
    assert all(r.maps_url.startswith("https://maps.google.com/?q=") for r in records)
    assert all(r.website == "" or r.website.startswith("https://") for r in records)


@pytest.mark.asyncio
async def test_simulated_provider_is_deterministic_with_seed(query):
    first = await SimulatedMapsProvider(random.Random(42)).fetch(query, 5)
    second = await SimulatedMapsProvider(random.Random(42)).fetch(query, 5)
    assert first == second


def test_default_roster_is_three_simulated_sources():
    providers = build_default_providers(Settings(discovery_provider="simulated"))
    assert [p.provider_name for p in providers] == ["maps", "directories", "social"]


def test_google_places_fills_maps_slot_when_configured():
    providers = build_default_providers(Settings(discovery_provider="google_places", google_places_api_key="k"))
    assert isinstance(providers[0], GooglePlacesProvider)
    assert len(providers) == 3


def test_google_places_without_key_falls_back(caplog):
    with caplog.at_level(logging.WARNING):
        providers = build_default_providers(Settings(discovery_provider="google_places", google_places_api_key=""))
    assert isinstance(providers[0], SimulatedMapsProvider)
    assert "GOOGLE_PLACES_API_KEY" in caplog.text


def test_google_places_requires_api_key():
    with pytest.raises(ValueError):
        GooglePlacesProvider(GooglePlacesConfig(api_key=""))


def _places_handler(requests_seen):
    details = {
        "p1": {
            "id": "p1",
            "displayName": {"text": "Blue Door Cafe"},
            "formattedAddress": "1 Main St, Springfield, IL, USA",
            "nationalPhoneNumber": "(217) 555-0100",
            "websiteUri": "https://bluedoor.example",
            "googleMapsUri": "https://maps.google.com/?cid=1",
        },
        "p2": {
            "id": "p2",
            "displayName": {"text": "Corner Beans"},
            "formattedAddress": "2 Oak St, Springfield, IL, USA",
        },
    }

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        assert request.headers["X-Goog-Api-Key"] == "secret"
        if request.url.path.endswith("places:searchText"):
            return httpx.Response(200, json={"places": [{"id": "p1"}, {"id": "p2"}, {"id": "p3"}]})
        place_id = request.url.path.rsplit("/", 1)[-1]
        return httpx.Response(200, json=details[place_id])

    return handler


@pytest.mark.asyncio
async def test_google_places_maps_details_into_records(query):
    seen = []
    client = httpx.AsyncClient(transport=httpx.MockTransport(_places_handler(seen)))
    async with GooglePlacesProvider(GooglePlacesConfig(api_key="secret"), client=client) as provider:
        records = await provider.fetch(query, 2)
    await client.aclose()

    assert [r.business_name for r in records] == ["Blue Door Cafe", "Corner Beans"]
    assert records[0].phone == "(217) 555-0100"
    assert records[0].website == "https://bluedoor.example"
    assert records[0].maps_url == "https://maps.google.com/?cid=1"
    assert records[1].website == ""
    assert all(r.category == "Cafe" for r in records)

    body = json.loads(seen[0].content)
    assert body["textQuery"] == "Cafe in Springfield, IL, USA"


@pytest.mark.asyncio
async def test_google_places_gives_up_after_retries(query):
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    cfg = GooglePlacesConfig(api_key="secret", max_retries=0)
    async with GooglePlacesProvider(cfg, client=client) as provider:
        with pytest.raises(RuntimeError):
            await provider.fetch(query, 3)
    await client.aclose()
