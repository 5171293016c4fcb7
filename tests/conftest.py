"""Shared fixtures: isolated settings and canned upstream responses."""
import httpx
import pytest

from nearbymap.config.settings import (
    FlickrSettings,
    GeocodingSettings,
    GoogleMapsSettings,
    LocationSettings,
    Settings,
    WikipediaSettings,
)
from nearbymap.services.flickr_client import FlickrClient
from nearbymap.services.geocoding_client import GeocodingClient
from nearbymap.services.location_service import LocationService
from nearbymap.services.maps_client import MapsClient
from nearbymap.services.wikipedia_client import WikipediaClient
from nearbymap.services.widget_service import WidgetService

GEOSEARCH_PAYLOAD = {
    "batchcomplete": "",
    "query": {
        "pages": {
            "38743": {
                "pageid": 38743,
                "ns": 0,
                "title": "Middlesex Fells Reservation",
                "index": 2,
                "coordinates": [{"lat": 42.46, "lon": -71.1, "primary": "", "globe": "earth"}],
                "thumbnail": {
                    "source": "https://upload.wikimedia.org/wikipedia/commons/thumb/x/50px-Fells.jpg",
                    "width": 50,
                    "height": 34,
                },
                "pageimage": "Fells.jpg",
            },
            "1200": {
                "pageid": 1200,
                "ns": 0,
                "title": "Spot Pond",
                "index": 1,
                "coordinates": [{"lat": 42.45, "lon": -71.09, "primary": "", "globe": "earth"}],
            },
        }
    },
}

NOMINATIM_PAYLOAD = {
    "name": "Spot Pond",
    "category": "natural",
    "type": "water",
    "address": {
        "water": "Spot Pond",
        "leisure": "Middlesex Fells Reservation",
        "city": "Medford",
        "state": "Massachusetts",
        "ISO3166-2-lvl4": "US-MA",
        "country": "United States",
    },
}

PHOTOSET_PAYLOAD = {
    "photoset": {
        "id": "777",
        "owner": "12345@N00",
        "photo": [
            {
                "id": "1",
                "title": "Spot Pond at dusk",
                "latitude": 42.451,
                "longitude": -71.091,
                "url_l": "https://live.staticflickr.com/65535/1_abc_b.jpg",
            },
            {
                "id": "2",
                "title": "Paris",
                "latitude": 48.85,
                "longitude": 2.35,
                "url_l": "https://live.staticflickr.com/65535/2_def_b.jpg",
            },
        ],
    },
    "stat": "ok",
}

MAP_PNG = b"\x89PNG\r\n\x1a\nfake-map"


def upstream_handler(
    geosearch=GEOSEARCH_PAYLOAD,
    geosearch_status=200,
    map_status=200,
    photoset=PHOTOSET_PAYLOAD,
):
    """Route requests by host to canned responses."""
    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "en.wikipedia.org":
            return httpx.Response(geosearch_status, json=geosearch)
        if host == "nominatim.openstreetmap.org":
            return httpx.Response(200, json=NOMINATIM_PAYLOAD)
        if host == "maps.googleapis.com":
            if map_status != 200:
                return httpx.Response(map_status, text="The Google Maps Platform server rejected your request.")
            return httpx.Response(200, content=MAP_PNG, headers={"content-type": "image/png"})
        if host == "api.flickr.com":
            return httpx.Response(200, json=photoset)
        return httpx.Response(404)
    return handler


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        storage_dir=str(tmp_path / "storage"),
        script_name="test-widget",
        debug=False,
        record_performance=True,
        refresh_interval_hours=6,
        google_maps=GoogleMapsSettings(api_key=None),
        wikipedia=WikipediaSettings(),
        geocoding=GeocodingSettings(),
        flickr=FlickrSettings(api_key="flickr-key", photoset_id="777", user_id=None, nearest_pool_size=1),
        location=LocationSettings(latitude=None, longitude=None),
    )


@pytest.fixture
def build_service():
    """Factory for a WidgetService whose clients all talk to a mock transport."""
    def _build(settings: Settings, handler=None) -> WidgetService:
        transport = httpx.MockTransport(handler or upstream_handler())
        return WidgetService(
            settings,
            location_service=LocationService(
                settings.location, GeocodingClient(settings.geocoding, transport=transport)
            ),
            wikipedia_client=WikipediaClient(settings.wikipedia, transport=transport),
            maps_client=MapsClient(settings.google_maps, transport=transport),
            flickr_client=FlickrClient(settings.flickr, transport=transport),
        )
    return _build


@pytest.fixture
def make_handler():
    return upstream_handler


@pytest.fixture
def map_png():
    return MAP_PNG


@pytest.fixture
def geosearch_payload():
    return GEOSEARCH_PAYLOAD


@pytest.fixture
def photoset_payload():
    return PHOTOSET_PAYLOAD
