from unittest.mock import AsyncMock

import httpx
import pytest

from nearbymap.config.settings import GeocodingSettings, LocationSettings
from nearbymap.core.exceptions import LocationUnavailableError
from nearbymap.schemas.marker import Coordinates
from nearbymap.schemas.parameters import WidgetParameters
from nearbymap.schemas.widget import LocationDescription, Placemark
from nearbymap.services.geocoding_client import GeocodingClient, placemark_from_nominatim
from nearbymap.services.location_service import LocationService, describe_location, haversine_m

SPOT_POND = {
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


def _service(latitude=None, longitude=None, geocoder=None):
    return LocationService(
        LocationSettings(latitude=latitude, longitude=longitude),
        geocoder or GeocodingClient(GeocodingSettings()),
    )


class TestDescribeLocation:

    def test_water_and_area_of_interest(self):
        description = describe_location(Placemark(
            inland_water="Spot Pond",
            areas_of_interest=["Middlesex Fells Reservation", "Greater Boston"],
            locality="Medford",
            administrative_area="MA",
        ))
        assert description.area_of_interest == "Spot Pond - Middlesex Fells Reservation"
        assert description.general_area == "Medford, MA"

    def test_ocean_used_when_no_inland_water(self):
        description = describe_location(Placemark(ocean="Atlantic Ocean"))
        assert description.area_of_interest == "Atlantic Ocean"
        assert description.general_area is None

    def test_only_administrative_area(self):
        description = describe_location(Placemark(administrative_area="MA"))
        assert description.area_of_interest is None
        assert description.general_area == "MA"

    def test_missing_placemark(self):
        assert describe_location(None) == LocationDescription()

    def test_title_lines(self):
        both = LocationDescription(area_of_interest="Spot Pond", general_area="Medford, MA")
        assert both.title_lines() == ("Spot Pond", "Medford, MA")

        general_only = LocationDescription(general_area="Medford, MA")
        assert general_only.title_lines() == ("Medford, MA", None)


class TestNominatimPlacemark:

    def test_water_feature(self):
        placemark = placemark_from_nominatim(SPOT_POND)
        assert placemark.inland_water == "Spot Pond"
        assert placemark.areas_of_interest == ["Middlesex Fells Reservation"]
        assert placemark.locality == "Medford"
        assert placemark.administrative_area == "MA"

    def test_ocean_feature(self):
        placemark = placemark_from_nominatim({"name": "Atlantic Ocean", "type": "ocean", "address": {}})
        assert placemark.ocean == "Atlantic Ocean"
        assert placemark.inland_water is None

    def test_state_used_without_iso_code(self):
        placemark = placemark_from_nominatim({"address": {"town": "Chatham", "state": "Massachusetts"}})
        assert placemark.locality == "Chatham"
        assert placemark.administrative_area == "Massachusetts"


@pytest.mark.asyncio
async def test_reverse_geocode_sends_coordinates():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=SPOT_POND)

    client = GeocodingClient(GeocodingSettings(), transport=httpx.MockTransport(handler))
    placemark = await client.reverse_geocode(42.45, -71.09)

    assert placemark.inland_water == "Spot Pond"
    assert requests[0].url.params["lat"] == "42.45"
    assert requests[0].url.params["lon"] == "-71.09"
    assert requests[0].url.params["format"] == "jsonv2"


@pytest.mark.asyncio
async def test_reverse_geocode_error_payload_returns_none():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"error": "Unable to geocode"}))
    client = GeocodingClient(GeocodingSettings(), transport=transport)

    assert await client.reverse_geocode(0.0, 0.0) is None


@pytest.mark.asyncio
async def test_reverse_geocode_http_error_returns_none():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    client = GeocodingClient(GeocodingSettings(), transport=transport)

    assert await client.reverse_geocode(42.45, -71.09) is None


@pytest.mark.asyncio
async def test_parameter_override_wins_over_settings():
    service = _service(latitude=1.0, longitude=2.0)
    params = WidgetParameters(latitude=42.45, longitude=-71.09)

    assert await service.get_current_location(params) == Coordinates(latitude=42.45, longitude=-71.09)


@pytest.mark.asyncio
async def test_settings_override_used_without_parameters():
    service = _service(latitude=1.0, longitude=2.0)

    assert await service.get_current_location(WidgetParameters()) == Coordinates(latitude=1.0, longitude=2.0)


@pytest.mark.asyncio
async def test_no_override_means_no_location():
    assert await _service().get_current_location(WidgetParameters()) is None


@pytest.mark.asyncio
async def test_require_location_raises_after_all_attempts():
    service = _service()
    with pytest.raises(LocationUnavailableError) as exc_info:
        await service.require_location(WidgetParameters(), attempts=2)
    assert exc_info.value.details == {"attempts": 2}
    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_require_location_retries_once():
    service = _service()
    location = Coordinates(latitude=42.45, longitude=-71.09)
    service.get_current_location = AsyncMock(side_effect=[None, location])

    assert await service.require_location(WidgetParameters(), attempts=2) == location
    assert service.get_current_location.call_count == 2


@pytest.mark.asyncio
async def test_location_description_uses_geocoder():
    geocoder = GeocodingClient(GeocodingSettings())
    geocoder.reverse_geocode = AsyncMock(return_value=Placemark(locality="Medford", administrative_area="MA"))
    service = _service(geocoder=geocoder)

    description = await service.get_location_description(42.45, -71.09)

    assert description.title_lines() == ("Medford, MA", None)
    geocoder.reverse_geocode.assert_awaited_once_with(42.45, -71.09)


def test_haversine_distance():
    # Boston Common to Harvard Yard is a little under 5 km
    dist = haversine_m(42.355, -71.0656, 42.3744, -71.1169)
    assert 4000 < dist < 5000
    assert haversine_m(1.0, 1.0, 1.0, 1.0) == 0
