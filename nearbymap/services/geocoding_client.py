"""Reverse geocoding through Nominatim."""

import logging
from typing import Any, Dict, Optional

import httpx

from nearbymap.config.settings import GeocodingSettings, get_settings
from nearbymap.schemas.widget import Placemark

logger = logging.getLogger(__name__)

WATER_TYPES = {"water", "lake", "river", "reservoir", "pond", "bay", "lagoon", "stream", "canal"}
OCEAN_TYPES = {"ocean", "sea", "strait"}
AREA_OF_INTEREST_KEYS = ("tourism", "leisure", "historic", "natural", "amenity")
LOCALITY_KEYS = ("city", "town", "village", "hamlet", "suburb")


def _administrative_area(address: Dict[str, Any]) -> Optional[str]:
    # "US-MA" -> "MA"
    iso_code = address.get("ISO3166-2-lvl4")
    if iso_code and "-" in iso_code:
        return iso_code.split("-", 1)[1]
    return address.get("state")


def placemark_from_nominatim(payload: Dict[str, Any]) -> Placemark:
    """Map a Nominatim ``jsonv2`` reverse result onto placemark fields."""
    address = payload.get("address") or {}
    name = payload.get("name") or None
    feature_type = payload.get("type")

    inland_water = address.get("water")
    if not inland_water and feature_type in WATER_TYPES:
        inland_water = name

    ocean = address.get("ocean") or address.get("sea")
    if not ocean and feature_type in OCEAN_TYPES:
        ocean = name

    areas_of_interest = []
    for key in AREA_OF_INTEREST_KEYS:
        value = address.get(key)
        if value and value not in areas_of_interest and value != inland_water:
            areas_of_interest.append(value)

    locality = next((address[key] for key in LOCALITY_KEYS if address.get(key)), None)

    return Placemark(
        inland_water=inland_water,
        ocean=ocean,
        areas_of_interest=areas_of_interest,
        locality=locality,
        administrative_area=_administrative_area(address),
    )


class GeocodingClient:
    def __init__(
        self,
        settings: Optional[GeocodingSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings().geocoding
        self._transport = transport

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[Placemark]:
        params = {
            "lat": str(lat),
            "lon": str(lng),
            "format": "jsonv2",
            "addressdetails": "1",
        }
        try:
            async with httpx.AsyncClient(
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(self.settings.reverse_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not reverse geocode location: {e}")
            return None

        if not isinstance(payload, dict) or "error" in payload:
            logger.warning(f"Could not reverse geocode location: {payload!r}")
            return None
        return placemark_from_nominatim(payload)
