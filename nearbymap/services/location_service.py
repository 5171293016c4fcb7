"""Location acquisition and description."""
import logging
import math
from typing import Optional

from nearbymap.config.settings import LocationSettings, get_settings
from nearbymap.core.exceptions import LocationUnavailableError
from nearbymap.schemas.marker import Coordinates
from nearbymap.schemas.parameters import WidgetParameters
from nearbymap.schemas.widget import LocationDescription, Placemark
from nearbymap.services.geocoding_client import GeocodingClient

logger = logging.getLogger(__name__)


def haversine_m(lat1, lon1, lat2, lon2):
    R = 6371000
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi, dlam = math.radians(lat2-lat1), math.radians(lon2-lon1)
    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dlam/2)**2
    return R * 2 * math.atan2(math.sqrt(a), math.sqrt(1-a))


def describe_location(placemark: Optional[Placemark]) -> LocationDescription:
    """
    Describe a placemark in words, e.g.
    ``area_of_interest="Spot Pond - Middlesex Fells Reservation"``,
    ``general_area="Medford, MA"``.
    """
    if placemark is None:
        return LocationDescription()

    area_of_interest = placemark.inland_water or placemark.ocean or ""
    if placemark.areas_of_interest:
        if area_of_interest:
            area_of_interest += " - "
        # Only the first one, the rest are usually enclosing areas
        area_of_interest += placemark.areas_of_interest[0]

    general_area = ", ".join(
        part for part in (placemark.locality, placemark.administrative_area) if part
    )

    return LocationDescription(
        area_of_interest=area_of_interest or None,
        general_area=general_area or None,
    )


class LocationService:
    """Resolves the current location from overrides; there is no device sensor here."""

    def __init__(
        self,
        settings: Optional[LocationSettings] = None,
        geocoder: Optional[GeocodingClient] = None,
    ):
        self.settings = settings or get_settings().location
        self.geocoder = geocoder or GeocodingClient()

    async def get_current_location(self, params: Optional[WidgetParameters] = None) -> Optional[Coordinates]:
        if params is not None and params.location_override is not None:
            return params.location_override
        if self.settings.latitude is not None and self.settings.longitude is not None:
            return Coordinates(latitude=self.settings.latitude, longitude=self.settings.longitude)
        logger.error("Could not get current location: no location override configured")
        return None

    async def require_location(self, params: Optional[WidgetParameters] = None, attempts: int = 1) -> Coordinates:
        for attempt in range(1, attempts + 1):
            location = await self.get_current_location(params)
            if location is not None:
                return location
            if attempt < attempts:
                logger.warning(f"Location lookup failed, retrying ({attempt}/{attempts})")
        raise LocationUnavailableError(attempts)

    async def get_location_description(self, lat: float, lng: float) -> LocationDescription:
        placemark = await self.geocoder.reverse_geocode(lat, lng)
        return describe_location(placemark)
