"""
Google Maps client: Static Maps API image requests plus the deep links used by
list rows (directions, coordinate search, marker icons).
"""

import itertools
import logging
import string
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import httpx

from nearbymap.config.settings import GoogleMapsSettings, get_settings
from nearbymap.schemas.marker import Coordinates, Marker

logger = logging.getLogger(__name__)

STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
DIRECTIONS_URL = "https://www.google.com/maps/dir"
SEARCH_URL = "https://www.google.com/maps/search/"
MARKER_ICON_URL = "http://maps.google.com/mapfiles/kml/paddle/{label}.png"

SQUARE_MAP_SIZE = "800x800"
MEDIUM_MAP_SIZE = "800x500"
DEFAULT_ZOOM = 14


@dataclass
class MapImage:
    content: bytes
    content_type: str
    title: Optional[str] = None


def get_map_size(widget_size: Optional[str]) -> str:
    """Map size for the Static Maps API; a square unless the widget is medium."""
    if widget_size == "medium":
        return MEDIUM_MAP_SIZE
    return SQUARE_MAP_SIZE


def marker_labels() -> Iterator[Optional[str]]:
    """Yield A..Z, then None for markers that cannot carry a label."""
    return itertools.chain(string.ascii_uppercase, itertools.repeat(None))


def _coords(lat: float, lng: float) -> str:
    return f"{lat},{lng}"


def get_map_url_by_city(
    api_key: str,
    city: str,
    zoom: int = DEFAULT_ZOOM,
    size: str = SQUARE_MAP_SIZE,
    base_url: str = STATIC_MAP_URL,
) -> str:
    params = [("center", city), ("zoom", str(zoom)), ("size", size), ("key", api_key)]
    return str(httpx.URL(base_url, params=params))


def get_map_url_by_coordinates(
    api_key: str,
    lat: float,
    lng: float,
    markers: Sequence[Marker] = (),
    zoom: int = DEFAULT_ZOOM,
    size: str = SQUARE_MAP_SIZE,
    marker_color: str = "red",
    user_marker_color: str = "blue",
    base_url: str = STATIC_MAP_URL,
) -> str:
    """
    Build a Static Maps URL around a location.

    With markers the map has no explicit center or zoom, so the API fits the
    viewport to the labelled markers. Without markers the map is centered on
    the location and shows a single user marker.
    """
    center = _coords(lat, lng)
    if markers:
        params = [("size", size), ("key", api_key)]
        for label, marker in zip(marker_labels(), markers):
            style = f"color:{marker_color}"
            if label:
                style += f"|label:{label}"
            params.append(("markers", f"{style}|{_coords(marker.lat, marker.lng)}"))
    else:
        params = [
            ("center", center),
            ("zoom", str(zoom)),
            ("size", size),
            ("key", api_key),
            ("markers", f"color:{user_marker_color}|{center}"),
        ]
    return str(httpx.URL(base_url, params=params))


def get_directions_url(origin: Coordinates, destination: Coordinates) -> str:
    return (
        f"{DIRECTIONS_URL}/{_coords(origin.latitude, origin.longitude)}"
        f"/{_coords(destination.latitude, destination.longitude)}"
    )


def get_coords_url(destination: Coordinates) -> str:
    return f"{SEARCH_URL}?api=1&query={_coords(destination.latitude, destination.longitude)}"


def get_marker_icon_url(label: str) -> str:
    return MARKER_ICON_URL.format(label=label)


class MapsClient:
    """Fetches static map images; failures are logged and returned as None."""

    def __init__(
        self,
        settings: Optional[GoogleMapsSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings().google_maps
        self.timeout = self.settings.timeout_seconds
        self._transport = transport

    def map_url_by_coordinates(
        self,
        api_key: str,
        lat: float,
        lng: float,
        markers: Sequence[Marker] = (),
        size: str = SQUARE_MAP_SIZE,
    ) -> str:
        return get_map_url_by_coordinates(
            api_key,
            lat,
            lng,
            markers,
            zoom=self.settings.default_zoom,
            size=size,
            marker_color=self.settings.marker_color,
            user_marker_color=self.settings.user_marker_color,
            base_url=self.settings.static_map_url,
        )

    def map_url_by_city(self, api_key: str, city: str, size: str = SQUARE_MAP_SIZE) -> str:
        return get_map_url_by_city(
            api_key,
            city,
            zoom=self.settings.default_zoom,
            size=size,
            base_url=self.settings.static_map_url,
        )

    async def load_image(self, url: str) -> Optional[MapImage]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Could not load static map: {e}")
            return None

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            logger.error(f"Static map response is not an image: {content_type!r}")
            return None
        return MapImage(content=response.content, content_type=content_type)

    async def get_map_image_by_coordinates(
        self,
        api_key: str,
        lat: float,
        lng: float,
        markers: Sequence[Marker] = (),
        size: str = SQUARE_MAP_SIZE,
    ) -> Optional[MapImage]:
        url = self.map_url_by_coordinates(api_key, lat, lng, markers, size)
        logger.debug(f"Static map request for {lat},{lng} with {len(markers)} markers")
        return await self.load_image(url)

    async def get_map_image_by_city(
        self,
        api_key: str,
        city: str,
        size: str = SQUARE_MAP_SIZE,
    ) -> Optional[MapImage]:
        image = await self.load_image(self.map_url_by_city(api_key, city, size))
        if image is not None:
            image.title = city
        return image
