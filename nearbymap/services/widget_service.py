"""
Widget pipeline: location, nearby articles, static map, description.

Each outbound step is timed by a per-run PerformanceDebugger; the timings can
be appended to the storage folder's CSV once the run is over.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Union

from nearbymap.config.settings import Settings, get_settings
from nearbymap.core.exceptions import MissingApiKeyError, MissingParametersError
from nearbymap.core.metrics import PerformanceDebugger
from nearbymap.schemas.marker import Coordinates, Marker
from nearbymap.schemas.parameters import ImageSource, WidgetParameters
from nearbymap.schemas.widget import ListRow, ListView, WidgetView
from nearbymap.services.flickr_client import FlickrClient
from nearbymap.services.geocoding_client import GeocodingClient
from nearbymap.services.location_service import LocationService
from nearbymap.services.maps_client import (
    MapImage,
    MapsClient,
    get_coords_url,
    get_directions_url,
    get_map_size,
    get_marker_icon_url,
    marker_labels,
)
from nearbymap.services.wikipedia_client import WikipediaClient

logger = logging.getLogger(__name__)

WIKIPEDIA_SOURCE_LABEL = "Wikipedia"
FLICKR_SOURCE_LABEL = "Flickr"

# Location lookups sometimes fail once and succeed right after
LIST_LOCATION_ATTEMPTS = 2


class WidgetService:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        location_service: Optional[LocationService] = None,
        wikipedia_client: Optional[WikipediaClient] = None,
        maps_client: Optional[MapsClient] = None,
        flickr_client: Optional[FlickrClient] = None,
    ):
        self.settings = settings or get_settings()
        self.location_service = location_service or LocationService(
            self.settings.location, GeocodingClient(self.settings.geocoding)
        )
        self.wikipedia = wikipedia_client or WikipediaClient(self.settings.wikipedia)
        self.maps = maps_client or MapsClient(self.settings.google_maps)
        self.flickr = flickr_client or FlickrClient(self.settings.flickr)
        self.performance = PerformanceDebugger()

    def _api_key(self, params: WidgetParameters) -> str:
        api_key = params.api_key or self.settings.google_maps.api_key
        if not api_key:
            raise MissingApiKeyError("google_maps")
        return api_key

    def _refresh_window(self) -> tuple[datetime, datetime]:
        now = datetime.now(timezone.utc)
        return now, now + timedelta(hours=self.settings.refresh_interval_hours)

    async def _nearby_markers(self, location: Coordinates) -> List[Marker]:
        articles = await self.performance.wrap(
            self.wikipedia.get_nearby_articles, location.latitude, location.longitude
        )
        return articles or []

    async def create_widget(self, params: WidgetParameters) -> WidgetView:
        """Compose the home-screen view: map of nearby articles plus a title."""
        api_key = self._api_key(params)
        location = await self.performance.wrap(
            self.location_service.require_location, params
        )
        markers = await self._nearby_markers(location)
        map_url = await self.performance.wrap(
            self.maps.map_url_by_coordinates,
            api_key,
            location.latitude,
            location.longitude,
            markers,
            size=get_map_size(params.widget_size),
        )
        description = await self.performance.wrap(
            self.location_service.get_location_description,
            location.latitude,
            location.longitude,
        )
        title, subtitle = description.title_lines()
        updated_at, refresh_after = self._refresh_window()

        return WidgetView(
            title=title,
            subtitle=subtitle,
            source_label=WIKIPEDIA_SOURCE_LABEL,
            location=location,
            map_url=map_url,
            image_url=map_url,
            markers=markers,
            updated_at=updated_at,
            refresh_after=refresh_after,
        )

    async def click_widget(self, params: WidgetParameters) -> ListView:
        """Compose the detail list shown when the widget is tapped."""
        api_key = self._api_key(params)
        location = await self.performance.wrap(
            self.location_service.require_location, params, LIST_LOCATION_ATTEMPTS
        )
        markers = await self._nearby_markers(location)
        map_url = await self.performance.wrap(
            self.maps.map_url_by_coordinates,
            api_key,
            location.latitude,
            location.longitude,
            markers,
            size=get_map_size(params.widget_size),
        )

        rows = []
        for label, marker in zip(marker_labels(), markers):
            destination = Coordinates(latitude=marker.lat, longitude=marker.lng)
            rows.append(ListRow(
                label=label,
                marker_icon_url=get_marker_icon_url(label) if label else None,
                image_url=marker.thumbnail.source if marker.thumbnail else "",
                title=marker.title,
                article_url=marker.url,
                coords_url=get_coords_url(destination),
                directions_url=get_directions_url(location, destination),
            ))
        return ListView(location=location, map_url=map_url, rows=rows)

    async def get_map_image(self, params: WidgetParameters) -> Optional[MapImage]:
        """Static map bytes for the current location and its nearby articles."""
        api_key = self._api_key(params)
        location = await self.performance.wrap(
            self.location_service.require_location, params
        )
        markers = await self._nearby_markers(location)
        return await self.performance.wrap(
            self.maps.get_map_image_by_coordinates,
            api_key,
            location.latitude,
            location.longitude,
            markers,
            get_map_size(params.widget_size),
        )

    async def load_map_image(self, map_url: str) -> Optional[MapImage]:
        """Fetch the image behind a map URL already built by this run."""
        return await self.performance.wrap(self.maps.load_image, map_url)

    async def create_photo_widget(self, params: WidgetParameters) -> WidgetView:
        """Photo variant: a photoset picture near the current location."""
        location = await self.performance.wrap(
            self.location_service.require_location, params
        )
        photo = await self.performance.wrap(self.flickr.get_random_photo, location)
        updated_at, refresh_after = self._refresh_window()

        return WidgetView(
            title=photo.title if photo else None,
            source_label=FLICKR_SOURCE_LABEL,
            location=location,
            image_url=photo.image_url if photo else None,
            link_url=photo.page_url if photo else None,
            updated_at=updated_at,
            refresh_after=refresh_after,
        )

    async def run(
        self,
        params: Optional[WidgetParameters],
        mode: Optional[str] = None,
        name: Optional[str] = None,
        record: bool = True,
    ) -> Union[WidgetView, ListView]:
        """
        Run one invocation the way the widget host would.

        ``mode`` is ``"widget"`` or ``"list"``; without it the debug flag
        selects the widget view and the list is the default. The flickr
        source always produces the photo widget. With ``record`` off the caller
        saves the performance row itself, after any follow-up steps.
        """
        if params is None:
            raise MissingParametersError()

        try:
            if params.source == ImageSource.FLICKR:
                return await self.create_photo_widget(params)
            if mode == "widget" or (mode is None and params.debug):
                return await self.create_widget(params)
            return await self.click_widget(params)
        finally:
            if record:
                self.save_performance(name)

    def save_performance(self, name: Optional[str] = None) -> bool:
        if not self.settings.record_performance:
            return False
        return self.performance.append_to_file(
            self.settings.storage_dir, name or self.settings.script_name
        )
