from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel

from nearbymap.schemas.marker import Coordinates, Marker


class Placemark(BaseModel):
    """Address components of a reverse geocoding result."""
    inland_water: Optional[str] = None
    ocean: Optional[str] = None
    areas_of_interest: List[str] = []
    locality: Optional[str] = None
    administrative_area: Optional[str] = None


class LocationDescription(BaseModel):
    area_of_interest: Optional[str] = None
    general_area: Optional[str] = None

    def title_lines(self) -> tuple[Optional[str], Optional[str]]:
        """Return (primary, secondary) lines for the widget title."""
        if self.area_of_interest:
            return self.area_of_interest, self.general_area
        return self.general_area, None


class WidgetView(BaseModel):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    source_label: str
    location: Coordinates
    map_url: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    markers: List[Marker] = []
    updated_at: datetime
    refresh_after: datetime


class ListRow(BaseModel):
    label: Optional[str] = None
    marker_icon_url: Optional[str] = None
    image_url: str
    title: str
    article_url: str
    coords_url: str
    directions_url: str


class ListView(BaseModel):
    location: Coordinates
    map_url: str
    rows: List[ListRow] = []
