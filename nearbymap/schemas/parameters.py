from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from nearbymap.schemas.marker import Coordinates


class WidgetSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class ImageSource(str, Enum):
    WIKIPEDIA = "wikipedia"
    FLICKR = "flickr"


class WidgetParameters(BaseModel):
    """
    Per-invocation configuration, supplied as a JSON object such as
    ``{"apiKey": "...", "debug": true, "latitude": 42.36, "longitude": -71.06}``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    debug: bool = False
    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    widget_size: WidgetSize = Field(default=WidgetSize.SMALL, alias="widgetSize")
    source: ImageSource = ImageSource.WIKIPEDIA

    @property
    def location_override(self) -> Optional[Coordinates]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    def to_stored(self) -> dict:
        """Serialize with the same keys the widget argument uses."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
