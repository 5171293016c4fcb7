from .base import Envelope, StandardErrorResponse
from .marker import Coordinates, Thumbnail, Marker
from .photo import FlickrPhoto
from .parameters import WidgetParameters, WidgetSize, ImageSource
from .widget import Placemark, LocationDescription, WidgetView, ListRow, ListView

__all__ = [
    "Envelope",
    "StandardErrorResponse",
    "Coordinates",
    "Thumbnail",
    "Marker",
    "FlickrPhoto",
    "WidgetParameters",
    "WidgetSize",
    "ImageSource",
    "Placemark",
    "LocationDescription",
    "WidgetView",
    "ListRow",
    "ListView",
]
