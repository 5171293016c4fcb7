# Outbound API clients and the widget pipeline

from .maps_client import MapsClient, MapImage
from .wikipedia_client import WikipediaClient, articles_from_geosearch
from .geocoding_client import GeocodingClient
from .flickr_client import FlickrClient, pick_photo
from .location_service import LocationService, describe_location
from .parameter_service import ParameterService, parse_widget_parameter
from .widget_service import WidgetService

__all__ = [
    "MapsClient",
    "MapImage",
    "WikipediaClient",
    "articles_from_geosearch",
    "GeocodingClient",
    "FlickrClient",
    "pick_photo",
    "LocationService",
    "describe_location",
    "ParameterService",
    "parse_widget_parameter",
    "WidgetService",
]
