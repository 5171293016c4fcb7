"""
Configuration package for the Nearby Map Widget.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    GoogleMapsSettings,
    WikipediaSettings,
    GeocodingSettings,
    FlickrSettings,
    LocationSettings,
    get_settings,
    reload_settings,
    use_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "GoogleMapsSettings",
    "WikipediaSettings",
    "GeocodingSettings",
    "FlickrSettings",
    "LocationSettings",
    "get_settings",
    "reload_settings",
    "use_settings",
]
