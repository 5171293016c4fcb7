"""
Configuration management system using Pydantic Settings.
Every outbound API and the local storage folder are configured from the environment.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class GoogleMapsSettings(BaseSettings):
    """Google Maps Static API configuration"""

    api_key: Optional[str] = Field(default=None, description="Static Maps API key")
    static_map_url: str = Field(default="https://maps.googleapis.com/maps/api/staticmap")
    default_zoom: int = Field(default=14, ge=0, le=21)
    marker_color: str = Field(default="red")
    user_marker_color: str = Field(default="blue")
    timeout_seconds: int = Field(default=10, ge=1, le=60)

    model_config = {
        "env_prefix": "GOOGLE_MAPS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class WikipediaSettings(BaseSettings):
    """Wikipedia geosearch configuration"""

    api_url: str = Field(default="https://en.wikipedia.org/w/api.php")
    page_url: str = Field(default="https://en.wikipedia.org/")
    # The geosearch API rejects radii above 10 km
    search_radius_m: int = Field(default=10000, ge=10, le=10000)
    result_limit: int = Field(default=10, ge=1, le=500)
    user_agent: str = Field(default="NearbyMapWidget/1.0")
    timeout_seconds: int = Field(default=10, ge=1, le=60)

    model_config = {
        "env_prefix": "WIKIPEDIA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class GeocodingSettings(BaseSettings):
    """Reverse geocoding (Nominatim) configuration"""

    reverse_url: str = Field(default="https://nominatim.openstreetmap.org/reverse")
    user_agent: str = Field(default="NearbyMapWidget/1.0")
    timeout_seconds: int = Field(default=6, ge=1, le=60)

    model_config = {
        "env_prefix": "GEOCODING_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class FlickrSettings(BaseSettings):
    """Flickr photoset configuration for the photo widget"""

    api_key: Optional[str] = Field(default=None)
    api_url: str = Field(default="https://api.flickr.com/services/rest/")
    photoset_id: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    nearest_pool_size: int = Field(default=5, ge=1, le=100)
    timeout_seconds: int = Field(default=10, ge=1, le=60)

    model_config = {
        "env_prefix": "FLICKR_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class LocationSettings(BaseSettings):
    """Static location override used when no parameter supplies one"""

    latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)

    model_config = {
        "env_prefix": "LOCATION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Nearby Map Widget")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    # "json" for structured lines, otherwise a logging.Formatter format string
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Storage Configuration
    storage_dir: str = Field(default="storage")
    script_name: str = Field(default="nearby-map")
    record_performance: bool = Field(default=True)
    write_log_file: bool = Field(default=False)

    # Widget Configuration
    refresh_interval_hours: float = Field(default=6, gt=0, le=168)

    # Nested Settings
    google_maps: GoogleMapsSettings = Field(default_factory=GoogleMapsSettings)
    wikipedia: WikipediaSettings = Field(default_factory=WikipediaSettings)
    geocoding: GeocodingSettings = Field(default_factory=GeocodingSettings)
    flickr: FlickrSettings = Field(default_factory=FlickrSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def get_storage_path(self) -> Path:
        """Get absolute path for the parameter/metrics storage folder"""
        return Path(self.storage_dir).resolve()

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings


def use_settings(new_settings: Settings) -> Settings:
    """Install an already loaded settings instance as the global one"""
    global settings
    settings = new_settings
    return settings
