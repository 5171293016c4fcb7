"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import Settings, Environment

logger = logging.getLogger(__name__)

SECTION_FIELDS = ("google_maps", "wikipedia", "geocoding", "flickr", "location")


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            env_file = str(env_file_path)
            # Nested sections are built by default factories that only see .env
            sections = {
                name: field.annotation(_env_file=env_file)
                for name, field in Settings.model_fields.items()
                if name in SECTION_FIELDS
            }
            return Settings(_env_file=env_file, environment=env, **sections)

        logger.warning(
            "Environment file %s not found, using default settings", env_file_path
        )
        return Settings(environment=env)

    @staticmethod
    def get_available_environments(directory: str = ".") -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(directory).glob(".env.*"):
            if env_file.name.endswith(".sample"):
                continue
            env_files.append(env_file.name.replace(".env.", "", 1))
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={defaults.log_format}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}

# Storage Configuration
STORAGE_DIR={defaults.storage_dir}
SCRIPT_NAME={defaults.script_name}
RECORD_PERFORMANCE={'true' if defaults.record_performance else 'false'}
WRITE_LOG_FILE={'true' if defaults.write_log_file else 'false'}
REFRESH_INTERVAL_HOURS={defaults.refresh_interval_hours}

# Google Maps Static API
GOOGLE_MAPS_API_KEY=your-google-maps-api-key
GOOGLE_MAPS_DEFAULT_ZOOM={defaults.google_maps.default_zoom}

# Wikipedia Geosearch
WIKIPEDIA_SEARCH_RADIUS_M={defaults.wikipedia.search_radius_m}
WIKIPEDIA_RESULT_LIMIT={defaults.wikipedia.result_limit}

# Flickr Photoset
FLICKR_API_KEY=your-flickr-api-key
# FLICKR_PHOTOSET_ID=
# FLICKR_USER_ID=

# Static Location Override
# LOCATION_LATITUDE=42.3601
# LOCATION_LONGITUDE=-71.0589
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
