import json
import logging

import pytest

from nearbymap.config.loader import ConfigLoader, load_config_for_environment
from nearbymap.config.settings import Environment, Settings
from nearbymap.core.logging import build_formatter


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.storage_dir == "storage"
    assert settings.script_name == "nearby-map"
    assert settings.refresh_interval_hours == 6
    assert settings.wikipedia.search_radius_m == 10000
    assert settings.google_maps.default_zoom == 14


def test_environment_is_normalized():
    assert Settings(_env_file=None, environment="PRODUCTION").is_production()


def test_nested_sections_read_prefixed_variables(monkeypatch):
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "from-env")
    monkeypatch.setenv("LOCATION_LATITUDE", "42.36")
    monkeypatch.setenv("LOCATION_LONGITUDE", "-71.06")

    settings = Settings(_env_file=None)

    assert settings.google_maps.api_key == "from-env"
    assert settings.location.latitude == 42.36
    assert settings.location.longitude == -71.06


def test_search_radius_is_capped(monkeypatch):
    monkeypatch.setenv("WIKIPEDIA_SEARCH_RADIUS_M", "20000")
    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_environment_file_is_loaded(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.staging").write_text(
        "SCRIPT_NAME=staging-widget\nGOOGLE_MAPS_API_KEY=staging-key\nLOCATION_LATITUDE=1.5\n"
    )

    settings = load_config_for_environment("staging")

    assert settings.environment == Environment.STAGING
    assert settings.script_name == "staging-widget"
    assert settings.google_maps.api_key == "staging-key"
    assert settings.location.latitude == 1.5


def test_missing_environment_file_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = ConfigLoader.load_environment_config("testing")
    assert settings.environment == Environment.TESTING


def test_unknown_environment():
    with pytest.raises(ValueError):
        ConfigLoader.load_environment_config("moon")


def test_sample_env_file(tmp_path):
    output = tmp_path / ".env.production.sample"

    ConfigLoader.create_sample_env_file("production", str(output))

    content = output.read_text()
    assert "ENVIRONMENT=production" in content
    assert "DEBUG=false" in content
    assert "GOOGLE_MAPS_API_KEY=your-google-maps-api-key" in content
    assert "# LOCATION_LATITUDE=" in content


def test_available_environments_skip_samples(tmp_path):
    for name in (".env.development", ".env.production", ".env.production.sample"):
        (tmp_path / name).write_text("")

    assert ConfigLoader.get_available_environments(str(tmp_path)) == ["development", "production"]


def test_dotenv_file_feeds_every_section(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text(
        "SCRIPT_NAME=dotenv-widget\n"
        "GOOGLE_MAPS_API_KEY=k\n"
        "WIKIPEDIA_RESULT_LIMIT=3\n"
        "GEOCODING_TIMEOUT_SECONDS=9\n"
        "FLICKR_PHOTOSET_ID=777\n"
        "LOCATION_LATITUDE=42.0\n"
        "LOCATION_LONGITUDE=-71.0\n"
    )

    settings = Settings()

    assert settings.script_name == "dotenv-widget"
    assert settings.google_maps.api_key == "k"
    assert settings.wikipedia.result_limit == 3
    assert settings.geocoding.timeout_seconds == 9
    assert settings.flickr.photoset_id == "777"
    assert settings.location.latitude == 42.0
    assert settings.location.longitude == -71.0


def test_log_format_selects_formatter():
    record = logging.LogRecord("nearbymap.test", logging.INFO, __file__, 1, "hello", None, None)

    assert json.loads(build_formatter("json").format(record)) == {
        "level": "INFO",
        "message": "hello",
        "logger": "nearbymap.test",
    }
    assert build_formatter("%(levelname)s %(name)s %(message)s").format(record) == "INFO nearbymap.test hello"
    assert Settings(_env_file=None).log_format == "json"
