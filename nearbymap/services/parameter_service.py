"""
Widget parameter resolution.

Parameters come from the first source that yields something:
the widget argument string, the stored ``storage/<name>.json`` file, then
defaults built from settings.
"""

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from nearbymap.config.settings import Settings, get_settings
from nearbymap.core.storage import JSONFileManager
from nearbymap.schemas.parameters import WidgetParameters

logger = logging.getLogger(__name__)


def _to_parameters(data: Any, source: str) -> Optional[WidgetParameters]:
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {source} parameters: expected a JSON object, got {type(data).__name__}")
        return None
    try:
        return WidgetParameters.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid {source} parameters: {e}")
        return None


def parse_widget_parameter(raw: Optional[str]) -> Optional[WidgetParameters]:
    """Parse the host-supplied widget argument; anything unusable yields None."""
    if raw is None or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Widget parameter is not valid JSON: {e}")
        return None
    return _to_parameters(data, "widget")


def default_parameters(settings: Optional[Settings] = None) -> Optional[WidgetParameters]:
    """Parameters from configuration, available only when a maps key is set."""
    settings = settings or get_settings()
    if not settings.google_maps.api_key:
        return None
    return WidgetParameters(
        api_key=settings.google_maps.api_key,
        debug=settings.debug,
        latitude=settings.location.latitude,
        longitude=settings.location.longitude,
    )


class ParameterService:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.files = JSONFileManager(self.settings.storage_dir)

    def load_stored_parameters(self, name: Optional[str] = None) -> Optional[WidgetParameters]:
        name = name or self.settings.script_name
        return _to_parameters(self.files.read_json(name), "stored")

    def save_parameters(self, params: WidgetParameters, name: Optional[str] = None) -> bool:
        return self.files.write_json(name or self.settings.script_name, params.to_stored())

    def resolve_parameters(
        self,
        raw: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Optional[WidgetParameters]:
        params = (
            parse_widget_parameter(raw)
            or self.load_stored_parameters(name)
            or default_parameters(self.settings)
        )
        if params is None:
            logger.warning("No valid parameters!")
        else:
            logger.info(f"Using params: {params.model_dump(exclude={'api_key'})}")
        return params
