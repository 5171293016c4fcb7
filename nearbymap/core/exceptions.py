"""
Custom exceptions for the nearby map widget.
Outbound clients log and swallow upstream failures; these are raised where a
request cannot produce anything useful at all.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Parameter errors
    MISSING_PARAMETERS = "MISSING_PARAMETERS"
    MISSING_API_KEY = "MISSING_API_KEY"

    # Location errors
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"

    # Upstream errors
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INVALID_UPSTREAM_RESPONSE = "INVALID_UPSTREAM_RESPONSE"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class WidgetException(Exception):
    """Base exception for the nearby map widget."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class MissingParametersError(WidgetException):
    """Raised when no widget parameters could be resolved."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="No valid parameters!",
            error_code=ErrorCode.MISSING_PARAMETERS,
            details=details,
            status_code=400
        )


class MissingApiKeyError(WidgetException):
    """Raised when a service needs an API key that was not configured."""

    def __init__(self, service_name: str):
        super().__init__(
            message=f"No API key configured for {service_name}",
            error_code=ErrorCode.MISSING_API_KEY,
            details={"service_name": service_name},
            status_code=400
        )


class LocationUnavailableError(WidgetException):
    """Raised when the current location cannot be determined."""

    def __init__(self, attempts: int):
        super().__init__(
            message=f"Could not get current location after {attempts} attempt(s)",
            error_code=ErrorCode.LOCATION_UNAVAILABLE,
            details={"attempts": attempts},
            status_code=422
        )


class UpstreamServiceError(WidgetException):
    """Raised when a third-party API produced nothing usable."""

    def __init__(self, service_name: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Service '{service_name}' returned no usable data",
            error_code=ErrorCode.UPSTREAM_UNAVAILABLE,
            details=details or {"service_name": service_name},
            status_code=502
        )


class GeosearchResponseError(WidgetException):
    """Raised when a geosearch payload has no query.pages section."""

    def __init__(self, message: str = "Could not read data from wikipedia"):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_UPSTREAM_RESPONSE,
            details={"service_name": "wikipedia"},
            status_code=502
        )


class PhotosetResponseError(WidgetException):
    """Raised when Flickr reports a failed photoset lookup."""

    def __init__(self, message: str = "Could not read photoset from flickr", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_UPSTREAM_RESPONSE,
            details=details or {"service_name": "flickr"},
            status_code=502
        )
