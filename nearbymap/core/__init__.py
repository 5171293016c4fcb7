# Core utilities: exceptions, logging, metrics and flat-file storage

from .exceptions import (
    ErrorCode,
    WidgetException,
    MissingParametersError,
    MissingApiKeyError,
    LocationUnavailableError,
    UpstreamServiceError,
    GeosearchResponseError,
    PhotosetResponseError,
)
from .storage import JSONFileManager, FileLogger, append_performance_metrics
from .metrics import PerformanceDebugger, record_latency, get_metrics_snapshot

__all__ = [
    "ErrorCode",
    "WidgetException",
    "MissingParametersError",
    "MissingApiKeyError",
    "LocationUnavailableError",
    "UpstreamServiceError",
    "GeosearchResponseError",
    "PhotosetResponseError",
    "JSONFileManager",
    "FileLogger",
    "append_performance_metrics",
    "PerformanceDebugger",
    "record_latency",
    "get_metrics_snapshot",
]
