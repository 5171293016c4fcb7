"""
Flat-file side effects kept in the storage folder.

Layout, for a script named ``nearby-map``::

    storage/nearby-map.json                      stored widget parameters
    storage/nearby-map-performance-metrics.csv   one timing row per run
    storage/nearby-map-logs.txt                  appended log lines

Reads never raise for a missing or malformed file; they log and return None.
"""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class JSONFileManager:
    """Read and write ``<storage_dir>/<name>.json`` files."""

    def __init__(self, storage_dir: PathLike):
        self.storage_dir = Path(storage_dir)

    def path_for(self, name: str) -> Path:
        return self.storage_dir / f"{name}.json"

    def read_json(self, name: str) -> Optional[Any]:
        """
        Load the stored JSON document for ``name``.

        Returns:
            The decoded document, or None when the folder or file is missing,
            either one is the wrong kind of filesystem entry, or the content
            is not JSON (JSON ``null`` counts as missing too).
        """
        path = self.path_for(name)

        if not self.storage_dir.exists():
            logger.info("Storage folder does not exist: %s", self.storage_dir)
            return None
        if not self.storage_dir.is_dir():
            logger.warning("Storage folder exists but is not a directory: %s", self.storage_dir)
            return None
        if not path.exists():
            logger.info("Parameter file does not exist: %s", path)
            return None
        if path.is_dir():
            logger.warning("Parameter file is a directory: %s", path)
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not load %s as JSON: %s", path, e)
            return None

        if data is None:
            logger.warning("Could not load %s as JSON: document is null", path)
        return data

    def write_json(self, name: str, data: Any) -> bool:
        """Write ``data`` to the stored JSON file, creating the folder if needed."""
        if not _ensure_storage_dir(self.storage_dir):
            return False

        path = self.path_for(name)
        if path.is_dir():
            logger.error("Parameter file is a directory, please delete: %s", path)
            return False

        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Wrote %s", path)
        return True


def _ensure_storage_dir(storage_dir: Path) -> bool:
    if not storage_dir.exists():
        logger.info("Storage folder does not exist! Creating %s", storage_dir)
        storage_dir.mkdir(parents=True, exist_ok=True)
    elif not storage_dir.is_dir():
        logger.error("Storage folder exists but is not a directory: %s", storage_dir)
        return False
    return True


def _read_headers(first_line: str) -> List[str]:
    return next(csv.reader([first_line]), [])


def append_performance_metrics(
    storage_dir: PathLike,
    name: str,
    metrics: Dict[str, Any],
) -> bool:
    """
    Append one row of timings to ``<storage_dir>/<name>-performance-metrics.csv``.

    An existing file keeps its header line; only those columns are written,
    in that order, and metrics missing from this run become empty cells.
    A new file takes its headers from the metric names.
    """
    storage = Path(storage_dir)
    metrics_path = storage / f"{name}-performance-metrics.csv"

    if not _ensure_storage_dir(storage):
        return False
    if metrics_path.is_dir():
        logger.error("Metrics file is a directory, please delete: %s", metrics_path)
        return False

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    existing = metrics_path.read_text(encoding="utf-8") if metrics_path.exists() else ""
    headers = _read_headers(existing.split("\n", 1)[0]) if existing else []

    if headers:
        logger.debug("Metrics file exists, writing to its headers only: %s", headers)
        if not existing.endswith("\n"):
            buffer.write("\n")
    else:
        headers = list(metrics)
        writer.writerow(headers)

    writer.writerow(["" if metrics.get(h) is None else metrics[h] for h in headers])

    with open(metrics_path, "a", encoding="utf-8", newline="") as f:
        f.write(buffer.getvalue())
    return True


class FileLogger(logging.Handler):
    """
    Logging handler that buffers formatted records in memory and appends them
    to ``<storage_dir>/<name>-logs.txt`` when asked to.
    """

    def __init__(self, storage_dir: PathLike, name: str, level: int = logging.INFO):
        super().__init__(level)
        self.storage_dir = Path(storage_dir)
        self.log_path = self.storage_dir / f"{name}-logs.txt"
        self._lines: List[str] = []
        self.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        )

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._lines.append(self.format(record))
        except Exception:
            self.handleError(record)

    def write_logs_to_file(self) -> bool:
        """Append buffered lines to the log file and clear the buffer."""
        if not self._lines:
            return True
        if not _ensure_storage_dir(self.storage_dir):
            return False
        if self.log_path.is_dir():
            logger.error("Log file is a directory, please delete: %s", self.log_path)
            return False

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write("\n".join(self._lines) + "\n")
        self._lines.clear()
        return True
