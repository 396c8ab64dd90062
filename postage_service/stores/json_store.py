"""
JSON File Store

Base class for the file-backed repositories. Each store owns one JSON file in
the data directory (POSTAGE_DATA_DIR, default ~/.postage-comparator).

Writes go to "<file>.tmp" first and are moved into place with os.replace, so
a crash mid-write never leaves a truncated data file behind.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional, Union

from postage_service.core.config import settings
from postage_service.core.errors import StoreError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    One JSON document on disk, guarded by a per-store lock.

    Subclasses set file_name and work through _read() / _write().

    Args:
        data_dir: Directory override; None resolves settings.data_dir on
            every access so POSTAGE_DATA_DIR changes apply immediately
    """

    file_name: str = ""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        self._data_dir = Path(data_dir) if data_dir else None
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        base_dir = self._data_dir if self._data_dir is not None else settings.data_dir
        return base_dir / self.file_name

    def _read(self, default: Any = None) -> Any:
        """Decoded file contents, or default when the file does not exist."""
        path = self.path
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path}: {e}")
            raise StoreError(f"Unable to read {self.file_name}", details={"path": str(path)})

    def _write(self, payload: Any) -> None:
        """Atomically replace the file with payload."""
        path = self.path
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            logger.error(f"Failed to write {path}: {e}")
            raise StoreError(f"Unable to write {self.file_name}", details={"path": str(path)})
        logger.debug(f"Wrote {path}")
