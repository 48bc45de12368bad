"""Key/value persistence as one JSON file per key.

The store is deliberately dumb: it only loads and saves plain JSON
values. Conversion to and from domain objects happens in the models'
``from_dict``/``to_dict`` methods.
"""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


class StoreKey(Enum):
    """Known storage keys and their file names."""

    SETTINGS = "settings"
    PIPELINE = "pipeline"
    RECRUITERS = "recruiters"
    HISTORY = "history"

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


class JsonStore:
    """Loads and saves JSON values in a data directory.

    A missing or unreadable file yields the caller's fallback value, so a
    fresh data directory behaves like an empty one.

    Example:
        >>> store = JsonStore(Path("data"))
        >>> recruiters = store.load(StoreKey.RECRUITERS, [])
        >>> store.save(StoreKey.RECRUITERS, recruiters)
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def path_for(self, key: Union[StoreKey, str]) -> Path:
        return self.data_dir / StoreKey(key).filename

    def load(self, key: Union[StoreKey, str], fallback: Any = None) -> Any:
        """Load the value stored under ``key``.

        Args:
            key: Storage key.
            fallback: Returned when the file is missing or corrupt.

        Returns:
            The decoded JSON value, or ``fallback``.
        """
        path = self.path_for(key)
        if not path.exists():
            return fallback
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, using fallback: %s", path, exc)
            return fallback

    def save(self, key: Union[StoreKey, str], value: Any) -> Path:
        """Write ``value`` under ``key``.

        The file is written next to the target and then moved into place,
        so a crash never leaves a half-written file behind.
        """
        path = self.path_for(key)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, path)
        logger.debug("Saved %s", path)
        return path
