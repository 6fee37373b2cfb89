"""Key/value stores backing the save data."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

import orjson

from racecore.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal get/set storage the save data needs."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class MemoryStore:
    """In-process store, used by tests and headless runs without a save file."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store persisted as a single JSON document.

    The file is read once on construction and rewritten on every ``set``.
    A missing file starts empty; an unreadable one raises PersistenceError.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._data: Dict[str, Any] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = orjson.loads(self._path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read save file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Save file {self._path} does not hold a JSON object")
        logger.debug(f"Loaded {len(data)} keys from {self._path}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_bytes(orjson.dumps(self._data, option=orjson.OPT_INDENT_2))
            tmp_path.replace(self._path)
        except (OSError, TypeError) as e:
            raise PersistenceError(f"Cannot write save file {self._path}: {e}") from e
