"""Key-value persistence boundary: a JSON file on disk, or memory for tests."""
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Persist value under key before returning. Raises on write failure."""
        ...


class MemoryStorage(KeyValueStorage):

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value


class JsonFileStorage(KeyValueStorage):

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._store: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        match self._path.exists():
            case True:
                try:
                    with open(self._path) as f:
                        raw = json.load(f)
                    match raw:
                        case dict():
                            self._store = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                        case _:
                            logger.warning("Storage %s is not an object, starting fresh", self._path.name)
                except (OSError, ValueError) as e:
                    logger.warning("Storage load failed: %s, starting fresh", e)
            case False:
                pass

    def _save(self) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        with open(tmp, "w") as f:
            json.dump(self._store, f, indent=2)
        os.replace(tmp, self._path)

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value
        self._save()
