"""
Local Storage Implementations

JsonFileStorage keeps one file per key under a data directory, the
desktop counterpart of browser local storage. InMemoryStorage backs tests
and the 'memory' backend.

TRADEOFFS:
- Whole-collection rewrites on every mutation (fine for personal use)
- Atomic replace of each file, but no cross-key transactions
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from finwise.services.storage.interface import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)


class JsonFileStorage(KeyValueStorage):
    """
    Key-value storage backed by `<data_dir>/<key>.json` files.

    The directory is created on first write.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Failed to delete {path}: {e}") from e

    def keys(self) -> list[str]:
        if not self._data_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(self.SUFFIX)]
            for p in self._data_dir.iterdir()
            if p.is_file() and p.name.endswith(self.SUFFIX) and not p.name.startswith(".")
        )


class InMemoryStorage(KeyValueStorage):
    """Dictionary-backed storage. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._values)
