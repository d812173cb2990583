"""File-backed local storage.

Each key is kept in its own ``<key>.json`` file inside a data directory.
Writes go to a temporary file first and are moved into place, so a crash
mid-write leaves the previous value intact.
"""

import os
import re
from pathlib import Path

from storefront.storage.port import LocalStorage, PersistenceError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileLocalStorage(LocalStorage):
    """Local storage kept as files under ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).expanduser()

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise PersistenceError(f"Invalid storage key: {key!r}", key=key)
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Could not read {path}: {exc}", key=key) from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise PersistenceError(f"Could not write {path}: {exc}", key=key) from exc

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Could not remove {path}: {exc}", key=key) from exc
