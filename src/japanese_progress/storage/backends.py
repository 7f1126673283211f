"""Key-value storage backends (JSON files + fcntl.flock + atomic write)."""

import fcntl
import os
import tempfile
from pathlib import Path
from typing import Protocol


class ProgressStorage(Protocol):
    """Durable key-value substrate holding serialized progress records."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, text: str) -> None: ...

    def remove(self, key: str) -> None: ...


class JsonFileStorage:
    """Stores each key as ``<directory>/<key>.json``.

    Args:
        directory: Directory holding the files. Created on first use.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        # Undecodable bytes survive as surrogates so a corrupt file can be copied verbatim.
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            text = f.read()
            fcntl.flock(f, fcntl.LOCK_UN)
        return text

    def write(self, key: str, text: str) -> None:
        path = self._path(key)
        tmp = tempfile.NamedTemporaryFile(
            "w",
            dir=path.parent,
            delete=False,
            suffix=".json",
            encoding="utf-8",
            errors="surrogateescape",
        )
        try:
            with tmp:
                tmp.write(text)
            os.replace(tmp.name, path)
        except BaseException:
            Path(tmp.name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class InMemoryStorage:
    """Dict-backed storage used when no durable backend is available."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, text: str) -> None:
        self._data[key] = text

    def remove(self, key: str) -> None:
        self._data.pop(key, None)
