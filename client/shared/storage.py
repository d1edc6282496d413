"""Session-scoped key/value storage for client credentials.

Stored values are identity tokens. The file-backed store keeps them in a
JSON document written with owner-only permissions (0o600) inside an
owner-only directory (0o700).
"""

import contextlib
import json
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

PLAYER_TOKEN_KEY = "playerToken"
ACCESS_TOKEN_KEY = "accessToken"

_STORAGE_DIR_MODE = 0o700
_STORAGE_FILE_MODE = 0o600


class SessionStorage(Protocol):
    """Protocol for the session-scoped credential store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


class InMemorySessionStorage:
    """Process-local store; contents end with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def clear(self) -> None:
        self._values.clear()


class FileSessionStorage:
    """Keeps credentials in a JSON file with owner-only permissions.

    Every mutation rewrites the whole document atomically via
    temp-file-then-rename. A missing file reads as an empty store.
    A corrupt file is logged and treated as empty; the next write
    replaces it.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).resolve()

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("session storage file is corrupt, ignoring", path=str(self._path))
            return {}
        if not isinstance(data, dict):
            logger.warning("session storage file is not an object, ignoring", path=str(self._path))
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def _save(self, values: dict[str, str]) -> None:
        directory = self._path.parent
        os.makedirs(str(directory), mode=_STORAGE_DIR_MODE, exist_ok=True)  # noqa: PTH103

        fd, tmp_path = tempfile.mkstemp(dir=str(directory), suffix=".tmp", prefix=".session_")
        fd_owned = True
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                json.dump(values, f)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STORAGE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(self._path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self._save(values)

    def remove(self, key: str) -> None:
        values = self._load()
        if values.pop(key, None) is not None:
            self._save(values)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
        logger.info("session storage cleared", path=str(self._path))
