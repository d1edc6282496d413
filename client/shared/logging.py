"""structlog setup for the lobby client.

Every module logs through ``structlog.get_logger()``; records are rendered by
stdlib handlers so third-party loggers (websockets) end up in the same stream.

Environment:
- LOG_FORMAT: ``json`` or ``console`` (default, colored when stdout is a tty)
- LOG_LEVEL: DEBUG, INFO (default), WARNING, ERROR or CRITICAL
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# websockets logs every frame at DEBUG
_QUIET_LOGGERS = ("websockets.client", "websockets.protocol")


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Log session states and notice codes by value, including inside dict values."""
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_choice(name: str, default: str, allowed: tuple[str, ...], *, upper: bool) -> str:
    raw = os.environ.get(name, default)
    value = raw.upper() if upper else raw.lower()
    if value not in allowed:
        shown = ", ".join(repr(a) for a in allowed if a)
        msg = f"Invalid {name}={value!r}. Expected one of {shown}."
        raise ValueError(msg)
    return value


def _renderer_formatter(*, json_mode: bool, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_mode:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def configure_structlog() -> None:
    """Install the processor chain; rendering is left to stdlib handlers."""
    # tracebacks are formatted by the handler's ProcessorFormatter
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _log_file_path(log_dir: Path | str) -> Path:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"


def setup_logging(log_dir: Path | str | None = None, level: int | None = None) -> Path | None:
    """Route structlog to stdout, and to a per-run file when ``log_dir`` is set.

    ``level`` overrides LOG_LEVEL. Returns the log file path, or None when no
    file was opened (no ``log_dir``, or running under pytest).
    """
    json_mode = _env_choice("LOG_FORMAT", "", _LOG_FORMATS, upper=False) == "json"
    if level is None:
        level = getattr(logging, _env_choice("LOG_LEVEL", "INFO", _LOG_LEVELS, upper=True))

    configure_structlog()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_renderer_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root.addHandler(console)

    if log_dir is None or _is_test():
        return None

    path = _log_file_path(log_dir)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(_renderer_formatter(json_mode=json_mode, colors=False))
    root.addHandler(file_handler)
    return path
