"""Structured logging setup for the snapid command-line surface.

Library modules only ever log at debug level through ``logging.getLogger``; this
module is what the CLI calls to attach a sink. Identifiers arriving here are
untrusted, so the JSON format escapes them and a crafted name cannot forge
additional log lines.
"""

from __future__ import annotations

import contextvars
import json
import logging
import math
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Final, Literal, TextIO

JSONScalar = str | int | float | bool | None
JSONValue = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
LogFormat = Literal["json", "text"]

DEFAULT_LOGGER_NAME: Final[str] = "snapid"
_DEFAULT_LEVEL: Final[str] = "WARNING"
_TEXT_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s"

_CONTEXT_KEYS: Final[tuple[str, ...]] = ("command", "subject")

_STANDARD_LOG_RECORD_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "thread",
        "threadName",
        "taskName",
    }
)

_ContextState = tuple[tuple[str, str], ...]
_LOG_CONTEXT: contextvars.ContextVar[_ContextState] = contextvars.ContextVar(
    "snapid_log_context", default=()
)


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Configuration for the CLI log sink."""

    level: int | str = _DEFAULT_LEVEL
    log_format: LogFormat = "text"
    logger_name: str = DEFAULT_LOGGER_NAME
    stream: TextIO | None = field(default=None, compare=False)


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits one canonical JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, JSONValue] = {
            "timestamp": _iso8601z_from_epoch(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in sorted(get_log_context().items()):
            event[key] = value

        extras = _extract_extra_fields(record)
        if extras:
            event["fields"] = _normalize_json_value(extras)

        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)

        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


class _TextFormatter(logging.Formatter):
    """Plain formatter that appends the bound context as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        rendered = super().format(record)
        context = get_log_context()
        if not context:
            return rendered
        suffix = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        return f"{rendered} [{suffix}]"


def setup_logging(
    observability_config: Mapping[str, object] | None = None,
    *,
    stream: TextIO | None = None,
    logger_name: str = DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Configure logging from an ``[observability]`` config section and return the logger."""

    cfg = dict(observability_config or {})
    raw_level = cfg.get("log_level", _DEFAULT_LEVEL)
    level: int | str = raw_level if isinstance(raw_level, (int, str)) else _DEFAULT_LEVEL
    raw_format = cfg.get("log_format", "text")
    log_format: LogFormat = "json" if raw_format == "json" else "text"

    return setup_structured_logging(
        LoggingConfig(level=level, log_format=log_format, logger_name=logger_name, stream=stream)
    )


def setup_structured_logging(config: LoggingConfig) -> logging.Logger:
    """Attach a single stderr sink to ``config.logger_name``, replacing earlier ones."""

    level = _parse_log_level(config.level)
    logger_name = _validate_logger_name(config.logger_name)
    if config.log_format not in ("json", "text"):
        raise ValueError(f"unsupported log format {config.log_format!r}")

    handler = logging.StreamHandler(config.stream if config.stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_JsonLineFormatter() if config.log_format == "json" else _TextFormatter())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.propagate = False

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(handler)
    return logger


def shutdown_logging(logger_name: str = DEFAULT_LOGGER_NAME) -> None:
    """Flush and detach every handler installed on ``logger_name``."""

    logger = logging.getLogger(logger_name)
    for handler in list(logger.handlers):
        handler.flush()
        logger.removeHandler(handler)
        handler.close()


def get_log_context() -> dict[str, str]:
    """Return the fields bound to the current context."""
    return dict(_LOG_CONTEXT.get())


def set_log_context(**fields: str | None) -> contextvars.Token[_ContextState]:
    """Bind fields for the active context and return a reset token."""
    state = get_log_context()
    for key, value in fields.items():
        key_name = _validate_context_key(key)
        if value is None:
            state.pop(key_name, None)
            continue
        if not isinstance(value, str):
            raise ValueError(f"log context value must be a string, got {type(value).__name__}")
        state[key_name] = value
    return _LOG_CONTEXT.set(tuple(state.items()))


def reset_log_context(token: contextvars.Token[_ContextState]) -> None:
    _LOG_CONTEXT.reset(token)


@contextmanager
def log_context(**fields: str | None) -> Iterator[None]:
    """Temporarily bind context fields (``command``, ``subject``) to log records."""
    token = set_log_context(**fields)
    try:
        yield
    finally:
        reset_log_context(token)


def _parse_log_level(value: int | str) -> int:
    if isinstance(value, bool):
        raise ValueError("level must be int or str, got bool")
    if isinstance(value, int):
        return value

    if not isinstance(value, str):
        raise ValueError(f"level must be int or str, got {type(value).__name__}")

    normalized = value.strip().upper()
    parsed = logging.getLevelName(normalized)
    if isinstance(parsed, int):
        return parsed

    raise ValueError(f"unsupported logging level {value!r}")


def _validate_logger_name(logger_name: str) -> str:
    if not isinstance(logger_name, str):
        raise ValueError(f"logger_name must be a string, got {type(logger_name).__name__}")
    normalized = logger_name.strip()
    if not normalized:
        raise ValueError("logger_name must not be empty")
    return normalized


def _validate_context_key(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError("log context key must not be empty")
    if normalized not in _CONTEXT_KEYS:
        expected = ", ".join(_CONTEXT_KEYS)
        raise ValueError(f"unknown log context key {normalized!r}; expected one of: {expected}")
    return normalized


def _iso8601z_from_epoch(epoch_seconds: float) -> str:
    timestamp = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_extra_fields(record: logging.LogRecord) -> dict[str, JSONValue]:
    fields: dict[str, JSONValue] = {}
    for key, value in record.__dict__.items():
        if key in _STANDARD_LOG_RECORD_FIELDS:
            continue
        if key.startswith("_"):
            continue
        fields[key] = _normalize_json_value(value)
    return fields


def _normalize_json_value(value: object) -> JSONValue:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _normalize_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_json_value(item) for item in value]
    return repr(value)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "JSONScalar",
    "JSONValue",
    "LogFormat",
    "LoggingConfig",
    "get_log_context",
    "log_context",
    "reset_log_context",
    "set_log_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
