"""Schema for ``snapid.toml``: defaults and strict validation.

Three sections exist: ``[meta]`` pins ``schema_version``, ``[observability]``
selects the log level and format, and ``[output]`` toggles JSON and color.
Every problem is reported as a ``ConfigValidationIssue`` with a dotted path,
and unknown fields are rejected so a misspelt key never falls back to its
default.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, TypedDict

from snapid.constants import CONFIG_SCHEMA_VERSION

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")


class MetaConfig(TypedDict):
    schema_version: int


class ObservabilityConfig(TypedDict):
    log_level: str
    log_format: str


class OutputConfig(TypedDict):
    json: bool
    no_color: bool


class SnapidConfig(TypedDict):
    meta: MetaConfig
    observability: ObservabilityConfig
    output: OutputConfig


DEFAULT_CONFIG: Final[SnapidConfig] = {
    "meta": {"schema_version": CONFIG_SCHEMA_VERSION},
    "observability": {"log_level": "WARNING", "log_format": "text"},
    "output": {"json": False, "no_color": False},
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """Validation result with normalized config when no issues were found."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


def default_config() -> SnapidConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deterministically deep-merge ``overlay`` onto ``base``."""

    merged = _deep_copy_mapping(base)
    _merge_into(merged, overlay)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate config and return structured issues with dotted paths."""

    issues = _IssueCollector()
    if not isinstance(config, Mapping):
        issues.add("<root>", f"expected object, got {type(config).__name__}")
        return ConfigValidationResult(config=None, issues=issues.items())

    sections = {
        "meta": _validate_meta,
        "observability": _validate_observability,
        "output": _validate_output,
    }
    _reject_unknown_keys(config, set(sections), "", issues)

    out: dict[str, Any] = {}
    for name in sorted(sections):
        if name not in config:
            issues.add(name, "missing required section")
            continue
        section = config[name]
        if not isinstance(section, Mapping):
            issues.add(name, f"expected object, got {type(section).__name__}")
            continue
        out[name] = sections[name](section, name, issues)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=out, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def _validate_meta(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"schema_version"}, path, issues)
    out: dict[str, Any] = {}
    version = _as_int(payload.get("schema_version"), _join(path, "schema_version"), issues)
    if version is None:
        return out
    if version != ConfigSchemaVersion:
        issues.add(
            _join(path, "schema_version"),
            f"unsupported schema version {version}; expected {ConfigSchemaVersion}",
        )
        return out
    out["schema_version"] = version
    return out


def _validate_observability(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"log_level", "log_format"}, path, issues)
    out: dict[str, Any] = {}

    level = _as_enum(
        payload.get("log_level"),
        _join(path, "log_level"),
        issues,
        allowed_values=LOG_LEVELS,
        normalize=str.upper,
    )
    if level is not None:
        out["log_level"] = level

    log_format = _as_enum(
        payload.get("log_format"),
        _join(path, "log_format"),
        issues,
        allowed_values=LOG_FORMATS,
        normalize=str.lower,
    )
    if log_format is not None:
        out["log_format"] = log_format
    return out


def _validate_output(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, {"json", "no_color"}, path, issues)
    out: dict[str, Any] = {}
    for key in ("json", "no_color"):
        parsed = _as_bool(payload.get(key), _join(path, key), issues)
        if parsed is not None:
            out[key] = parsed
    return out


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    if value is None:
        issues.add(path, "missing required field")
        return None
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_int(value: object, path: str, issues: _IssueCollector) -> int | None:
    if value is None:
        issues.add(path, "missing required field")
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        issues.add(path, f"expected integer, got {type(value).__name__}")
        return None
    return value


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
    normalize: Callable[[str], str],
) -> str | None:
    if value is None:
        issues.add(path, "missing required field")
        return None
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    parsed = normalize(value.strip())
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {value!r}; expected one of: {expected}")
        return None
    return str(parsed)


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload, key=str):
        if key in allowed:
            continue
        issues.add(_join(path, str(key)), "unknown field")


def _deep_copy_mapping(payload: Mapping[str, object]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, Mapping):
            out[key] = _deep_copy_mapping(value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _merge_into(target: dict[str, Any], overlay: Mapping[str, object]) -> None:
    for key, value in overlay.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            _merge_into(existing, value)
        elif isinstance(value, Mapping):
            target[key] = _deep_copy_mapping(value)
        else:
            target[key] = copy.deepcopy(value)


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "LOG_FORMATS",
    "LOG_LEVELS",
    "MetaConfig",
    "ObservabilityConfig",
    "OutputConfig",
    "SnapidConfig",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "validate_config",
]
