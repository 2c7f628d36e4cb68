"""Effective configuration for a snapid run.

Layers, lowest first: built-in defaults, ``snapid.toml``, ``SNAPID_*``
environment variables, command-line flags. Only the four ``[observability]``
and ``[output]`` settings can be overridden outside the file; ``[meta]`` is
pinned by the file format itself.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Literal

from snapid.config.schema import assert_valid_config, default_config, merge_config

DEFAULT_CONFIG_FILE: Final[str] = "snapid.toml"
ENV_PREFIX: Final[str] = "SNAPID_"

_FLAG_WORDS: Final[dict[str, bool]] = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


@dataclass(frozen=True, slots=True)
class _Setting:
    section: str
    field: str
    kind: Literal["text", "flag"]

    @property
    def key(self) -> str:
        return f"{self.section}.{self.field}"

    @property
    def env_name(self) -> str:
        return f"{ENV_PREFIX}{self.section.upper()}_{self.field.upper()}"


_OVERRIDABLE: Final[tuple[_Setting, ...]] = (
    _Setting("observability", "log_level", "text"),
    _Setting("observability", "log_format", "text"),
    _Setting("output", "json", "flag"),
    _Setting("output", "no_color", "flag"),
)
_BY_KEY: Final[dict[str, _Setting]] = {setting.key: setting for setting in _OVERRIDABLE}


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load effective config with precedence CLI > env > file > defaults.

    A missing ``snapid.toml`` in the working directory is not an error; an
    explicitly requested ``config_path`` must exist. ``cli_overrides`` maps
    dotted keys such as ``"output.json"`` to values; ``None`` means "not given".
    """

    if config_path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILE
        file_payload = _read_toml(path) if path.exists() else {}
    else:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigLoadError(f"config file not found: {path}")
        file_payload = _read_toml(path)

    config = assert_valid_config(merge_config(default_config(), file_payload))

    env = os.environ if environ is None else environ
    overlay: dict[str, dict[str, object]] = {}
    for setting in _OVERRIDABLE:
        raw = env.get(setting.env_name)
        if raw is not None:
            value = _from_env(setting, raw)
            overlay.setdefault(setting.section, {})[setting.field] = value

    for key, value in (cli_overrides or {}).items():
        if value is None:
            continue
        setting = _BY_KEY.get(key)
        if setting is None:
            known = ", ".join(sorted(_BY_KEY))
            raise ConfigLoadError(f"unknown override {key!r}; expected one of: {known}")
        overlay.setdefault(setting.section, {})[setting.field] = value

    return assert_valid_config(merge_config(config, overlay))


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Render ``config`` as compact JSON with sorted keys."""

    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _from_env(setting: _Setting, raw: str) -> object:
    value = raw.strip()
    if setting.kind == "text":
        # The schema normalizes and checks the allowed values.
        return value
    flag = _FLAG_WORDS.get(value.lower())
    if flag is None:
        raise ConfigLoadError(
            f"{setting.env_name} must be a boolean for {setting.key} "
            "(true/false, 1/0, yes/no, on/off)"
        )
    return flag


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "dump_effective_config",
    "load_config",
]
