"""Layered ``snapid.toml`` configuration: :func:`load_config` and its error types."""

from snapid.config.loader import ConfigLoadError, dump_effective_config, load_config
from snapid.config.schema import (
    ConfigValidationError,
    ConfigValidationIssue,
    SnapidConfig,
    default_config,
    validate_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "SnapidConfig",
    "default_config",
    "dump_effective_config",
    "load_config",
    "validate_config",
]
