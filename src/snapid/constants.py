"""Stable constants shared across snapid validators."""

from __future__ import annotations

from typing import Final

# Grammar limits.
SNAP_NAME_MAX_LEN: Final[int] = 40
INSTANCE_KEY_MAX_LEN: Final[int] = 10

# Destination size for a NUL-terminated snap name.
SNAP_NAME_BUFFER_SIZE: Final[int] = SNAP_NAME_MAX_LEN + 1

# Identifier separators.
INSTANCE_KEY_SEPARATOR: Final[str] = "_"
SECURITY_TAG_PREFIX: Final[str] = "snap."
SECURITY_TAG_SEPARATOR: Final[str] = "."
HOOK_COMPONENT: Final[str] = "hook"

# snapid.toml schema.
CONFIG_SCHEMA_VERSION: Final[int] = 1

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "HOOK_COMPONENT",
    "INSTANCE_KEY_MAX_LEN",
    "INSTANCE_KEY_SEPARATOR",
    "SECURITY_TAG_PREFIX",
    "SECURITY_TAG_SEPARATOR",
    "SNAP_NAME_BUFFER_SIZE",
    "SNAP_NAME_MAX_LEN",
]
