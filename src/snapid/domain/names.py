"""Snap name, instance key and instance name grammar.

A snap name hand-codes the pattern ``^([a-z0-9]+-?)*[a-z](-?[a-z0-9])*$`` with an
upper bound of 40 characters. Validation is a single left-to-right scan so that
untrusted input never reaches a backtracking engine, and each failure maps to
exactly one stable reason. Precedence, highest first:

1. ``None`` input
2. leading dash
3. first of {bad character, trailing dash, double dash} met by the scan
4. no lowercase letter (this includes the empty string)
5. more than 40 characters
"""

from __future__ import annotations

import string
from typing import Final

from snapid.constants import INSTANCE_KEY_MAX_LEN, INSTANCE_KEY_SEPARATOR, SNAP_NAME_MAX_LEN
from snapid.domain.errors import (
    SnapError,
    invalid_instance_key,
    invalid_instance_name,
    invalid_name,
)
from snapid.utils.fatal import die

# Shared with the security tag grammar: lowercase letters and digits, single
# dashes between them, no leading or trailing dash.
SNAP_NAME_COMPONENT_PATTERN: Final[str] = r"[a-z0-9](?:-?[a-z0-9])*"

_LOWERCASE: Final[frozenset[str]] = frozenset(string.ascii_lowercase)
_DIGITS: Final[frozenset[str]] = frozenset(string.digits)
_DASH: Final[str] = "-"

MSG_NAME_NULL: Final[str] = "snap name cannot be NULL"
MSG_NAME_LEADING_DASH: Final[str] = "snap name cannot start with a dash"
MSG_NAME_TRAILING_DASH: Final[str] = "snap name cannot end with a dash"
MSG_NAME_DOUBLE_DASH: Final[str] = "snap name cannot contain two consecutive dashes"
MSG_NAME_CHARSET: Final[str] = "snap name must use lower case letters, digits or dashes"
MSG_NAME_NO_LETTER: Final[str] = "snap name must contain at least one letter"
MSG_NAME_TOO_LONG: Final[str] = f"snap name must be shorter than {SNAP_NAME_MAX_LEN} characters"

MSG_KEY_NULL: Final[str] = "instance key cannot be NULL"
MSG_KEY_CHARSET: Final[str] = "instance key must use lower case letters or digits"
MSG_KEY_EMPTY: Final[str] = "instance key must contain at least one letter or digit"
MSG_KEY_TOO_LONG: Final[str] = (
    f"instance key must be shorter than {INSTANCE_KEY_MAX_LEN} characters"
)

MSG_INSTANCE_NULL: Final[str] = "snap instance name cannot be NULL"
MSG_INSTANCE_UNDERSCORES: Final[str] = "snap instance name can contain only one underscore"


def check_snap_name(name: str | None) -> SnapError | None:
    """Return the first grammar violation in ``name``, or ``None`` when valid."""

    if name is None:
        return invalid_name(MSG_NAME_NULL)
    if not isinstance(name, str):
        return invalid_name(f"snap name must be a string, got {type(name).__name__}")

    length = len(name)
    if name.startswith(_DASH):
        return invalid_name(MSG_NAME_LEADING_DASH)

    got_letter = False
    index = 0
    while index < length:
        char = name[index]
        if char in _LOWERCASE:
            got_letter = True
            index += 1
            continue
        if char in _DIGITS:
            index += 1
            continue
        if char == _DASH:
            index += 1
            if index == length:
                return invalid_name(MSG_NAME_TRAILING_DASH)
            if name[index] == _DASH:
                return invalid_name(MSG_NAME_DOUBLE_DASH)
            continue
        return invalid_name(MSG_NAME_CHARSET)

    if not got_letter:
        return invalid_name(MSG_NAME_NO_LETTER)
    if length > SNAP_NAME_MAX_LEN:
        return invalid_name(MSG_NAME_TOO_LONG)
    return None


def validate_snap_name(name: str | None) -> None:
    """Validate a snap name and raise :class:`SnapError` with the precise reason."""

    error = check_snap_name(name)
    if error is not None:
        raise error


def require_snap_name(name: str | None) -> None:
    """Validate a snap name or terminate the process with the reason on stderr."""

    error = check_snap_name(name)
    if error is not None:
        die(error.message)


def is_valid_snap_name(name: str | None) -> bool:
    return check_snap_name(name) is None


def check_instance_key(instance_key: str | None) -> SnapError | None:
    """Return the first violation of ``[a-z0-9]{1,10}`` in ``instance_key``."""

    if instance_key is None:
        return invalid_instance_key(MSG_KEY_NULL)
    if not isinstance(instance_key, str):
        return invalid_instance_key(
            f"instance key must be a string, got {type(instance_key).__name__}"
        )

    for char in instance_key:
        if char in _LOWERCASE or char in _DIGITS:
            continue
        return invalid_instance_key(MSG_KEY_CHARSET)

    if not instance_key:
        return invalid_instance_key(MSG_KEY_EMPTY)
    if len(instance_key) > INSTANCE_KEY_MAX_LEN:
        return invalid_instance_key(MSG_KEY_TOO_LONG)
    return None


def validate_instance_key(instance_key: str | None) -> None:
    error = check_instance_key(instance_key)
    if error is not None:
        raise error


def check_instance_name(instance_name: str | None) -> SnapError | None:
    """Validate ``<snap-name>[_<instance-key>]``.

    Snap name failures keep their own ``INVALID_NAME`` code; only the
    structural underscore rule is reported as ``INVALID_INSTANCE_NAME``.
    """

    if instance_name is None:
        return invalid_instance_name(MSG_INSTANCE_NULL)
    if not isinstance(instance_name, str):
        return invalid_instance_name(
            f"snap instance name must be a string, got {type(instance_name).__name__}"
        )

    parts = instance_name.split(INSTANCE_KEY_SEPARATOR)
    if len(parts) > 2:
        return invalid_instance_name(MSG_INSTANCE_UNDERSCORES)

    error = check_snap_name(parts[0])
    if error is not None:
        return error
    if len(parts) == 2:
        return check_instance_key(parts[1])
    return None


def validate_instance_name(instance_name: str | None) -> None:
    error = check_instance_name(instance_name)
    if error is not None:
        raise error


def require_instance_name(instance_name: str | None) -> None:
    """Validate an instance name or terminate the process with the reason on stderr."""

    error = check_instance_name(instance_name)
    if error is not None:
        die(error.message)


__all__ = [
    "MSG_INSTANCE_NULL",
    "MSG_INSTANCE_UNDERSCORES",
    "MSG_KEY_CHARSET",
    "MSG_KEY_EMPTY",
    "MSG_KEY_NULL",
    "MSG_KEY_TOO_LONG",
    "MSG_NAME_CHARSET",
    "MSG_NAME_DOUBLE_DASH",
    "MSG_NAME_LEADING_DASH",
    "MSG_NAME_NO_LETTER",
    "MSG_NAME_NULL",
    "MSG_NAME_TOO_LONG",
    "MSG_NAME_TRAILING_DASH",
    "SNAP_NAME_COMPONENT_PATTERN",
    "check_instance_key",
    "check_instance_name",
    "check_snap_name",
    "is_valid_snap_name",
    "require_instance_name",
    "require_snap_name",
    "validate_instance_key",
    "validate_instance_name",
    "validate_snap_name",
]
