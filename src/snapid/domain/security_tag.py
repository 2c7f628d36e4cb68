"""Security tag verification for ``snap.<name>.<app>`` and ``snap.<name>.hook.<hook>``."""

from __future__ import annotations

import re
from typing import Final

from snapid.constants import HOOK_COMPONENT, SECURITY_TAG_PREFIX, SECURITY_TAG_SEPARATOR
from snapid.domain.names import SNAP_NAME_COMPONENT_PATTERN

APP_COMPONENT_PATTERN: Final[str] = r"[A-Za-z0-9](?:-?[A-Za-z0-9])*"
HOOK_NAME_COMPONENT_PATTERN: Final[str] = r"[a-z0-9](?:-?[a-z0-9])*"

# Components advance one character per step with an optional dash before it,
# so each position has at most one way to match.
_SECURITY_TAG_RE: Final[re.Pattern[str]] = re.compile(
    re.escape(SECURITY_TAG_PREFIX)
    + f"(?P<name>{SNAP_NAME_COMPONENT_PATTERN})"
    + re.escape(SECURITY_TAG_SEPARATOR)
    + f"(?:(?P<app>{APP_COMPONENT_PATTERN})"
    + "|"
    + re.escape(HOOK_COMPONENT + SECURITY_TAG_SEPARATOR)
    + f"(?P<hook>{HOOK_NAME_COMPONENT_PATTERN}))"
)


def verify_security_tag(security_tag: str | None, snap_name: str | None) -> bool:
    """Return ``True`` iff ``security_tag`` is well formed and names ``snap_name``.

    The embedded name is compared byte-for-byte, so a profile belonging to one
    snap can never be accepted for another. Only a boolean is reported; run
    :func:`snapid.domain.names.check_snap_name` when a reason is needed.
    """

    if not isinstance(security_tag, str) or not isinstance(snap_name, str):
        return False

    match = _SECURITY_TAG_RE.fullmatch(security_tag)
    if match is None:
        return False
    return match.group("name") == snap_name


def security_tag_for_app(snap_name: str, app_name: str) -> str:
    """Build the tag of an application; the result is not validated."""
    return f"{SECURITY_TAG_PREFIX}{snap_name}{SECURITY_TAG_SEPARATOR}{app_name}"


def security_tag_for_hook(snap_name: str, hook_name: str) -> str:
    """Build the tag of a hook; the result is not validated."""
    return (
        f"{SECURITY_TAG_PREFIX}{snap_name}{SECURITY_TAG_SEPARATOR}"
        f"{HOOK_COMPONENT}{SECURITY_TAG_SEPARATOR}{hook_name}"
    )


__all__ = [
    "APP_COMPONENT_PATTERN",
    "HOOK_NAME_COMPONENT_PATTERN",
    "security_tag_for_app",
    "security_tag_for_hook",
    "verify_security_tag",
]
