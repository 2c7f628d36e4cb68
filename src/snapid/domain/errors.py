"""Structured validation errors for snap identifiers."""

from __future__ import annotations

from enum import IntEnum
from typing import Final

SNAP_DOMAIN: Final[str] = "snap"


class SnapErrorCode(IntEnum):
    """Discriminant codes within :data:`SNAP_DOMAIN`."""

    INVALID_NAME = 1
    INVALID_INSTANCE_KEY = 2
    INVALID_INSTANCE_NAME = 3


class SnapError(ValueError):
    """Raised (or returned by ``check_*`` helpers) when an identifier is malformed.

    Carries the ``domain``/``code``/``message`` triple so callers can inspect the
    failure kind programmatically instead of parsing the message.
    """

    def __init__(
        self,
        code: SnapErrorCode | int,
        message: str,
        *,
        domain: str = SNAP_DOMAIN,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError("error message must be a non-empty string")
        self.domain = domain
        self.code = SnapErrorCode(code)
        self.message = message
        super().__init__(message)

    def matches(self, domain: str, code: SnapErrorCode | int) -> bool:
        """Return ``True`` when the error belongs to ``domain`` and has ``code``."""
        return self.domain == domain and int(self.code) == int(code)

    def as_dict(self) -> dict[str, object]:
        return {"domain": self.domain, "code": int(self.code), "message": self.message}

    def __repr__(self) -> str:
        return f"SnapError(domain={self.domain!r}, code={self.code.name}, message={self.message!r})"


def invalid_name(message: str) -> SnapError:
    return SnapError(SnapErrorCode.INVALID_NAME, message)


def invalid_instance_key(message: str) -> SnapError:
    return SnapError(SnapErrorCode.INVALID_INSTANCE_KEY, message)


def invalid_instance_name(message: str) -> SnapError:
    return SnapError(SnapErrorCode.INVALID_INSTANCE_NAME, message)


__all__ = [
    "SNAP_DOMAIN",
    "SnapError",
    "SnapErrorCode",
    "invalid_instance_key",
    "invalid_instance_name",
    "invalid_name",
]
