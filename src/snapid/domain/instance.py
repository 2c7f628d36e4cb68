"""Instance name decomposition.

``<snap-name>_<instance-key>`` identifies one of several parallel installs of the
same snap. The splitter is purely mechanical: its input is assumed to be a
trusted or already validated store identifier, so every misuse is a
programmer-contract violation and terminates the process via :func:`die`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, cast

from snapid.constants import INSTANCE_KEY_SEPARATOR, SNAP_NAME_BUFFER_SIZE
from snapid.domain.names import validate_instance_name
from snapid.utils.fatal import die

_NUL: Final[int] = 0
_NUL_BYTE: Final[bytes] = b"\x00"
_SEPARATOR_BYTE: Final[bytes] = INSTANCE_KEY_SEPARATOR.encode("ascii")


@dataclass(frozen=True, slots=True)
class InstanceName:
    """Validated instance name split into its two parts."""

    snap_name: str
    instance_key: str = ""

    @property
    def has_instance_key(self) -> bool:
        return bool(self.instance_key)

    def __str__(self) -> str:
        if not self.instance_key:
            return self.snap_name
        return f"{self.snap_name}{INSTANCE_KEY_SEPARATOR}{self.instance_key}"


def split_instance_name_into(
    instance_name: str | bytes | None,
    dest: bytearray | memoryview | None,
    capacity: int | None = None,
) -> int:
    """Copy the snap name part of ``instance_name`` into ``dest`` as a NUL-terminated string.

    ``capacity`` defaults to ``len(dest)`` and must not exceed it. Returns the
    number of name bytes written, excluding the terminator. The instance key is
    never copied. A ``str`` source is encoded as UTF-8 with ``surrogateescape``,
    so undecodable command-line bytes are copied back unchanged, and the source
    ends at its first NUL byte. On a contract violation the process is
    terminated; bytes already present in ``dest`` must then be treated as
    undefined.
    """

    if instance_name is None:
        die("internal error: cannot split instance name when it is unset")
    if not isinstance(instance_name, (str, bytes, bytearray)):
        die(
            "internal error: instance name must be str or bytes, "
            f"got {type(instance_name).__name__}"
        )
    if dest is None:
        die("internal error: cannot split instance name into an unset destination")
    if not isinstance(dest, (bytearray, memoryview)):
        die(
            "internal error: destination must be a bytearray or memoryview, "
            f"got {type(dest).__name__}"
        )
    if isinstance(dest, memoryview) and (dest.readonly or dest.format != "B" or dest.ndim != 1):
        die("internal error: destination must be a writable one-dimensional byte buffer")

    size = len(dest)
    resolved_capacity = size if capacity is None else capacity
    if isinstance(resolved_capacity, bool) or not isinstance(resolved_capacity, int):
        die(f"internal error: capacity must be an integer, got {type(capacity).__name__}")
    if resolved_capacity <= 0:
        die("internal error: snap name buffer capacity must be greater than zero")
    if resolved_capacity > size:
        die(
            "internal error: snap name buffer capacity "
            f"{resolved_capacity} exceeds destination size {size}"
        )

    raw = _source_bytes(instance_name)
    name_length = raw.find(_SEPARATOR_BYTE)
    if name_length < 0:
        name_length = len(raw)

    if name_length + 1 > resolved_capacity:
        die("snap name buffer too small")

    dest[:name_length] = raw[:name_length]
    dest[name_length] = _NUL
    return name_length


def split_instance_name(
    instance_name: str | None,
    capacity: int = SNAP_NAME_BUFFER_SIZE,
) -> str:
    """Return the snap name part of ``instance_name``.

    ``capacity`` bounds the name the same way a NUL-terminated destination
    would: a name of ``capacity`` bytes or more terminates the process.
    """

    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 0:
        die(f"internal error: invalid snap name buffer capacity {capacity!r}")
    buffer = bytearray(capacity)
    written = split_instance_name_into(instance_name, buffer, capacity)
    return buffer[:written].decode("utf-8", errors="surrogateescape")


def _source_bytes(instance_name: str | bytes | bytearray) -> bytes:
    if isinstance(instance_name, str):
        try:
            raw = instance_name.encode("utf-8", errors="surrogateescape")
        except UnicodeEncodeError:
            die("internal error: instance name contains unencodable characters")
    else:
        raw = bytes(instance_name)
    terminator = raw.find(_NUL_BYTE)
    return raw if terminator < 0 else raw[:terminator]


def parse_instance_name(instance_name: str | None) -> InstanceName:
    """Validate ``instance_name`` and return both of its parts.

    Raises :class:`snapid.domain.errors.SnapError` for malformed input.
    """

    validate_instance_name(instance_name)
    snap_name, _, instance_key = cast("str", instance_name).partition(INSTANCE_KEY_SEPARATOR)
    return InstanceName(snap_name=snap_name, instance_key=instance_key)


__all__ = [
    "InstanceName",
    "parse_instance_name",
    "split_instance_name",
    "split_instance_name_into",
]
