"""Unit tests for instance name splitting and parsing."""

from __future__ import annotations

import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from snapid.constants import SNAP_NAME_BUFFER_SIZE
from snapid.domain.errors import SnapError, SnapErrorCode
from snapid.domain.instance import (
    InstanceName,
    parse_instance_name,
    split_instance_name,
    split_instance_name_into,
)

_VALID_NAME = st.from_regex(r"[a-z0-9]{1,8}(-[a-z0-9]{1,8}){0,3}", fullmatch=True).filter(
    lambda value: any(char in string.ascii_lowercase for char in value)
)
_INSTANCE_KEY = st.text(alphabet=string.ascii_lowercase + string.digits + "-.", max_size=16)


def _fatal_message(capsys: pytest.CaptureFixture[str], exc_info: pytest.ExceptionInfo[SystemExit]) -> str:
    assert exc_info.value.code == 1
    return capsys.readouterr().err


@pytest.mark.unit
@pytest.mark.parametrize(
    ("instance_name", "expected"),
    [
        ("foo_bar", "foo"),
        ("foo-bar_bar", "foo-bar"),
        ("foo-bar", "foo-bar"),
        ("_baz", ""),
        ("foo", "foo"),
    ],
)
def test_split_instance_name_basic(instance_name: str, expected: str) -> None:
    assert split_instance_name(instance_name) == expected

    dest = bytearray(b"\xff" * SNAP_NAME_BUFFER_SIZE)
    written = split_instance_name_into(instance_name, dest)
    assert written == len(expected)
    assert bytes(dest[: written + 1]) == expected.encode("ascii") + b"\x00"


@pytest.mark.unit
def test_instance_key_bytes_are_never_copied() -> None:
    dest = bytearray(b"\xff" * 16)

    split_instance_name_into("foo_bar", dest)

    assert bytes(dest[:4]) == b"foo\x00"
    assert bytes(dest[4:]) == b"\xff" * 12


@pytest.mark.unit
def test_exact_fit_destination_succeeds() -> None:
    dest = bytearray(4)
    assert split_instance_name_into("foo_bar", dest, 4) == 3
    assert bytes(dest) == b"foo\x00"
    assert split_instance_name("foo", capacity=4) == "foo"


@pytest.mark.unit
def test_capacity_limits_use_of_larger_buffer() -> None:
    dest = bytearray(b"\xff" * 32)
    assert split_instance_name_into("foo", dest, capacity=4) == 3
    assert bytes(dest[4:]) == b"\xff" * 28


@pytest.mark.unit
def test_memoryview_and_bytes_are_accepted() -> None:
    backing = bytearray(8)
    assert split_instance_name_into(b"abc_def", memoryview(backing)) == 3
    assert bytes(backing[:4]) == b"abc\x00"


@pytest.mark.unit
@pytest.mark.parametrize("capacity", [3, 2, 1])
def test_destination_without_room_for_terminator_is_fatal(
    capsys: pytest.CaptureFixture[str], capacity: int
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo", bytearray(capacity))
    assert _fatal_message(capsys, exc_info) == "snap name buffer too small\n"


@pytest.mark.unit
def test_short_destination_for_long_name_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo-foo-foo-foo-foo_bar", bytearray(10))
    assert "snap name buffer too small" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
def test_default_capacity_matches_maximum_snap_name(capsys: pytest.CaptureFixture[str]) -> None:
    assert split_instance_name("a" * 40 + "_key") == "a" * 40

    with pytest.raises(SystemExit) as exc_info:
        split_instance_name("a" * 41 + "_key")
    assert "snap name buffer too small" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
def test_unset_name_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into(None, bytearray(10))
    assert "cannot split instance name when it is unset" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
def test_unset_destination_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo_bar", None, 0)
    assert "unset destination" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
def test_zero_capacity_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo_bar", bytearray(0))
    assert "capacity must be greater than zero" in _fatal_message(capsys, exc_info)

    with pytest.raises(SystemExit):
        split_instance_name("foo", capacity=0)


@pytest.mark.unit
def test_capacity_larger_than_destination_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo", bytearray(4), capacity=64)
    assert "exceeds destination size 4" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
@settings(max_examples=200, deadline=None)
@given(name=_VALID_NAME, key=_INSTANCE_KEY)
def test_split_round_trip(name: str, key: str) -> None:
    assert split_instance_name(f"{name}_{key}") == name
    assert split_instance_name(name) == name

    dest = bytearray(len(name) + 1)
    assert split_instance_name_into(f"{name}_{key}", dest) == len(name)
    assert bytes(dest) == name.encode("ascii") + b"\x00"


@pytest.mark.unit
def test_parse_instance_name_returns_both_parts() -> None:
    parsed = parse_instance_name("foo_bar")
    assert parsed == InstanceName(snap_name="foo", instance_key="bar")
    assert parsed.has_instance_key
    assert str(parsed) == "foo_bar"

    plain = parse_instance_name("foo")
    assert plain == InstanceName(snap_name="foo")
    assert not plain.has_instance_key
    assert str(plain) == "foo"


@pytest.mark.unit
def test_parse_instance_name_rejects_malformed_input() -> None:
    with pytest.raises(SnapError) as exc_info:
        parse_instance_name("foo_bar_baz")
    assert exc_info.value.code is SnapErrorCode.INVALID_INSTANCE_NAME

    with pytest.raises(SnapError) as key_info:
        parse_instance_name("foo_")
    assert key_info.value.code is SnapErrorCode.INVALID_INSTANCE_KEY

    with pytest.raises(SnapError) as name_info:
        parse_instance_name("Foo_bar")
    assert name_info.value.code is SnapErrorCode.INVALID_NAME


@pytest.mark.unit
def test_undecodable_bytes_are_copied_through() -> None:
    assert split_instance_name("foo\udcff_bar") == "foo\udcff"

    dest = bytearray(8)
    assert split_instance_name_into("foo\udcff_bar", dest) == 4
    assert bytes(dest[:5]) == b"foo\xff\x00"


@pytest.mark.unit
def test_source_ends_at_first_nul() -> None:
    assert split_instance_name("foo\0bar_baz") == "foo"

    dest = bytearray(b"\xff" * 8)
    assert split_instance_name_into(b"ab\0c_d", dest) == 2
    assert bytes(dest[:3]) == b"ab\x00"
    assert bytes(dest[3:]) == b"\xff" * 5


@pytest.mark.unit
def test_unencodable_source_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name("foo\ud800_bar")
    assert "unencodable" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
@pytest.mark.parametrize(
    "dest",
    [
        memoryview(b"\0" * 10),
        memoryview(bytearray(40)).cast("I"),
        b"\0" * 10,
        [0] * 10,
    ],
    ids=["readonly-view", "wide-items", "bytes", "list"],
)
def test_unwritable_destination_is_fatal(
    capsys: pytest.CaptureFixture[str], dest: object
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into("foo", dest)  # type: ignore[arg-type]
    assert "internal error: destination must be" in _fatal_message(capsys, exc_info)


@pytest.mark.unit
def test_non_text_source_is_fatal(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        split_instance_name_into(12, bytearray(4))  # type: ignore[arg-type]
    assert "instance name must be str or bytes" in _fatal_message(capsys, exc_info)
