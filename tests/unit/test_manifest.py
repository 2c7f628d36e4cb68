"""Unit tests for snap.yaml manifest checking."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from snapid.domain.names import MSG_NAME_CHARSET, MSG_NAME_NULL
from snapid.manifest import (
    ManifestIssue,
    ManifestLoadError,
    check_manifest,
    check_manifest_file,
    load_manifest,
)

if TYPE_CHECKING:
    from pathlib import Path

_GOOD_MANIFEST = """\
name: network-manager
version: "1.10"
apps:
  NetworkManager:
    command: bin/NetworkManager
  nmcli:
    command: bin/nmcli
hooks:
  configure: {}
  prepare-device: {}
"""


@pytest.mark.unit
def test_good_manifest_yields_sorted_tags(tmp_path: Path) -> None:
    path = tmp_path / "snap.yaml"
    path.write_text(_GOOD_MANIFEST, encoding="utf-8")

    report = check_manifest_file(path)

    assert report.is_valid
    assert report.snap_name == "network-manager"
    assert report.security_tags == (
        "snap.network-manager.NetworkManager",
        "snap.network-manager.nmcli",
        "snap.network-manager.hook.configure",
        "snap.network-manager.hook.prepare-device",
    )
    assert report.as_dict()["valid"] is True


@pytest.mark.unit
def test_invalid_snap_name_stops_before_entry_points() -> None:
    report = check_manifest({"name": "Network_Manager", "apps": {"x": {}}})

    assert not report.is_valid
    assert report.snap_name == "Network_Manager"
    assert report.security_tags == ()
    assert report.issues == (ManifestIssue("name", MSG_NAME_CHARSET),)


@pytest.mark.unit
def test_missing_or_non_string_name() -> None:
    assert check_manifest({}).issues == (ManifestIssue("name", MSG_NAME_NULL),)

    report = check_manifest({"name": 42})
    assert report.snap_name is None
    assert report.issues[0].message == "snap name must be a string, got int"


@pytest.mark.unit
def test_bad_entry_points_are_reported_individually() -> None:
    report = check_manifest(
        {
            "name": "foo",
            "apps": {"good": {}, "-bad": {}, "hook.sneaky": {}},
            "hooks": {"install": {}, "Bad": {}},
        }
    )

    assert report.security_tags == ("snap.foo.good", "snap.foo.hook.install")
    assert report.issues == (
        ManifestIssue("apps.-bad", "invalid app name '-bad'"),
        ManifestIssue("apps.hook.sneaky", "invalid app name 'hook.sneaky'"),
        ManifestIssue("hooks.Bad", "invalid hook name 'Bad'"),
    )
    assert report.as_dict()["issues"][0] == {  # type: ignore[index]
        "subject": "apps.-bad",
        "message": "invalid app name '-bad'",
    }


@pytest.mark.unit
def test_malformed_sections() -> None:
    report = check_manifest({"name": "foo", "apps": ["a", "b"], "hooks": {1: {}}})

    assert report.issues == (
        ManifestIssue("apps", "expected mapping, got list"),
        ManifestIssue("hooks", "entry name must be a string, got 1"),
    )


@pytest.mark.unit
def test_load_manifest_errors(tmp_path: Path) -> None:
    with pytest.raises(ManifestLoadError, match="manifest not found"):
        load_manifest(tmp_path / "missing.yaml")

    broken = tmp_path / "broken.yaml"
    broken.write_text("name: [unterminated\n", encoding="utf-8")
    with pytest.raises(ManifestLoadError, match="invalid YAML"):
        load_manifest(broken)

    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ManifestLoadError, match="root must be a mapping"):
        load_manifest(scalar)


@pytest.mark.unit
def test_load_manifest_does_not_construct_python_objects(tmp_path: Path) -> None:
    hostile = tmp_path / "hostile.yaml"
    hostile.write_text("name: !!python/object/apply:os.system ['true']\n", encoding="utf-8")
    with pytest.raises(ManifestLoadError, match="invalid YAML"):
        load_manifest(hostile)
