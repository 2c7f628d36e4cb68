"""Check a ``snap.yaml`` manifest: its name and the security tag of every app and hook."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml

from snapid.constants import SECURITY_TAG_SEPARATOR
from snapid.domain.names import check_snap_name
from snapid.domain.security_tag import (
    security_tag_for_app,
    security_tag_for_hook,
    verify_security_tag,
)

_LOGGER = logging.getLogger(__name__)


class ManifestLoadError(ValueError):
    """Raised when a manifest cannot be read or is not a YAML mapping."""


@dataclass(frozen=True, slots=True)
class ManifestIssue:
    """One problem found in a manifest; ``subject`` is a dotted location."""

    subject: str
    message: str


@dataclass(frozen=True, slots=True)
class ManifestReport:
    snap_name: str | None
    security_tags: tuple[str, ...]
    issues: tuple[ManifestIssue, ...]

    @property
    def is_valid(self) -> bool:
        return not self.issues

    def as_dict(self) -> dict[str, object]:
        return {
            "snap_name": self.snap_name,
            "security_tags": list(self.security_tags),
            "issues": [{"subject": item.subject, "message": item.message} for item in self.issues],
            "valid": self.is_valid,
        }


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Parse ``path`` with ``yaml.safe_load`` and return the top-level mapping."""

    manifest_path = Path(path)
    try:
        text = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestLoadError(f"manifest not found: {manifest_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestLoadError(f"unable to read manifest {manifest_path}: {exc}") from exc

    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestLoadError(f"invalid YAML in {manifest_path}: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ManifestLoadError(f"manifest root must be a mapping: {manifest_path}")
    return parsed


def check_manifest(payload: Mapping[str, object]) -> ManifestReport:
    """Validate the snap name and derive and verify a security tag per app and hook.

    Entry points are only checked once the snap name is valid, since every tag
    embeds it.
    """

    issues: list[ManifestIssue] = []
    raw_name = payload.get("name")
    name_error = check_snap_name(cast("str | None", raw_name))
    if name_error is not None:
        issues.append(ManifestIssue("name", name_error.message))
        return ManifestReport(
            snap_name=raw_name if isinstance(raw_name, str) else None,
            security_tags=(),
            issues=tuple(issues),
        )

    snap_name = str(raw_name)
    tags: list[str] = []
    for app_name in _entry_point_names(payload, "apps", issues):
        tag = security_tag_for_app(snap_name, app_name)
        # "hook.<x>" would otherwise verify as a hook tag.
        if SECURITY_TAG_SEPARATOR not in app_name and verify_security_tag(tag, snap_name):
            tags.append(tag)
        else:
            issues.append(ManifestIssue(f"apps.{app_name}", f"invalid app name {app_name!r}"))

    for hook_name in _entry_point_names(payload, "hooks", issues):
        tag = security_tag_for_hook(snap_name, hook_name)
        if verify_security_tag(tag, snap_name):
            tags.append(tag)
        else:
            issues.append(ManifestIssue(f"hooks.{hook_name}", f"invalid hook name {hook_name!r}"))

    _LOGGER.debug(
        "checked manifest",
        extra={"snap_name": snap_name, "tags": len(tags), "issues": len(issues)},
    )
    return ManifestReport(snap_name=snap_name, security_tags=tuple(tags), issues=tuple(issues))


def check_manifest_file(path: str | Path) -> ManifestReport:
    return check_manifest(load_manifest(path))


def _entry_point_names(
    payload: Mapping[str, object], section: str, issues: list[ManifestIssue]
) -> list[str]:
    raw = payload.get(section)
    if raw is None:
        return []
    if not isinstance(raw, Mapping):
        issues.append(ManifestIssue(section, f"expected mapping, got {type(raw).__name__}"))
        return []

    names: list[str] = []
    for key in raw:
        if not isinstance(key, str):
            issues.append(ManifestIssue(section, f"entry name must be a string, got {key!r}"))
            continue
        names.append(key)
    return sorted(names)


__all__ = [
    "ManifestIssue",
    "ManifestLoadError",
    "ManifestReport",
    "check_manifest",
    "check_manifest_file",
    "load_manifest",
]
