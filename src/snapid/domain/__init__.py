"""Identifier grammar, security tags, and instance-name splitting for snap confinement."""

from snapid.domain.errors import SNAP_DOMAIN, SnapError, SnapErrorCode
from snapid.domain.instance import (
    InstanceName,
    parse_instance_name,
    split_instance_name,
    split_instance_name_into,
)
from snapid.domain.names import (
    check_instance_key,
    check_instance_name,
    check_snap_name,
    is_valid_snap_name,
    require_instance_name,
    require_snap_name,
    validate_instance_key,
    validate_instance_name,
    validate_snap_name,
)
from snapid.domain.security_tag import (
    security_tag_for_app,
    security_tag_for_hook,
    verify_security_tag,
)

__all__ = [
    "InstanceName",
    "SNAP_DOMAIN",
    "SnapError",
    "SnapErrorCode",
    "check_instance_key",
    "check_instance_name",
    "check_snap_name",
    "is_valid_snap_name",
    "parse_instance_name",
    "require_instance_name",
    "require_snap_name",
    "security_tag_for_app",
    "security_tag_for_hook",
    "split_instance_name",
    "split_instance_name_into",
    "validate_instance_key",
    "validate_instance_name",
    "validate_snap_name",
    "verify_security_tag",
]
