"""Validators for snap names, security tags and instance names.

A launcher calls these before it builds mount paths, security-profile lookups
or process labels from untrusted names. Importing the package has no side
effects: nothing here loads config or installs log handlers.
"""

from snapid.domain import (
    SNAP_DOMAIN,
    InstanceName,
    SnapError,
    SnapErrorCode,
    check_instance_key,
    check_instance_name,
    check_snap_name,
    is_valid_snap_name,
    parse_instance_name,
    require_instance_name,
    require_snap_name,
    security_tag_for_app,
    security_tag_for_hook,
    split_instance_name,
    split_instance_name_into,
    validate_instance_key,
    validate_instance_name,
    validate_snap_name,
    verify_security_tag,
)

__version__ = "0.1.0"

__all__ = [
    "InstanceName",
    "SNAP_DOMAIN",
    "SnapError",
    "SnapErrorCode",
    "__version__",
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
