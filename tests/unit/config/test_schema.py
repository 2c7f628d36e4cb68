"""Unit tests for config schema validation."""

from __future__ import annotations

import pytest

from snapid.config.schema import (
    DEFAULT_CONFIG,
    ConfigValidationError,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
)


def _paths(payload: object) -> dict[str, str]:
    result = validate_config(payload)
    assert not result.is_valid
    return {issue.path: issue.message for issue in result.issues}


@pytest.mark.unit
def test_defaults_are_valid_and_copied() -> None:
    result = validate_config(default_config())
    assert result.is_valid
    assert result.config == DEFAULT_CONFIG

    copied = default_config()
    copied["output"]["json"] = True
    assert DEFAULT_CONFIG["output"]["json"] is False


@pytest.mark.unit
def test_enum_fields_are_normalized() -> None:
    config = merge_config(
        default_config(), {"observability": {"log_level": " debug ", "log_format": "JSON"}}
    )
    validated = assert_valid_config(config)
    assert validated["observability"] == {"log_level": "DEBUG", "log_format": "json"}


@pytest.mark.unit
def test_unknown_fields_and_sections_are_reported() -> None:
    config = merge_config(default_config(), {"extra": {}, "output": {"colour": True}})
    issues = _paths(config)
    assert issues["extra"] == "unknown field"
    assert issues["output.colour"] == "unknown field"


@pytest.mark.unit
def test_type_and_value_errors_carry_dotted_paths() -> None:
    config = merge_config(
        default_config(),
        {
            "meta": {"schema_version": 2},
            "observability": {"log_level": "LOUD", "log_format": 3},
            "output": {"json": "yes"},
        },
    )
    issues = _paths(config)
    assert issues["meta.schema_version"] == "unsupported schema version 2; expected 1"
    assert issues["observability.log_level"] == (
        "invalid value 'LOUD'; expected one of: DEBUG, ERROR, INFO, WARNING"
    )
    assert issues["observability.log_format"] == "expected string, got int"
    assert issues["output.json"] == "expected boolean, got str"


@pytest.mark.unit
def test_missing_sections_and_fields() -> None:
    issues = _paths({"meta": {"schema_version": 1}, "output": []})
    assert issues["observability"] == "missing required section"
    assert issues["output"] == "expected object, got list"

    issues = _paths({"meta": {}, "observability": {}, "output": {}})
    assert issues["meta.schema_version"] == "missing required field"
    assert issues["output.no_color"] == "missing required field"


@pytest.mark.unit
def test_boolean_schema_version_is_rejected() -> None:
    config = merge_config(default_config(), {"meta": {"schema_version": True}})
    assert _paths(config)["meta.schema_version"] == "expected integer, got bool"


@pytest.mark.unit
def test_non_mapping_root_is_rejected() -> None:
    assert _paths(["not", "a", "mapping"]) == {"<root>": "expected object, got list"}


@pytest.mark.unit
def test_assert_valid_config_renders_every_issue() -> None:
    with pytest.raises(ConfigValidationError) as exc_info:
        assert_valid_config({"meta": {"schema_version": 1}})

    message = str(exc_info.value)
    assert message.startswith("invalid config:\n")
    assert "- observability: missing required section" in message
    assert "- output: missing required section" in message
    assert len(exc_info.value.issues) == 2


@pytest.mark.unit
def test_merge_is_deep_and_does_not_mutate_inputs() -> None:
    base = default_config()
    overlay = {"output": {"json": True}}

    merged = merge_config(base, overlay)

    assert merged["output"] == {"json": True, "no_color": False}
    assert base["output"]["json"] is False
    merged["output"]["no_color"] = True
    assert overlay == {"output": {"json": True}}
