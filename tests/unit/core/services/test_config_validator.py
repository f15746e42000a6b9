from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Type coercion (String to Bool/List).
2. Default value injection.
3. Key-binding sanitation and strict mode.
"""

import pytest

from filenav.core.services.config_validator import validate_config
from filenav.domain.config import default_key_bindings


def test_validate_none_returns_defaults() -> None:
    cfg, warnings = validate_config(None)

    assert cfg["show_hidden"] is False
    assert cfg["key_bindings"] == default_key_bindings()
    assert len(warnings) > 0


def test_validate_empty_dict_has_no_warnings() -> None:
    cfg, warnings = validate_config({})

    assert cfg["exclude_patterns"]
    assert warnings == []


def test_validate_coerces_strings() -> None:
    cfg, warnings = validate_config({
        "show_hidden": "yes",
        "exclude_patterns": "build, dist",
    })

    assert cfg["show_hidden"] is True
    assert cfg["exclude_patterns"] == ["build", "dist"]
    assert len(warnings) == 2


def test_validate_allows_empty_exclusions() -> None:
    cfg, _ = validate_config({"exclude_patterns": []})
    assert cfg["exclude_patterns"] == []


def test_key_bindings_drop_unknown_actions_and_fill_missing() -> None:
    cfg, warnings = validate_config({"key_bindings": {"down": ["n"], "explode": ["x"]}})

    assert cfg["key_bindings"]["down"] == ["n"]
    assert cfg["key_bindings"]["toggle"] == default_key_bindings()["toggle"]
    assert "explode" not in cfg["key_bindings"]
    assert any("explode" in w for w in warnings)


def test_strict_mode_raises_on_type_mismatch() -> None:
    with pytest.raises(TypeError):
        validate_config({"show_hidden": "maybe"}, strict=True)
    with pytest.raises(TypeError):
        validate_config("not a dict", strict=True)
