from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration dictionaries (from config.json or the
CLI) into strictly typed settings. Handles type coercion, default value
injection and key-binding sanitation.
"""

import logging
from typing import Any, Dict, List, Tuple

from filenav.domain.config import NAV_ACTIONS, default_key_bindings, get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and a
                                          list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    merged["root_path"] = _as_str(
        merged.get("root_path"), defaults["root_path"], "root_path", warnings, strict
    )
    merged["show_hidden"] = _as_bool(
        merged.get("show_hidden"), defaults["show_hidden"], "show_hidden", warnings, strict
    )
    merged["exclude_patterns"] = _as_list_str(
        merged.get("exclude_patterns"), [], "exclude_patterns", warnings, strict
    )
    merged["key_bindings"] = _as_key_bindings(merged.get("key_bindings"), warnings, strict)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return items

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_key_bindings(value: Any, warnings: List[str], strict: bool) -> Dict[str, List[str]]:
    """Keep known actions only; actions left without keys fall back to defaults."""
    defaults = default_key_bindings()
    if value is None:
        return defaults

    if not isinstance(value, dict):
        msg = f"Invalid field 'key_bindings': expected dict, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return defaults

    out: Dict[str, List[str]] = {}
    for action in NAV_ACTIONS:
        keys = _as_list_str(
            value.get(action), defaults[action], f"key_bindings.{action}", warnings, strict
        )
        out[action] = keys if keys else defaults[action]

    for action in value:
        if action not in NAV_ACTIONS:
            msg = f"Unknown action in 'key_bindings': '{action}'."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Entry discarded.")
    return out
