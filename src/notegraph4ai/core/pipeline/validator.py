from __future__ import annotations

"""
Configuration Validation Service.

Ensures that the configuration dictionary conforms to the expected schema
before a composition runs. Handles type coercion, depth bounds, extension
normalization and default value injection.
"""

import logging
from typing import Any, Dict, List, Tuple

from notegraph4ai.domain.config import get_default_config
from notegraph4ai.domain.constants import (
    DEFAULT_DEPTH,
    DEFAULT_EXTENSIONS,
    MAX_DEPTH_LIMIT,
)

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

    string_fields = [
        "vault_path", "target_model", "prompt_template",
    ]
    optional_string_fields = [
        "note", "template_file", "output_path",
    ]
    bool_fields = [
        "raw_output", "count_tokens",
    ]

    for field in string_fields:
        merged[field] = _as_str(
            merged.get(field), defaults.get(field, ""), field, warnings, strict
        )

    for field in optional_string_fields:
        merged[field] = _as_str(merged.get(field), "", field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(
            merged.get(field), defaults.get(field, False), field, warnings, strict
        )

    merged["depth"] = _as_depth(merged.get("depth"), warnings, strict)

    merged["extensions"] = _normalize_extensions(
        _as_list_str(merged.get("extensions"), list(DEFAULT_EXTENSIONS), "extensions", warnings, strict),
        warnings,
        strict,
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value if field == "prompt_template" else value.strip()
        return v if v.strip() else fallback

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
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_depth(value: Any, warnings: List[str], strict: bool) -> int:
    """Coerce the traversal depth to an int within 0..MAX_DEPTH_LIMIT."""
    if value is None:
        return DEFAULT_DEPTH

    depth: int
    if isinstance(value, bool):
        msg = "Invalid field 'depth': expected int, received bool."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return DEFAULT_DEPTH
    if isinstance(value, int):
        depth = value
    elif isinstance(value, str) and not strict and value.strip().lstrip("-").isdigit():
        depth = int(value.strip())
        warnings.append(f"Field 'depth' converted from '{value}' to {depth}.")
    else:
        msg = f"Invalid field 'depth': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return DEFAULT_DEPTH

    if 0 <= depth <= MAX_DEPTH_LIMIT:
        return depth

    msg = f"Depth {depth} outside 0..{MAX_DEPTH_LIMIT}."
    if strict:
        raise ValueError(msg)
    clamped = min(max(depth, 0), MAX_DEPTH_LIMIT)
    warnings.append(f"{msg} Clamped to {clamped}.")
    return clamped


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
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
        return out if out else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_extensions(exts: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Ensure every document extension is lower-case and dot-prefixed."""
    out: List[str] = []
    for ext in exts:
        e = ext.strip().lower()
        if not e:
            continue
        if not e.startswith("."):
            if strict:
                raise ValueError(f"Invalid extension '{ext}': must start with '.'.")
            warnings.append(f"Extension '{ext}' corrected to '.{e}'.")
            e = "." + e
        out.append(e)
    return out if out else list(DEFAULT_EXTENSIONS)
