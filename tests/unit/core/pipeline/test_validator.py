from __future__ import annotations

"""
Unit tests for the configuration validator.

Verifies coercion, depth clamping, extension normalization and strict mode.
"""

from typing import Any, Dict

import pytest

from notegraph4ai.core.pipeline.validator import validate_config
from notegraph4ai.domain.config import get_default_config
from notegraph4ai.domain.constants import DEFAULT_DEPTH, DEFAULT_PROMPT_TEMPLATE, MAX_DEPTH_LIMIT


def test_defaults_validate_cleanly() -> None:
    clean, warnings = validate_config(get_default_config())

    assert warnings == []
    assert clean["depth"] == DEFAULT_DEPTH
    assert clean["extensions"] == [".md"]


def test_non_dict_falls_back_to_defaults() -> None:
    clean, warnings = validate_config(["not", "a", "dict"])

    assert clean == get_default_config()
    assert len(warnings) == 1


def test_non_dict_raises_in_strict_mode() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


@pytest.mark.parametrize("raw, expected", [(-3, 0), (9, MAX_DEPTH_LIMIT), (2, 2), ("3", 3)])
def test_depth_is_coerced_and_clamped(raw: Any, expected: int) -> None:
    clean, _ = validate_config({"depth": raw})
    assert clean["depth"] == expected


def test_depth_out_of_range_raises_in_strict_mode() -> None:
    with pytest.raises(ValueError):
        validate_config({"depth": 12}, strict=True)


def test_boolean_depth_is_rejected() -> None:
    clean, warnings = validate_config({"depth": True})

    assert clean["depth"] == DEFAULT_DEPTH
    assert any("depth" in w for w in warnings)


def test_extensions_are_normalized() -> None:
    clean, warnings = validate_config({"extensions": ["MD", " .Markdown ", ""]})

    assert clean["extensions"] == [".md", ".markdown"]
    assert any("corrected" in w for w in warnings)


def test_extensions_accept_csv_string() -> None:
    clean, _ = validate_config({"extensions": ".md,.txt"})
    assert clean["extensions"] == [".md", ".txt"]


def test_string_bools_are_converted() -> None:
    clean, warnings = validate_config({"raw_output": "yes", "count_tokens": "0"})

    assert clean["raw_output"] is True
    assert clean["count_tokens"] is False
    assert len(warnings) == 2


def test_prompt_template_whitespace_is_preserved() -> None:
    template = "  {content}\n\n"
    clean, _ = validate_config({"prompt_template": template})
    assert clean["prompt_template"] == template


def test_blank_prompt_template_uses_default() -> None:
    clean, _ = validate_config({"prompt_template": "   "})
    assert clean["prompt_template"] == DEFAULT_PROMPT_TEMPLATE


def test_wrong_string_type_uses_fallback() -> None:
    config: Dict[str, Any] = {"note": 42, "vault_path": "  /tmp/vault  "}
    clean, warnings = validate_config(config)

    assert clean["note"] == ""
    assert clean["vault_path"] == "/tmp/vault"
    assert any("'note'" in w for w in warnings)
