from __future__ import annotations

"""
Unit tests for the Tokenizer Service.

Verifies:
1. Delegation to the tiktoken strategy for every model.
2. Fallback to the heuristic on failure or absence of the encoder.
3. Model key resolution and encoding selection.
"""

from unittest.mock import MagicMock, patch

import pytest

from notegraph4ai.core.processing import tokenizer
from notegraph4ai.core.processing.tokenizer import (
    HeuristicStrategy,
    TiktokenStrategy,
    TokenizerService,
    count_tokens,
)


@pytest.fixture
def service() -> TokenizerService:
    return TokenizerService()


def test_service_delegates_to_tiktoken(service: TokenizerService) -> None:
    with patch.object(service, "_tiktoken") as mock_tik:
        mock_tik.count.return_value = 42

        assert service.count("some text", "gpt-4o") == 42
        assert service.count("some text", "Claude 4.5 Sonnet") == 42


def test_registry_keys_resolve_to_model_ids(service: TokenizerService) -> None:
    with patch.object(service, "_tiktoken") as mock_tik:
        mock_tik.count.return_value = 1
        service.count("text", "Gemini 2.5 Pro")

    mock_tik.count.assert_called_once_with("text", "gemini-2.5-pro")


def test_service_falls_back_on_failure(service: TokenizerService) -> None:
    with patch.object(service, "_tiktoken") as mock_tik:
        mock_tik.count.side_effect = Exception("encoder download failed")

        # 8 chars -> 2 tokens
        assert service.count("12345678", "any-model") == 2


def test_service_uses_heuristic_without_tiktoken(service: TokenizerService) -> None:
    service._tiktoken = None
    assert service.count("123456789012", "any-model") == 3


def test_empty_input_is_zero(service: TokenizerService) -> None:
    assert service.count("", "gpt-4o") == 0
    assert service.count(None, "gpt-4o") == 0  # type: ignore


def test_heuristic_rounds_up() -> None:
    assert HeuristicStrategy().count("12345", "x") == 2


@pytest.mark.parametrize(
    "model_id, expected_encoding",
    [
        ("gpt-4o", "o200k_base"),
        ("gpt-4-turbo", "cl100k_base"),
        ("gpt-3.5-turbo", "cl100k_base"),
        ("claude-sonnet-4-5-20250929", "o200k_base"),
    ],
)
def test_tiktoken_encoding_selection(model_id: str, expected_encoding: str, monkeypatch: pytest.MonkeyPatch) -> None:
    fake_encoding = MagicMock()
    fake_encoding.encode.return_value = [1, 2, 3]
    get_encoding = MagicMock(return_value=fake_encoding)
    monkeypatch.setattr(tokenizer.tiktoken, "get_encoding", get_encoding)
    monkeypatch.setattr(tokenizer, "_ENCODING_CACHE", {})

    assert TiktokenStrategy().count("abc", model_id) == 3
    get_encoding.assert_called_once_with(expected_encoding)


def test_public_api_uses_singleton() -> None:
    with patch.object(tokenizer._SERVICE_INSTANCE, "_tiktoken") as mock_tik:
        mock_tik.count.return_value = 7
        assert count_tokens("hello") == 7
