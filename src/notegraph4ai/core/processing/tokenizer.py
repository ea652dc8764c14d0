from __future__ import annotations

"""
Token Counting Engine.

Estimates how many tokens a composed prompt will consume. Uses tiktoken's
BPE encoders as the universal proxy for every target model and falls back
to a character-density heuristic when encoding fails (e.g. the encoder
files cannot be fetched offline).
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import tiktoken

from notegraph4ai.domain.constants import AI_MODELS, DEFAULT_MODEL_KEY

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN_AVG = 4

# Loaded encoders, keyed by encoding name
_ENCODING_CACHE: Dict[str, Any] = {}


# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for token counting algorithms.
    """

    @abstractmethod
    def count(self, text: str, model_id: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            model_id: Specific model identifier for encoding selection.

        Returns:
            int: Total token count.
        """
        pass


class HeuristicStrategy(TokenizerStrategy):
    """
    Fallback algorithm using character density estimation.
    """

    def count(self, text: str, model_id: str) -> int:
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoder. Legacy GPT identifiers use cl100k_base, everything
    else o200k_base.
    """

    def count(self, text: str, model_id: str) -> int:
        encoding_name = "o200k_base"
        if any(x in model_id.lower() for x in ["gpt-4-", "gpt-3.5", "legacy"]):
            encoding_name = "cl100k_base"

        if encoding_name not in _ENCODING_CACHE:
            _ENCODING_CACHE[encoding_name] = tiktoken.get_encoding(encoding_name)

        encoding = _ENCODING_CACHE[encoding_name]
        return len(encoding.encode(text, disallowed_special=()))


# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Centralized service for model-aware token estimation.
    """

    def __init__(self) -> None:
        self.heuristic = HeuristicStrategy()
        self._tiktoken: Optional[TokenizerStrategy] = TiktokenStrategy()

    def count(self, text: str, model: str = DEFAULT_MODEL_KEY) -> int:
        """
        Count tokens of text for the given model key or identifier.

        Args:
            text: Raw input text.
            model: Model registry key (see AI_MODELS) or raw model id.

        Returns:
            int: Estimated or precise token count.
        """
        if not text:
            return 0

        model_id = _resolve_model_id(model)

        if self._tiktoken is None:
            return self.heuristic.count(text, model_id)

        try:
            return self._tiktoken.count(text, model_id)
        except Exception as e:
            logger.warning(f"Tokenizer failed for '{model_id}': {e}. Using heuristic fallback.")
            return self.heuristic.count(text, model_id)


def _resolve_model_id(model: str) -> str:
    """Map a registry display key to its API identifier."""
    info = AI_MODELS.get(model)
    if info:
        return str(info.get("id", model))
    return model or "gpt-4o"


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: str, model: str = DEFAULT_MODEL_KEY) -> int:
    """
    Estimate the number of tokens for the target model.

    Args:
        text: Input string content.
        model: Target model key (e.g. "ChatGPT 4o") or identifier.

    Returns:
        int: Total token count.
    """
    return _SERVICE_INSTANCE.count(text, model)
