from __future__ import annotations

"""
Cost Estimation Service.

Computes the input cost of a composed prompt from the static model price
registry. Only input pricing applies: the composite is prompt context.
"""

import logging
from typing import Any, Dict, Optional

from notegraph4ai.domain.constants import AI_MODELS

logger = logging.getLogger(__name__)


class CostEstimator:
    """
    Price lookups over AI_MODELS with optional per-model overrides.
    """

    def __init__(self, price_overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            price_overrides: Optional mapping of model key to pricing dict.
        """
        self._overrides = price_overrides or {}

    def calculate_cost(self, token_count: int, model_name: str) -> float:
        """
        Compute the estimated cost in USD for a given token count and model.

        Args:
            token_count: Total number of prompt tokens.
            model_name: Model registry key.

        Returns:
            float: Estimated cost in USD. Returns 0.0 if the model is not found.
        """
        if token_count <= 0:
            return 0.0

        price_info = self._overrides.get(model_name) or AI_MODELS.get(model_name)

        if not price_info:
            logger.warning(
                f"CostEstimator: Model '{model_name}' not found in pricing data. "
                "Returning 0.0."
            )
            return 0.0

        try:
            input_price_1k = float(price_info.get("input_cost_1k", 0.0))
        except (ValueError, TypeError) as e:
            logger.error(f"CostEstimator: Malformed pricing data for '{model_name}': {e}")
            return 0.0

        estimated_cost = (token_count / 1000) * input_price_1k
        logger.debug(
            f"Cost calculated for {model_name}: {token_count} tokens = "
            f"${estimated_cost:.4f}"
        )
        return estimated_cost
