from __future__ import annotations

"""
Composition Domain Data Models.

Defines the result structure and factory functions used to communicate
composition outcomes between the composer service and the interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from notegraph4ai.domain.graph_models import TraversalDiagnostic

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CompositionResult:
    """
    Unified result of one traverse + render + prompt run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        root_path: Identifier of the starting document.
        max_depth: Depth bound used for the traversal.
        composite: Rendered composite text (empty on failure).
        prompt: Final LLM prompt wrapping the composite.
        node_count: Number of nodes in the traversal tree.
        token_count: Estimated token count of the prompt.
        estimated_cost: Estimated input cost in USD.
        target_model: Model key used for token and cost estimation.
        diagnostics: Recoverable failures met during the run.
    """
    ok: bool
    error: str

    root_path: str
    max_depth: int

    composite: str = ""
    prompt: str = ""

    node_count: int = 0
    token_count: int = 0
    estimated_cost: float = 0.0
    target_model: str = ""

    diagnostics: List[TraversalDiagnostic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into JSON-compatible primitives."""
        return {
            "ok": self.ok,
            "error": self.error,
            "root_path": self.root_path,
            "max_depth": self.max_depth,
            "composite": self.composite,
            "prompt": self.prompt,
            "node_count": self.node_count,
            "token_count": self.token_count,
            "estimated_cost": self.estimated_cost,
            "target_model": self.target_model,
            "diagnostics": [
                {"path": d.document.path, "stage": d.stage, "message": d.message}
                for d in self.diagnostics
            ],
        }

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        root_path: str,
        max_depth: int,
        target_model: str = "",
        diagnostics: Optional[List[TraversalDiagnostic]] = None,
) -> CompositionResult:
    """
    Create a failed composition result instance.

    Args:
        error: Detailed error description.
        root_path: The requested starting document.
        max_depth: The requested depth bound.
        target_model: Model key selected for estimation.
        diagnostics: Diagnostics collected before the failure.

    Returns:
        CompositionResult: An immutable error result object.
    """
    return CompositionResult(
        ok=False,
        error=error,
        root_path=root_path,
        max_depth=max_depth,
        target_model=target_model,
        diagnostics=diagnostics or [],
    )


def create_success_result(
        root_path: str,
        max_depth: int,
        composite: str,
        prompt: str,
        node_count: int,
        token_count: int = 0,
        estimated_cost: float = 0.0,
        target_model: str = "",
        diagnostics: Optional[List[TraversalDiagnostic]] = None,
) -> CompositionResult:
    """
    Create a successful composition result instance.

    Returns:
        CompositionResult: An immutable success result object.
    """
    return CompositionResult(
        ok=True,
        error="",
        root_path=root_path,
        max_depth=max_depth,
        composite=composite,
        prompt=prompt,
        node_count=node_count,
        token_count=token_count,
        estimated_cost=estimated_cost,
        target_model=target_model,
        diagnostics=diagnostics or [],
    )
