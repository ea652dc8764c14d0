from __future__ import annotations

"""
Composition Service.

Coordinates one composition run:
1. Traverses the link graph from the root document.
2. Renders the tree into the composite text.
3. Reads the optional template note.
4. Wraps the composite into the LLM prompt.
5. Computes token and cost metrics.
"""

import asyncio
import logging
from typing import List, Optional

from notegraph4ai.core.graph.ports import DocumentStore, LinkIndex
from notegraph4ai.core.graph.traversal import traverse
from notegraph4ai.core.processing.tokenizer import count_tokens
from notegraph4ai.core.rendering.composite_renderer import count_nodes, render
from notegraph4ai.core.rendering.prompt_builder import generate_llm_prompt
from notegraph4ai.core.services.estimator import CostEstimator
from notegraph4ai.domain.composition_models import (
    CompositionResult,
    create_error_result,
    create_success_result,
)
from notegraph4ai.domain.constants import DEFAULT_MODEL_KEY, DEFAULT_PROMPT_TEMPLATE
from notegraph4ai.domain.errors import ReadError
from notegraph4ai.domain.graph_models import DocumentRef, TraversalDiagnostic

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def build_composite(
        root: DocumentRef,
        max_depth: int,
        store: DocumentStore,
        index: LinkIndex,
) -> str:
    """Render the composite document for root, bounded by max_depth."""
    tree = await traverse(root, max_depth, store, index)
    return render(tree)


async def compose_prompt(
        root: DocumentRef,
        max_depth: int,
        store: DocumentStore,
        index: LinkIndex,
        *,
        template: str = DEFAULT_PROMPT_TEMPLATE,
        template_document: Optional[DocumentRef] = None,
        target_model: str = DEFAULT_MODEL_KEY,
        measure_tokens: bool = True,
) -> CompositionResult:
    """
    Execute the full composition for one root document.

    Node-local failures become diagnostics. Only an unreadable root produces
    a failed result.

    Args:
        root: Starting document.
        max_depth: Depth bound for the traversal.
        store: Document content collaborator.
        index: Link metadata collaborator.
        template: Prompt template with {filename}, {depth}, {content}.
        template_document: Optional note appended as a structure guide.
        target_model: Model key for token and cost estimation.
        measure_tokens: Whether to count tokens and estimate cost.

    Returns:
        CompositionResult: Status, texts, metrics and diagnostics.
    """
    logger.info(f"Composition started for {root.path} (depth {max_depth}).")
    diagnostics: List[TraversalDiagnostic] = []

    try:
        tree = await traverse(root, max_depth, store, index, on_diagnostic=diagnostics.append)
    except ReadError as e:
        msg = f"Root document '{root.path}' is unreadable: {e}"
        logger.error(msg)
        return create_error_result(msg, root.path, max_depth, target_model, diagnostics)

    composite = render(tree)
    node_count = count_nodes(tree)

    template_content = ""
    if template_document is not None:
        try:
            template_content = await store.read_content(template_document)
        except ReadError as e:
            logger.warning(f"Template note '{template_document.path}' skipped: {e}")
            diagnostics.append(TraversalDiagnostic(template_document, "template", str(e)))

    prompt = generate_llm_prompt(root.name, composite, max_depth, template, template_content)

    token_count = 0
    estimated_cost = 0.0
    if measure_tokens:
        token_count = count_tokens(prompt, target_model)
        estimated_cost = CostEstimator().calculate_cost(token_count, target_model)

    logger.info(
        f"Composition finished: {node_count} notes, {token_count:,} tokens, "
        f"{len(diagnostics)} diagnostics."
    )

    return create_success_result(
        root_path=root.path,
        max_depth=max_depth,
        composite=composite,
        prompt=prompt,
        node_count=node_count,
        token_count=token_count,
        estimated_cost=estimated_cost,
        target_model=target_model,
        diagnostics=diagnostics,
    )


def run_composition(
        root: DocumentRef,
        max_depth: int,
        store: DocumentStore,
        index: LinkIndex,
        **kwargs,
) -> CompositionResult:
    """Synchronous entry point for compose_prompt."""
    return asyncio.run(compose_prompt(root, max_depth, store, index, **kwargs))
