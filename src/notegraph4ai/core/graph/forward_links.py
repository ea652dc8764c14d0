from __future__ import annotations

"""
Forward-Link Resolution Helper.

Turns the raw links and embeds of a document into the ordered, duplicate-free
list of concrete documents it points to.
"""

import logging
from typing import Callable, Dict, List, Optional

from notegraph4ai.core.graph.ports import LinkIndex
from notegraph4ai.domain.errors import ResolutionError
from notegraph4ai.domain.graph_models import DocumentRef, TraversalDiagnostic

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[TraversalDiagnostic], None]


async def resolve_forward_links(
        index: LinkIndex,
        doc: DocumentRef,
        report: Optional[DiagnosticSink] = None,
) -> List[DocumentRef]:
    """
    Resolve every link and embed of a document to concrete targets.

    Unresolvable references are skipped silently. A reference whose
    resolution fails is dropped and reported; the remaining references are
    still resolved. Targets are deduplicated by path, keeping the first
    occurrence.

    Args:
        index: Link metadata collaborator.
        doc: Document whose references are enumerated.
        report: Optional sink for per-reference resolution failures.

    Returns:
        List[DocumentRef]: Distinct targets in document order.

    Raises:
        ResolutionError: If the references of doc cannot be listed at all.
    """
    raw_refs = await index.list_forward_references(doc)
    targets: Dict[str, DocumentRef] = {}

    for raw in raw_refs:
        try:
            target = await index.resolve_reference(raw, doc)
        except ResolutionError as e:
            logger.warning(f"Could not resolve '{raw.target}' in {doc.path}: {e}")
            if report:
                report(TraversalDiagnostic(doc, "resolve", f"'{raw.target}': {e}"))
            continue

        if target is None:
            logger.debug(f"Unresolved {raw.kind} '{raw.target}' in {doc.path}")
            continue

        targets.setdefault(target.path, target)

    return list(targets.values())
