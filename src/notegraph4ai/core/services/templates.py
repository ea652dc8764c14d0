from __future__ import annotations

"""
Template Note Discovery.

Selects the documents a user may pick as a structure guide for the note the
LLM is asked to produce.
"""

from typing import Iterable, List

from notegraph4ai.domain.constants import TEMPLATE_NAME_PREFIX, TEMPLATE_PATH_MARKER
from notegraph4ai.domain.graph_models import DocumentRef


def is_template_document(doc: DocumentRef) -> bool:
    """True for documents in a template folder or named 'template...'."""
    path = doc.path.lower()
    return TEMPLATE_PATH_MARKER in path or doc.name.lower().startswith(TEMPLATE_NAME_PREFIX)


def find_template_documents(documents: Iterable[DocumentRef]) -> List[DocumentRef]:
    """
    Filter template candidates out of a document listing.

    Args:
        documents: Every document of the store.

    Returns:
        List[DocumentRef]: Template candidates sorted by path.
    """
    return sorted(
        (doc for doc in documents if is_template_document(doc)),
        key=lambda d: d.path,
    )
