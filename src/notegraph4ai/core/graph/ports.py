from __future__ import annotations

"""
Collaborator Interfaces.

Narrow, read-only, asynchronous views of the host document store and its
link-metadata index. The traversal engine depends only on these protocols;
concrete adapters (e.g. the filesystem vault) live in the infra layer.
"""

from typing import Optional, Protocol, Sequence

from notegraph4ai.domain.graph_models import DocumentRef, RawReference


class DocumentStore(Protocol):
    """Read access to document contents."""

    async def read_content(self, doc: DocumentRef) -> str:
        """Return the full text of a document. Raises ReadError."""
        ...

    async def list_documents(self) -> Sequence[DocumentRef]:
        """Enumerate every document in the store."""
        ...


class LinkIndex(Protocol):
    """Link metadata: backlinks, raw forward references and resolution."""

    async def list_backlinks(self, doc: DocumentRef) -> Sequence[DocumentRef]:
        """Documents referencing doc. Raises ResolutionError."""
        ...

    async def list_forward_references(self, doc: DocumentRef) -> Sequence[RawReference]:
        """Links and embeds of doc, in document order. Raises ResolutionError."""
        ...

    async def resolve_reference(
            self,
            raw: RawReference,
            context_doc: DocumentRef,
    ) -> Optional[DocumentRef]:
        """Concrete document for a raw reference, or None if unresolvable."""
        ...
