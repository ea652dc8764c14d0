from __future__ import annotations

"""
Graph Traversal Engine.

Builds the composite tree for a root document: its backlinks (explored from
the root only) and the forward links of every visited document, recursively,
up to a maximum depth.

Cycle avoidance follows two disciplines:
- each backlink branch starts from an immutable BranchSnapshot of the
  ancestors, so sibling backlink subtrees never suppress each other;
- forward-link recursion threads one SharedVisited accumulator through all
  of its branches, so reconverging paths expand a document only once.
"""

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Optional, Set, Tuple

from notegraph4ai.core.graph.forward_links import resolve_forward_links
from notegraph4ai.core.graph.ports import DocumentStore, LinkIndex
from notegraph4ai.domain.errors import ReadError, ResolutionError
from notegraph4ai.domain.graph_models import (
    DocumentRef,
    Skip,
    SkipReason,
    TraversalDiagnostic,
    TreeNode,
    VisitOutcome,
)

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[TraversalDiagnostic], None]

# -----------------------------------------------------------------------------
# VISITED-STATE CONTEXTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BranchSnapshot:
    """Frozen copy of the visited identifiers at a backlink branch point."""
    paths: FrozenSet[str]

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def open(self) -> SharedVisited:
        """Start a new accumulator owned by a single backlink branch."""
        return SharedVisited(self.paths)


class SharedVisited:
    """Mutable visited accumulator shared by a forward-link lineage."""

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: Set[str] = set(paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def mark(self, doc: DocumentRef) -> None:
        self._paths.add(doc.path)

    def snapshot(self) -> BranchSnapshot:
        return BranchSnapshot(frozenset(self._paths))

# -----------------------------------------------------------------------------
# ENGINE
# -----------------------------------------------------------------------------

class GraphTraverser:
    """
    Depth-bounded, cycle-safe builder of TreeNode trees.

    One instance serves a single traversal call; visited state is created
    per call and never shared between calls.
    """

    def __init__(
            self,
            store: DocumentStore,
            index: LinkIndex,
            max_depth: int,
            on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> None:
        """
        Args:
            store: Document content collaborator.
            index: Link metadata collaborator.
            max_depth: Deepest depth at which nodes may be created.
            on_diagnostic: Optional callback receiving recoverable failures.
        """
        if max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, received {max_depth}.")
        self.store = store
        self.index = index
        self.max_depth = max_depth
        self._on_diagnostic = on_diagnostic

    async def run(self, root: DocumentRef) -> TreeNode:
        """
        Traverse from root and return the finished tree.

        Raises:
            ReadError: If the root document itself cannot be read.
        """
        outcome = await self._visit(root, 0, SharedVisited())
        if not isinstance(outcome, TreeNode):
            # The root is never pre-visited and depth 0 is always in bounds
            raise RuntimeError(f"Traversal produced no root node for {root.path}: {outcome.reason.value}")
        return outcome

    async def _visit(self, doc: DocumentRef, depth: int, visited: SharedVisited) -> VisitOutcome:
        if depth > self.max_depth:
            return Skip(doc, SkipReason.DEPTH_EXCEEDED)
        if doc.path in visited:
            return Skip(doc, SkipReason.ALREADY_VISITED)

        visited.mark(doc)

        try:
            content = await self.store.read_content(doc)
        except ReadError as e:
            if depth == 0:
                raise
            self._report(doc, "read", e)
            return Skip(doc, SkipReason.UNREADABLE)

        logger.debug(f"Visited {doc.path} at depth {depth}")

        backlinks: Tuple[TreeNode, ...] = ()
        if depth == 0:
            backlinks = await self._expand_backlinks(doc, depth, visited.snapshot())

        forward_links = await self._expand_forward_links(doc, depth, visited)

        return TreeNode(
            document=doc,
            content=content,
            depth=depth,
            backlinks=backlinks,
            forward_links=forward_links,
        )

    async def _expand_backlinks(
            self,
            doc: DocumentRef,
            depth: int,
            ancestors: BranchSnapshot,
    ) -> Tuple[TreeNode, ...]:
        try:
            sources = await self.index.list_backlinks(doc)
        except ResolutionError as e:
            self._report(doc, "backlinks", e)
            return ()

        children: List[TreeNode] = []
        for source in sources:
            if source.path in ancestors:
                continue
            outcome = await self._visit(source, depth + 1, ancestors.open())
            if isinstance(outcome, TreeNode):
                children.append(outcome)
        return tuple(children)

    async def _expand_forward_links(
            self,
            doc: DocumentRef,
            depth: int,
            visited: SharedVisited,
    ) -> Tuple[TreeNode, ...]:
        try:
            targets = await resolve_forward_links(self.index, doc, self._emit)
        except ResolutionError as e:
            self._report(doc, "forward_links", e)
            return ()

        children: List[TreeNode] = []
        for target in targets:
            if target.path in visited:
                continue
            outcome = await self._visit(target, depth + 1, visited)
            if isinstance(outcome, TreeNode):
                children.append(outcome)
        return tuple(children)

    def _report(self, doc: DocumentRef, stage: str, error: Exception) -> None:
        logger.warning(f"Skipping {stage} of {doc.path}: {error}")
        self._emit(TraversalDiagnostic(doc, stage, str(error)))

    def _emit(self, diagnostic: TraversalDiagnostic) -> None:
        if self._on_diagnostic:
            self._on_diagnostic(diagnostic)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

async def traverse(
        root: DocumentRef,
        max_depth: int,
        store: DocumentStore,
        index: LinkIndex,
        *,
        on_diagnostic: Optional[DiagnosticSink] = None,
) -> TreeNode:
    """
    Build the backlink/forward-link tree rooted at a document.

    Args:
        root: Starting document; must be readable.
        max_depth: Depth bound (>= 0); depths 0..max_depth are explored.
        store: Document content collaborator.
        index: Link metadata collaborator.
        on_diagnostic: Optional callback receiving node-local failures.

    Returns:
        TreeNode: The root of the finished tree.

    Raises:
        ValueError: If max_depth is negative.
        ReadError: If the root cannot be read.
    """
    logger.info(f"Traversing link graph from {root.path} (max depth {max_depth})")
    traverser = GraphTraverser(store, index, max_depth, on_diagnostic)
    return await traverser.run(root)
