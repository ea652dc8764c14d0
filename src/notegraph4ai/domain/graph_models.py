from __future__ import annotations

"""
Document Graph Data Models.

Provides the immutable records exchanged between the vault collaborators,
the traversal engine and the renderer. A traversal produces a tree of
TreeNode objects; a visit that produces no node returns a Skip instead.
"""

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple, Union

# -----------------------------------------------------------------------------
# DOCUMENT HANDLES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DocumentRef:
    """
    Handle to a document owned by the external store.

    Attributes:
        path: Unique path-like identifier (POSIX separators).
        name: Short display name used in rendered headers.
    """
    path: str
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            stem = posixpath.splitext(posixpath.basename(self.path))[0]
            object.__setattr__(self, "name", stem or self.path)


@dataclass(frozen=True)
class RawReference:
    """
    A link or embed as written inside a document, before resolution.

    Attributes:
        target: Link path text, stripped of alias and heading subpath.
        kind: Either 'link' or 'embed'.
        raw: Original source text of the reference.
    """
    target: str
    kind: str = "link"
    raw: str = ""

    @property
    def is_embed(self) -> bool:
        return self.kind == "embed"

# -----------------------------------------------------------------------------
# TRAVERSAL TREE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeNode:
    """
    One visited document in the composite tree.

    Attributes:
        document: The document this node represents.
        content: Text captured when the document was visited.
        depth: Recursion depth at which the node was discovered (root = 0).
        backlinks: Child nodes for documents referencing the root.
        forward_links: Child nodes for documents this one references.
    """
    document: DocumentRef
    content: str
    depth: int
    backlinks: Tuple["TreeNode", ...] = field(default_factory=tuple)
    forward_links: Tuple["TreeNode", ...] = field(default_factory=tuple)

    @property
    def is_root(self) -> bool:
        return self.depth == 0


class SkipReason(str, Enum):
    """Why a visit produced no node."""
    DEPTH_EXCEEDED = "depth_exceeded"
    ALREADY_VISITED = "already_visited"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class Skip:
    """Explicit empty outcome of a visit."""
    document: DocumentRef
    reason: SkipReason


VisitOutcome = Union[TreeNode, Skip]

# -----------------------------------------------------------------------------
# DIAGNOSTICS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TraversalDiagnostic:
    """
    Record of a recoverable, node-local failure.

    Attributes:
        document: Document whose expansion was affected.
        stage: One of 'read', 'backlinks', 'forward_links', 'resolve', 'template'.
        message: Human-readable description of the failure.
    """
    document: DocumentRef
    stage: str
    message: str

    def describe(self) -> str:
        return f"[{self.stage}] {self.document.path}: {self.message}"
