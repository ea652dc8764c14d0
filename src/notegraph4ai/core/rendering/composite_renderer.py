from __future__ import annotations

"""
Composite Tree Renderer.

Serializes a traversal tree into a single Markdown text block. Each node
contributes a header with its depth annotation, its captured content and a
horizontal rule, followed by its backlinks section and then its forward
links section.
"""

from typing import Iterator, List

from notegraph4ai.domain.graph_models import TreeNode

SEPARATOR = "\n\n---\n\n"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render(node: TreeNode) -> str:
    """
    Render a tree depth-first, pre-order.

    Pure function of the tree: the same tree always yields the same text.

    Args:
        node: Root of the (sub)tree to render.

    Returns:
        str: The composite document.
    """
    parts: List[str] = []
    _render_into(node, parts)
    return "".join(parts)


def depth_suffix(node: TreeNode) -> str:
    """Return ' (Depth N)' for non-root nodes, '' for the root."""
    return f" (Depth {node.depth})" if node.depth > 0 else ""


def iter_nodes(node: TreeNode) -> Iterator[TreeNode]:
    """Yield every node in rendering order."""
    yield node
    for child in node.backlinks:
        yield from iter_nodes(child)
    for child in node.forward_links:
        yield from iter_nodes(child)


def count_nodes(node: TreeNode) -> int:
    return sum(1 for _ in iter_nodes(node))

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _render_into(node: TreeNode, parts: List[str]) -> None:
    name = node.document.name
    suffix = depth_suffix(node)

    parts.append(f"# {name}{suffix}\n\n")
    parts.append(node.content)
    parts.append(SEPARATOR)

    if node.backlinks:
        parts.append(f"# Backlinks to {name}{suffix}\n\n")
        for child in node.backlinks:
            _render_into(child, parts)

    if node.forward_links:
        parts.append(f"# Forward Links from {name}{suffix}\n\n")
        for child in node.forward_links:
            _render_into(child, parts)
