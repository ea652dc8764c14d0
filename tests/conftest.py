from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory document graph implementing the collaborator protocols.
3. A small Markdown vault on disk for adapter and CLI tests.
4. Isolation of the user data directory (config and logs).
"""

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from notegraph4ai.domain.errors import ReadError, ResolutionError  # noqa: E402
from notegraph4ai.domain.graph_models import DocumentRef, RawReference  # noqa: E402


# -----------------------------------------------------------------------------
# In-Memory Graph Double
# -----------------------------------------------------------------------------
class InMemoryGraph:
    """
    Document store and link index over plain dictionaries.

    Documents are addressed by name; identifiers are '<name>.md'. Backlinks
    are derived from forward references in insertion order.
    """

    def __init__(self) -> None:
        self.contents: Dict[str, str] = {}
        self.references: Dict[str, List[RawReference]] = {}
        self.unreadable: Set[str] = set()
        self.broken_backlinks: Set[str] = set()
        self.broken_forward: Set[str] = set()
        self.broken_targets: Set[str] = set()
        self.reads: List[str] = []
        self.backlink_overrides: Dict[str, List[str]] = {}

    def add(
            self,
            name: str,
            content: str = "",
            links: Iterable[str] = (),
            embeds: Iterable[str] = (),
    ) -> DocumentRef:
        self.contents[name] = content
        refs = [RawReference(target=t, kind="link", raw=f"[[{t}]]") for t in links]
        refs += [RawReference(target=t, kind="embed", raw=f"![[{t}]]") for t in embeds]
        self.references[name] = refs
        return self.doc(name)

    @staticmethod
    def doc(name: str) -> DocumentRef:
        return DocumentRef(path=f"{name}.md")

    async def read_content(self, doc: DocumentRef) -> str:
        self.reads.append(doc.name)
        if doc.name in self.unreadable or doc.name not in self.contents:
            raise ReadError(f"cannot read {doc.path}", path=doc.path)
        return self.contents[doc.name]

    async def list_documents(self) -> Sequence[DocumentRef]:
        return [self.doc(n) for n in self.contents]

    async def list_backlinks(self, doc: DocumentRef) -> Sequence[DocumentRef]:
        if doc.name in self.broken_backlinks:
            raise ResolutionError(f"backlink index unavailable for {doc.path}")
        if doc.name in self.backlink_overrides:
            return [self.doc(n) for n in self.backlink_overrides[doc.name]]
        return [
            self.doc(source)
            for source, refs in self.references.items()
            if source != doc.name and any(r.target == doc.name for r in refs)
        ]

    async def list_forward_references(self, doc: DocumentRef) -> Sequence[RawReference]:
        if doc.name in self.broken_forward:
            raise ResolutionError(f"metadata unavailable for {doc.path}")
        return list(self.references.get(doc.name, []))

    async def resolve_reference(self, raw: RawReference, context_doc: DocumentRef) -> Optional[DocumentRef]:
        if raw.target in self.broken_targets:
            raise ResolutionError(f"resolver crashed on {raw.target}")
        if raw.target in self.contents:
            return self.doc(raw.target)
        return None


@pytest.fixture
def graph() -> InMemoryGraph:
    """Provide an empty in-memory graph."""
    return InMemoryGraph()


# -----------------------------------------------------------------------------
# On-Disk Vault
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_vault(tmp_path: Path) -> Path:
    """
    Create a small Obsidian-style vault.

    Structure:
    /vault
      Home.md          -> [[Projects/Alpha]], ![[Diagram]], [Readme](docs/Readme.md)
      Diagram.md
      Projects/Alpha.md -> [[Home]], [[Beta|the beta]]
      Projects/Beta.md  -> [[Alpha#Goals]]
      docs/Readme.md
      Journal.md        -> [[Home]], [[Missing]], https link
      Templates/Meeting.md
      .obsidian/app.md  (hidden, ignored)
    """
    root = tmp_path / "vault"
    (root / "Projects").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "Templates").mkdir()
    (root / ".obsidian").mkdir()

    (root / "Home.md").write_text(
        "Welcome. See [[Projects/Alpha]].\n![[Diagram]]\nMore in [Readme](docs/Readme.md).",
        encoding="utf-8",
    )
    (root / "Diagram.md").write_text("A diagram.", encoding="utf-8")
    (root / "Projects" / "Alpha.md").write_text("Alpha links [[Home]] and [[Beta|the beta]].", encoding="utf-8")
    (root / "Projects" / "Beta.md").write_text("Beta refers to [[Alpha#Goals]].", encoding="utf-8")
    (root / "docs" / "Readme.md").write_text("Readme body.", encoding="utf-8")
    (root / "Journal.md").write_text(
        "Today: [[Home]], [[Missing]] and [site](https://example.com/page.md).",
        encoding="utf-8",
    )
    (root / "Templates" / "Meeting.md").write_text("## Agenda\n## Notes", encoding="utf-8")
    (root / ".obsidian" / "app.md").write_text("[[Home]]", encoding="utf-8")
    return root


# -----------------------------------------------------------------------------
# Environment Isolation
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_user_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the user data directory (config, logs) into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home))
    return home
