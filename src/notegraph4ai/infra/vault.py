from __future__ import annotations

"""
Filesystem Vault Adapter.

Implements the DocumentStore and LinkIndex collaborators over a directory
of Markdown notes (an Obsidian-style vault). This is the only place where
link syntax is parsed:

- wikilinks: [[Note]], [[Note|alias]], [[Note#Heading]], [[folder/Note]]
- wiki embeds: ![[Note]]
- Markdown links and embeds to local files: [text](Note.md), ![alt](img/Note.md)

Blocking file I/O runs in worker threads via asyncio.to_thread.
"""

import asyncio
import logging
import os
import posixpath
import re
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
from urllib.parse import unquote

from notegraph4ai.domain.constants import DEFAULT_EXTENSIONS
from notegraph4ai.domain.errors import ReadError, ResolutionError
from notegraph4ai.domain.graph_models import DocumentRef, RawReference

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# LINK SYNTAX
# -----------------------------------------------------------------------------

_WIKILINK_RX = re.compile(r"(!?)\[\[([^\[\]\n]+?)\]\]")
_MDLINK_RX = re.compile(
    r"(!?)\[[^\[\]\n]*\]\(\s*(?:<([^>\n]+)>|([^)\s]+))(?:\s+\"[^\"]*\")?\s*\)"
)
_SCHEME_RX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

# Code is not scanned for links. An unclosed fence runs to the end of the text.
_FENCE_RX = re.compile(r"^ {0,3}((`|~)\2{2,})[^\n]*$.*?(?:^ {0,3}\1\2*[ \t]*$|\Z)", re.MULTILINE | re.DOTALL)
_INLINE_CODE_RX = re.compile(r"(?<!`)(`+)(?!`)((?:(?!\n[ \t]*\n).)+?)(?<!`)\1(?!`)", re.DOTALL)
_NON_NEWLINE_RX = re.compile(r"[^\n]")


def _blank(match: re.Match) -> str:
    return _NON_NEWLINE_RX.sub(" ", match.group(0))


def mask_code(text: str) -> str:
    """
    Blank out fenced code blocks and inline code spans.

    The result has the same length and line breaks as the input, so match
    offsets in it are offsets in the original text.
    """
    return _INLINE_CODE_RX.sub(_blank, _FENCE_RX.sub(_blank, text))


def parse_references(text: str) -> List[RawReference]:
    """
    Extract wikilinks and local Markdown links in document order.

    Link syntax inside code blocks and inline code is ignored.

    Args:
        text: Markdown source.

    Returns:
        List[RawReference]: One entry per reference occurrence.
    """
    scan = mask_code(text)
    found: List[Tuple[int, RawReference]] = []

    for m in _WIKILINK_RX.finditer(scan):
        inner = m.group(2).split("|", 1)[0]
        target = inner.split("#", 1)[0].strip()
        kind = "embed" if m.group(1) else "link"
        found.append((m.start(), RawReference(target=target, kind=kind, raw=text[m.start():m.end()])))

    for m in _MDLINK_RX.finditer(scan):
        href = m.group(2) or m.group(3)
        if _SCHEME_RX.match(href):
            continue
        target = unquote(href.split("#", 1)[0]).strip()
        kind = "embed" if m.group(1) else "link"
        found.append((m.start(), RawReference(target=target, kind=kind, raw=text[m.start():m.end()])))

    found.sort(key=lambda item: item[0])
    return [ref for _, ref in found]

# -----------------------------------------------------------------------------
# VAULT
# -----------------------------------------------------------------------------

class FilesystemVault:
    """
    Markdown vault rooted at a directory.

    Document identifiers are POSIX paths relative to the vault root. The
    document listing and the reverse (backlink) index are built lazily, once
    per vault instance.
    """

    def __init__(self, root_dir: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        """
        Args:
            root_dir: Vault directory.
            extensions: File extensions treated as documents.
        """
        self.root_dir = os.path.abspath(root_dir)
        self.extensions: Tuple[str, ...] = tuple(e.lower() for e in extensions)
        self._documents: Optional[Dict[str, DocumentRef]] = None
        self._backlinks: Optional[Dict[str, List[DocumentRef]]] = None

    # --- DocumentStore -------------------------------------------------------

    async def read_content(self, doc: DocumentRef) -> str:
        return await asyncio.to_thread(self._read_text, doc, ReadError)

    async def list_documents(self) -> Sequence[DocumentRef]:
        docs = await asyncio.to_thread(self._get_documents)
        return list(docs.values())

    # --- LinkIndex -----------------------------------------------------------

    async def list_backlinks(self, doc: DocumentRef) -> Sequence[DocumentRef]:
        reverse = await asyncio.to_thread(self._get_backlink_index)
        return list(reverse.get(doc.path, []))

    async def list_forward_references(self, doc: DocumentRef) -> Sequence[RawReference]:
        text = await asyncio.to_thread(self._read_text, doc, ResolutionError)
        return parse_references(text)

    async def resolve_reference(
            self,
            raw: RawReference,
            context_doc: DocumentRef,
    ) -> Optional[DocumentRef]:
        return await asyncio.to_thread(self.resolve_target, raw.target, context_doc.path)

    # --- Lookup --------------------------------------------------------------

    def get_document(self, key: str) -> Optional[DocumentRef]:
        """
        Find a document by relative path or by link-style name.

        Args:
            key: 'folder/Note.md', 'folder/Note' or 'Note'.

        Returns:
            Optional[DocumentRef]: The document, or None.
        """
        return self.resolve_target(key, "")

    def resolve_target(self, target: str, context_path: str) -> Optional[DocumentRef]:
        """
        Resolve a link target the way a vault does.

        Order: relative to the context document's folder, relative to the
        vault root, then by path suffix (case-insensitive) preferring the
        shortest, then alphabetically first, path.
        """
        target = target.strip().replace("\\", "/").lstrip("/")
        if not target:
            return None

        docs = self._get_documents()
        context_dir = posixpath.dirname(context_path)

        for base in (context_dir, ""):
            candidate = posixpath.normpath(posixpath.join(base, target))
            if candidate.startswith(".."):
                continue
            for path in self._with_extensions(candidate):
                if path in docs:
                    return docs[path]

        wanted = self._strip_extension(target).lower()
        matches = [
            doc for path, doc in docs.items()
            if self._suffix_matches(self._strip_extension(path).lower(), wanted)
        ]
        if not matches:
            return None
        matches.sort(key=lambda d: (len(d.path), d.path))
        return matches[0]

    # --- Internal helpers ----------------------------------------------------

    def _get_documents(self) -> Dict[str, DocumentRef]:
        if self._documents is None:
            self._documents = self._scan()
            logger.debug(f"Vault scan found {len(self._documents)} documents in {self.root_dir}")
        return self._documents

    def _scan(self) -> Dict[str, DocumentRef]:
        documents: Dict[str, DocumentRef] = {}
        for root, dirs, files in os.walk(self.root_dir):
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            for file_name in sorted(files):
                if os.path.splitext(file_name)[1].lower() not in self.extensions:
                    continue
                full = os.path.join(root, file_name)
                rel = os.path.relpath(full, self.root_dir).replace(os.sep, "/")
                documents[rel] = DocumentRef(path=rel)
        return documents

    def _get_backlink_index(self) -> Dict[str, List[DocumentRef]]:
        if self._backlinks is not None:
            return self._backlinks

        docs = self._get_documents()
        reverse: Dict[str, Set[str]] = {}
        for source in docs.values():
            try:
                text = self._read_text(source, ResolutionError)
            except ResolutionError as e:
                logger.warning(f"Backlink index skips {source.path}: {e}")
                continue
            for ref in parse_references(text):
                target = self.resolve_target(ref.target, source.path)
                if target is None or target.path == source.path:
                    continue
                reverse.setdefault(target.path, set()).add(source.path)

        self._backlinks = {
            target: [docs[p] for p in sorted(sources)]
            for target, sources in reverse.items()
        }
        return self._backlinks

    def _read_text(self, doc: DocumentRef, error_cls: type) -> str:
        full = os.path.join(self.root_dir, *doc.path.split("/"))
        try:
            with open(full, "r", encoding="utf-8", errors="replace") as f:
                return f.read()
        except OSError as e:
            raise error_cls(f"Cannot read '{doc.path}': {e}", path=doc.path) from e

    def _with_extensions(self, path: str) -> List[str]:
        if os.path.splitext(path)[1].lower() in self.extensions:
            return [path]
        return [path] + [path + ext for ext in self.extensions]

    def _strip_extension(self, path: str) -> str:
        stem, ext = os.path.splitext(path)
        return stem if ext.lower() in self.extensions else path

    @staticmethod
    def _suffix_matches(candidate: str, wanted: str) -> bool:
        return candidate == wanted or candidate.endswith("/" + wanted)
