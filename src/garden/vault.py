"""Vault: every note and embedded file under a directory, plus the link graph."""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import networkx as nx

from garden.graph import local_graph
from garden.note import Note
from garden.parser import NoteError, read_note
from garden.paths import Absolute, ItemPath, from_relative_path
from garden.resolve import resolve_link

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# File classification
# ---------------------------------------------------------------------------


class FileKind(enum.Enum):
    NOTE = "note"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    PDF = "pdf"


# Case-sensitive; checked in this order
_SUFFIXES: dict[FileKind, tuple[str, ...]] = {
    FileKind.NOTE: (".md",),
    FileKind.IMAGE: (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".webp", ".avif"),
    FileKind.AUDIO: (".mp3", ".wav", ".m4a", ".ogg", ".3gp", ".flac"),
    FileKind.VIDEO: (".mp4", ".webm", ".ogv", ".mov", ".mkv"),
    FileKind.PDF: (".pdf",),
}


def classify(name: str) -> FileKind | None:
    """Return the kind of file *name* is, or ``None`` if the vault ignores it."""
    for kind, suffixes in _SUFFIXES.items():
        if name.endswith(suffixes):
            return kind
    return None


@dataclass(frozen=True)
class EmbeddedFile:
    """A non-note file that notes can transclude with ``![[...]]``."""

    path: Path
    kind: FileKind


@dataclass(frozen=True)
class _NoteItem:
    note: Note
    node: int


# ---------------------------------------------------------------------------
# Vault
# ---------------------------------------------------------------------------


class Vault:
    """Read-only result of :meth:`VaultBuilder.build`."""

    def __init__(
        self,
        items: dict[ItemPath, _NoteItem],
        files: dict[ItemPath, EmbeddedFile],
        graph: nx.DiGraph,
    ) -> None:
        self._items = items
        self._graph = graph
        self.notes: Mapping[ItemPath, Note] = MappingProxyType(
            {path: item.note for path, item in items.items()}
        )
        self.files: Mapping[ItemPath, EmbeddedFile] = MappingProxyType(files)

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def __iter__(self) -> Iterator[ItemPath]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_note(self, path: ItemPath) -> Note | None:
        item = self._items.get(path)
        return item.note if item is not None else None

    def paths(self) -> list[ItemPath]:
        """All note paths, sorted."""
        return sorted(self._items)

    def resolve_link(self, target: str) -> ItemPath | None:
        """Path of the note a ``[[target]]`` points at, if it is in the vault."""
        found = resolve_link(target, self._items)
        return found[0] if found is not None else None

    def resolve_embed(self, target: str) -> tuple[ItemPath, EmbeddedFile] | None:
        """The file a ``![[target]]`` transcludes, if it is in the vault."""
        return resolve_link(target, self.files)

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def _path_of(self, node: int) -> ItemPath:
        return self._graph.nodes[node]["path"]

    def links_from(self, path: ItemPath) -> list[ItemPath]:
        """Notes that *path* links to (resolved, one entry per target)."""
        item = self._items.get(path)
        if item is None:
            return []
        return [self._path_of(node) for node in self._graph.successors(item.node)]

    def backlinks(self, path: ItemPath) -> list[ItemPath]:
        """Notes that link to *path*, sorted."""
        item = self._items.get(path)
        if item is None:
            return []
        return sorted(self._path_of(node) for node in self._graph.predecessors(item.node))

    def edges(self) -> list[tuple[ItemPath, ItemPath]]:
        """Return ``(source, target)`` pairs for every resolved wikilink."""
        return [(self._path_of(src), self._path_of(tgt)) for src, tgt in self._graph.edges()]

    def local_graph(self, path: ItemPath, max_depth: int) -> nx.DiGraph | None:
        return local_graph(self, path, max_depth)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def tags(self) -> dict[str, list[ItemPath]]:
        """Map every tag to the sorted paths of the notes carrying it."""
        result: dict[str, list[ItemPath]] = {}
        for path in self.paths():
            for tag in self._items[path].note.tags:
                result.setdefault(tag, [])
                if path not in result[tag]:
                    result[tag].append(path)
        return result

    def notes_with_tag(self, tag: str) -> list[ItemPath]:
        return [path for path in self.paths() if tag in self._items[path].note.tags]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class VaultBuilder:
    """Scans a vault directory and builds the note index and link graph."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        self.tags: set[str] | None = None

    def filter_tags(self, tags: Iterable[str]) -> "VaultBuilder":
        """Only keep notes carrying at least one of *tags*."""
        self.tags = set(tags)
        return self

    def build(self) -> Vault:
        notes: dict[Absolute, Note] = {}
        files: dict[ItemPath, EmbeddedFile] = {}

        for path in self._walk():
            kind = classify(path.name)
            if kind is None:
                continue
            relative = path.relative_to(self.directory)
            if kind is FileKind.NOTE:
                note = self._ingest(path)
                if note is not None:
                    notes[from_relative_path(relative)] = note
            else:
                files[from_relative_path(relative, strip_extension=False)] = EmbeddedFile(path, kind)

        graph = nx.DiGraph()
        items: dict[ItemPath, _NoteItem] = {}
        for node, (item_path, note) in enumerate(notes.items()):
            graph.add_node(node, path=item_path)
            items[item_path] = _NoteItem(note, node)

        for item_path, item in items.items():
            for link in item.note.links:
                if link.embedded:
                    continue
                found = resolve_link(link.target, items)
                if found is None:
                    log.debug("Unresolved link %s in %s", link, item_path)
                    continue
                target = found[1].node
                if graph.has_edge(item.node, target):
                    graph[item.node][target]["count"] += 1
                else:
                    graph.add_edge(item.node, target, count=1)

        log.info(
            "Built vault from %s: %d notes, %d files, %d links",
            self.directory,
            len(items),
            len(files),
            graph.number_of_edges(),
        )
        return Vault(items, files, nx.freeze(graph))

    def _walk(self) -> Iterator[Path]:
        for dirpath, _dirnames, filenames in os.walk(self.directory, onerror=self._on_walk_error):
            for name in filenames:
                path = Path(dirpath) / name
                if path.is_file() and not path.is_symlink():
                    yield path

    @staticmethod
    def _on_walk_error(err: OSError) -> None:
        log.warning("Unable to read %s: %s", err.filename, err.strerror or err)

    def _ingest(self, path: Path) -> Note | None:
        try:
            note = read_note(path)
        except NoteError as exc:
            log.warning("Unable to parse %s", exc)
            return None
        if self.tags is not None and not self.tags.intersection(note.tags):
            log.debug("Skipping %s: no tag in %s", path, sorted(self.tags))
            return None
        return note
