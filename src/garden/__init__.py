"""Garden: knowledge graph over a vault of interlinked markdown notes."""

from garden._logging import configure_logging
from garden.config import Settings, build_vault
from garden.graph import graph_to_dict, local_graph
from garden.note import Note
from garden.parser import (
    FrontmatterError,
    FrontmatterKeyError,
    FrontmatterSyntaxError,
    NoteError,
    NoteReadError,
    parse_note,
    parse_wikilinks,
    read_note,
)
from garden.paths import Absolute, FileName, ItemPath
from garden.resolve import resolve_link
from garden.vault import EmbeddedFile, FileKind, Vault, VaultBuilder
from garden.wikilink import Wikilink, WikilinkScanner

__all__ = [
    "Absolute",
    "EmbeddedFile",
    "FileKind",
    "FileName",
    "FrontmatterError",
    "FrontmatterKeyError",
    "FrontmatterSyntaxError",
    "ItemPath",
    "Note",
    "NoteError",
    "NoteReadError",
    "Settings",
    "Vault",
    "VaultBuilder",
    "Wikilink",
    "WikilinkScanner",
    "build_vault",
    "configure_logging",
    "graph_to_dict",
    "local_graph",
    "parse_note",
    "parse_wikilinks",
    "read_note",
    "resolve_link",
]
