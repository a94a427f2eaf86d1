"""Core Note dataclass."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from garden.wikilink import Wikilink


@dataclass(frozen=True)
class Note:
    """A single markdown note, as ingested from the vault."""

    title: str
    #: Note text with the frontmatter block removed
    body: str
    #: Frontmatter tags followed by inline #tags, duplicates kept
    tags: tuple[str, ...] = ()
    #: Outbound [[WikiLinks]] in order of appearance
    links: tuple[Wikilink, ...] = ()
    #: Read-only view of the frontmatter; not part of the hash
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def embeds(self) -> tuple[Wikilink, ...]:
        """Only the ``![[...]]`` transclusions."""
        return tuple(link for link in self.links if link.embedded)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "body": self.body,
            "tags": list(self.tags),
            "links": [link.to_dict() for link in self.links],
            "metadata": dict(self.metadata),
        }
