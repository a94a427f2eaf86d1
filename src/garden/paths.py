"""Canonical item paths used as keys for notes and embedded files.

An :data:`ItemPath` is one of two variants:

* :class:`Absolute` -- the full vault-relative location as a tuple of
  segments, e.g. ``Absolute(("projects", "garden"))``.
* :class:`FileName` -- a bare name with no directory part, as written in a
  ``[[garden]]`` link.  It only exists on the lookup side and is matched
  against the last segment of absolute keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Union


@dataclass(frozen=True)
class Absolute:
    segments: tuple[str, ...]

    def __str__(self) -> str:
        return "/".join(self.segments)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, (Absolute, FileName)):
            return NotImplemented
        return sort_key(self) < sort_key(other)


@dataclass(frozen=True)
class FileName:
    name: str

    def __str__(self) -> str:
        return self.name

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, (Absolute, FileName)):
            return NotImplemented
        return sort_key(self) < sort_key(other)


ItemPath = Union[Absolute, FileName]


def sort_key(path: ItemPath) -> tuple[int, tuple[str, ...]]:
    """Total order: absolute paths first, then bare names, each lexicographic."""
    match path:
        case Absolute(segments):
            return (0, segments)
        case FileName(name):
            return (1, (name,))
    raise TypeError(f"not an item path: {path!r}")


def from_relative_path(path: PurePath | str, strip_extension: bool = True) -> Absolute:
    """Build the key of a file found at *path* (relative to the vault root).

    Notes drop their extension (``a/b.md`` -> ``a/b``); embedded files keep
    it (``img/c.png`` -> ``img/c.png``).
    """
    path = PurePath(path)
    leaf = path.stem if strip_extension else path.name
    return Absolute(tuple(path.parent.parts) + (leaf,))


def from_string(value: str) -> ItemPath:
    """Parse a link target; anything containing ``/`` is absolute."""
    if "/" in value:
        return Absolute(tuple(value.split("/")))
    return FileName(value)
