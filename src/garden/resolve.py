"""Resolve wikilink targets against an index keyed by :data:`ItemPath`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from garden.paths import Absolute, FileName, ItemPath, from_string

T = TypeVar("T")


def resolve_link(target: str, index: Mapping[ItemPath, T]) -> tuple[ItemPath, T] | None:
    """Look *target* up in *index*.

    ``a/b`` must match a key exactly.  A bare ``b`` matches the first
    absolute key whose last segment is ``b``, in the index's own iteration
    order; when several keys share that name which one wins is not
    specified.  Returns ``None`` when nothing matches.
    """
    match from_string(target):
        case Absolute() as path:
            if path in index:
                return path, index[path]
            return None
        case FileName(name):
            for key, value in index.items():
                match key:
                    case Absolute(segments) if segments and segments[-1] == name:
                        return key, value
            return None
        case other:
            raise TypeError(f"not an item path: {other!r}")
