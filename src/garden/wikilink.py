"""Wikilink values and the token scanner that recognises them.

The scanner never looks at raw markdown.  It is fed the literal text units
produced by the tokenizer in :mod:`garden.parser`, where brackets always
arrive as their own tokens::

    "[" "[" "Page|Label" "]" "]"   ->  Wikilink("Page", "Label")
    "![" "[" "photo.png" "]" "]"   ->  Wikilink("photo.png", embedded=True)
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Wikilink:
    """A ``[[target]]``, ``[[target|label]]`` or ``![[target]]`` reference."""

    target: str
    label: str | None = None
    #: Transclusion (``![[...]]``) rather than a hyperlink
    embedded: bool = False

    def __str__(self) -> str:
        if self.embedded:
            return f"![[{self.target}]]"
        if self.label is not None:
            return f"[[{self.target}|{self.label}]]"
        return f"[[{self.target}]]"

    @classmethod
    def from_text(cls, text: str) -> "Wikilink":
        """Build a hyperlink from the inner text, splitting on the first ``|``."""
        target, sep, label = text.partition("|")
        return cls(target=target, label=label if sep else None)

    def to_dict(self) -> dict[str, object]:
        return {"target": self.target, "label": self.label, "embedded": self.embedded}


class State(enum.Enum):
    IDLE = enum.auto()
    SAW_FIRST_OPEN = enum.auto()
    SAW_SECOND_OPEN = enum.auto()
    IN_TARGET = enum.auto()
    SAW_FIRST_CLOSE = enum.auto()


class WikilinkScanner:
    """Finite-state machine over text tokens with one token of lookback.

    Any token that breaks the two-open / text / two-close pattern silently
    drops the pending link and returns the scanner to :attr:`State.IDLE`.
    """

    def __init__(self) -> None:
        self.state = State.IDLE
        self._pending: Wikilink | None = None
        self._embedded = False

    def feed(self, token: str) -> Wikilink | None:
        """Consume one token; return a link when it completes one."""
        match (self.state, token):
            case (State.IDLE, "!["):
                self._start(embedded=True)
            case (State.IDLE, "["):
                self._start(embedded=False)
            case (State.SAW_FIRST_OPEN, "["):
                self.state = State.SAW_SECOND_OPEN
            case (State.SAW_SECOND_OPEN, text):
                if self._embedded:
                    self._pending = Wikilink(target=text, embedded=True)
                else:
                    self._pending = Wikilink.from_text(text)
                self.state = State.IN_TARGET
            case (State.IN_TARGET, "]"):
                self.state = State.SAW_FIRST_CLOSE
            case (State.SAW_FIRST_CLOSE, "]"):
                link = self._pending
                self.reset()
                return link
            case _:
                self.reset()
        return None

    def scan(self, tokens: Iterable[str]) -> Iterator[Wikilink]:
        """Feed every token in turn, yielding links in order of appearance."""
        for token in tokens:
            link = self.feed(token)
            if link is not None:
                yield link

    def reset(self) -> None:
        self.state = State.IDLE
        self._pending = None
        self._embedded = False

    def _start(self, embedded: bool) -> None:
        self.state = State.SAW_FIRST_OPEN
        self._pending = None
        self._embedded = embedded
