"""Note ingestion: YAML frontmatter, body tokens, wikilinks and tags."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml
from markdown_it import MarkdownIt

from garden.note import Note
from garden.wikilink import Wikilink, WikilinkScanner

# Opening and closing line of a frontmatter block
_MARKER = "---"
# Bracket tokens the wikilink scanner reacts to
_BRACKET_RE = re.compile(r"(!\[|\[|\])")
# Inline #tags: letters, digits, "_", "-" and "/" after the hash
_TAG_RE = re.compile(r"#([\w/-]+)")

_MD = MarkdownIt("commonmark")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class NoteError(Exception):
    """Raised when a note cannot be ingested."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class NoteReadError(NoteError):
    """The file could not be read as UTF-8 text."""


class FrontmatterError(NoteError):
    """The frontmatter block is unusable."""


class FrontmatterSyntaxError(FrontmatterError):
    """The frontmatter block is not valid YAML."""


class FrontmatterKeyError(FrontmatterError):
    """The frontmatter is not a mapping, or a mapping key is not a string."""


# ---------------------------------------------------------------------------
# Frontmatter
# ---------------------------------------------------------------------------


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that insists on unique string keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[str] = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=True)
            if not isinstance(key, str):
                raise FrontmatterKeyError(f"mapping key {key!r} is not a string")
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


# YAML 1.2 core scalars: dates and times stay plain strings, and only
# true/false (not yes/no/on/off) are booleans
_DROPPED_RESOLVERS = {"tag:yaml.org,2002:timestamp", "tag:yaml.org,2002:bool"}

_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _DROPPED_RESOLVERS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_FrontmatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def split_frontmatter(content: str) -> tuple[str | None, str]:
    """Return ``(yaml_block, body)``.

    The block is only recognised when the very first line is ``---`` and a
    later line is ``---`` as well; otherwise ``yaml_block`` is ``None`` and
    the whole input is the body.
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != _MARKER:
        return None, content
    for i in range(1, len(lines)):
        if lines[i].rstrip("\r\n") == _MARKER:
            return "".join(lines[1:i]), "".join(lines[i + 1 :])
    return None, content


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split YAML front-matter from body text.

    Returns ``(metadata, body)``; ``metadata`` is empty when there is no
    front-matter block.

    Raises :class:`FrontmatterSyntaxError` for malformed YAML and
    :class:`FrontmatterKeyError` when the block is not a mapping of string
    keys.
    """
    block, body = split_frontmatter(content)
    if block is None:
        return {}, body
    try:
        data = yaml.load(block, Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterSyntaxError(f"invalid YAML in frontmatter: {exc}") from exc
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise FrontmatterKeyError(f"frontmatter is a {type(data).__name__}, not a mapping")
    return data, body


def frontmatter_tags(metadata: dict[str, Any]) -> list[str]:
    """Tags declared in frontmatter: comma-separated ``tag`` first, then the ``tags`` list."""
    tags: list[str] = []
    tag = metadata.get("tag")
    if isinstance(tag, str):
        tags.extend(t.strip() for t in tag.split(",") if t.strip())
    tag_list = metadata.get("tags")
    if isinstance(tag_list, list):
        tags.extend(t for t in tag_list if isinstance(t, str))
    return tags


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def tokenize(body: str) -> Iterator[str]:
    """Yield the plain-text units of a markdown body.

    Code spans, code blocks and raw HTML are skipped.  Brackets are split
    out as separate tokens, so ``"see [[a|b]]"`` yields
    ``"see ", "[", "[", "a|b", "]", "]"``.
    """
    for block in _MD.parse(body):
        if block.type != "inline" or not block.children:
            continue
        for child in block.children:
            if child.type != "text":
                continue
            for piece in _BRACKET_RE.split(child.content):
                if piece:
                    yield piece


def parse_tags(text: str) -> list[str]:
    """Return every ``#tag`` in *text*, in order, duplicates included."""
    return [m.group(1) for m in _TAG_RE.finditer(text)]


def parse_wikilinks(text: str) -> list[Wikilink]:
    """Return all wikilinks found in markdown *text* (ordered, not de-duped)."""
    return list(WikilinkScanner().scan(tokenize(text)))


def parse_note(title: str, content: str) -> Note:
    """Parse raw note *content* into a :class:`Note`."""
    metadata, body = parse_frontmatter(content)

    tags = frontmatter_tags(metadata)
    links: list[Wikilink] = []
    scanner = WikilinkScanner()
    for token in tokenize(body):
        link = scanner.feed(token)
        if link is not None:
            links.append(link)
        tags.extend(parse_tags(token))

    return Note(
        title=title,
        body=body,
        tags=tuple(tags),
        links=tuple(links),
        metadata=metadata,
    )


def read_note(path: Path) -> Note:
    """Read a ``.md`` file and return a fully-populated :class:`Note`.

    The title is the filename stem.  Errors carry *path*.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise NoteReadError(f"unable to read note: {exc}", path) from exc
    try:
        return parse_note(path.stem, content)
    except NoteError as exc:
        exc.path = path
        raise
