"""Unit tests for garden.parser."""

import textwrap
from pathlib import Path

import pytest

from garden.parser import (
    FrontmatterKeyError,
    FrontmatterSyntaxError,
    NoteReadError,
    frontmatter_tags,
    parse_frontmatter,
    parse_note,
    parse_tags,
    parse_wikilinks,
    read_note,
    tokenize,
)
from garden.wikilink import Wikilink

# ---------------------------------------------------------------------------
# parse_frontmatter
# ---------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_no_frontmatter_returns_empty_dict(self):
        meta, body = parse_frontmatter("Just some text.")
        assert meta == {}
        assert body == "Just some text."

    def test_basic_frontmatter(self):
        raw = textwrap.dedent("""\
            ---
            key1: value1
            tags:
              - t1
              - t2
            ---
            Body here.
        """)
        meta, body = parse_frontmatter(raw)
        assert meta == {"key1": "value1", "tags": ["t1", "t2"]}
        assert body == "Body here.\n"

    def test_all_supported_value_types(self):
        raw = textwrap.dedent("""\
            ---
            nothing: null
            flag: true
            count: 3
            ratio: 1.5
            name: text
            items: [1, two, false]
            nested:
              inner: value
              deeper: {x: [a, b]}
            ---
        """)
        meta, body = parse_frontmatter(raw)
        assert meta == {
            "nothing": None,
            "flag": True,
            "count": 3,
            "ratio": 1.5,
            "name": "text",
            "items": [1, "two", False],
            "nested": {"inner": "value", "deeper": {"x": ["a", "b"]}},
        }
        assert body == ""

    def test_dates_stay_strings(self):
        meta, _ = parse_frontmatter("---\ncreated: 2023-01-01\n---\n")
        assert meta == {"created": "2023-01-01"}

    def test_yaml_11_bool_words_stay_strings(self):
        raw = "---\npublished: yes\ndraft: off\nanswer: No\n---\n"
        meta, _ = parse_frontmatter(raw)
        assert meta == {"published": "yes", "draft": "off", "answer": "No"}

    @pytest.mark.parametrize("key", ["on", "off", "yes", "no", "y", "n"])
    def test_yaml_11_bool_words_are_string_keys(self, key):
        meta, _ = parse_frontmatter(f"---\n{key}: x\n---\n")
        assert meta == {key: "x"}

    def test_bool_spellings(self):
        meta, _ = parse_frontmatter("---\na: True\nb: FALSE\nc: false\n---\n")
        assert meta == {"a": True, "b": False, "c": False}

    def test_frontmatter_not_at_start_is_ignored(self):
        raw = "Intro\n---\ntitle: Nope\n---\nMore text."
        meta, body = parse_frontmatter(raw)
        assert meta == {}
        assert body == raw

    def test_unclosed_block_is_body(self):
        raw = "---\ntitle: Nope\nMore text."
        meta, body = parse_frontmatter(raw)
        assert meta == {}
        assert body == raw

    def test_marker_must_be_whole_line(self):
        raw = "--- title\nkey: v\n---\nBody."
        meta, body = parse_frontmatter(raw)
        assert meta == {}
        assert body == raw

    def test_empty_frontmatter_block(self):
        meta, body = parse_frontmatter("---\n---\nBody.")
        assert meta == {}
        assert body == "Body."

    def test_invalid_yaml_raises(self):
        with pytest.raises(FrontmatterSyntaxError):
            parse_frontmatter("---\nkey: [unclosed\n---\nBody.")

    def test_duplicate_key_raises(self):
        with pytest.raises(FrontmatterSyntaxError):
            parse_frontmatter("---\nkey1: value1\nkey1: value1\n---\n")

    def test_non_string_key_raises(self):
        with pytest.raises(FrontmatterKeyError):
            parse_frontmatter("---\n42: oops\n---\n")

    def test_nested_non_string_key_raises(self):
        with pytest.raises(FrontmatterKeyError):
            parse_frontmatter("---\nouter:\n  1: oops\n---\n")

    def test_not_a_mapping_raises(self):
        with pytest.raises(FrontmatterKeyError):
            parse_frontmatter("---\n- a\n- b\n---\n")


class TestFrontmatterTags:
    def test_comma_separated_tag(self):
        assert frontmatter_tags({"tag": "a, b ,c"}) == ["a", "b", "c"]

    def test_empty_tag_pieces_dropped(self):
        assert frontmatter_tags({"tag": "a, ,b"}) == ["a", "b"]
        assert frontmatter_tags({"tag": "a,,b,"}) == ["a", "b"]

    def test_tags_list_keeps_only_strings(self):
        assert frontmatter_tags({"tags": ["x", 1, None, "y"]}) == ["x", "y"]

    def test_tag_before_tags(self):
        assert frontmatter_tags({"tags": ["z"], "tag": "a"}) == ["a", "z"]

    def test_scalar_tags_field_ignored(self):
        assert frontmatter_tags({"tags": "not-a-list"}) == []


# ---------------------------------------------------------------------------
# tokenize / parse_tags / parse_wikilinks
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_brackets_are_split_out(self):
        assert list(tokenize("see [[a|b]] now")) == ["see ", "[", "[", "a|b", "]", "]", " now"]

    def test_embed_opener_is_one_token(self):
        assert list(tokenize("![[a.png]]")) == ["![", "[", "a.png", "]", "]"]

    def test_code_span_skipped(self):
        assert "#include" not in "".join(tokenize("Use `#include` here."))

    def test_fenced_code_skipped(self):
        body = "Text.\n\n```\n[[hidden]] #hidden\n```\n"
        assert list(tokenize(body)) == ["Text."]


class TestParseTags:
    def test_trailing_bare_hash(self):
        assert parse_tags("#foo and #bar/baz and #") == ["foo", "bar/baz"]

    def test_bare_hash_gives_nothing(self):
        assert parse_tags("#") == []
        assert parse_tags("# and #") == []

    def test_terminated_by_punctuation(self):
        assert parse_tags("(#one), #two.") == ["one", "two"]

    def test_adjacent_tags(self):
        assert parse_tags("#a#b") == ["a", "b"]

    def test_duplicates_kept(self):
        assert parse_tags("#python code in #python style") == ["python", "python"]

    def test_dash_and_underscore(self):
        assert parse_tags("#open-source #snake_case") == ["open-source", "snake_case"]


class TestParseWikilinks:
    def test_multiple_links_in_order(self):
        links = parse_wikilinks("[[Z]] then [[A]] then [[M]]")
        assert links == [Wikilink("Z"), Wikilink("A"), Wikilink("M")]

    def test_duplicates_kept(self):
        assert parse_wikilinks("[[A]] then [[A]] again") == [Wikilink("A"), Wikilink("A")]

    def test_single_brackets_ignored(self):
        assert parse_wikilinks("A [single] bracket and [[real]].") == [Wikilink("real")]

    def test_no_links(self):
        assert parse_wikilinks("Plain text, no links.") == []


# ---------------------------------------------------------------------------
# parse_note / read_note
# ---------------------------------------------------------------------------

EXAMPLE = """\
---
category: Example
published: true
---
#example

Example content. With #test tag inside.

## Heading 2

[[Page Name|Link label]]

This is a [[WikiLink]]. And this is a [Markdown Link](https://example.com)

Inline `let a = 2 + 2;` example

#code/rust

```rust
fn main () {
    println!("ok");
}
```"""


class TestParseNote:
    def test_full_note(self):
        note = parse_note("Example", EXAMPLE)
        assert note.title == "Example"
        assert note.body.startswith("#example\n")
        assert "category" not in note.body
        assert note.tags == ("example", "test", "code/rust")
        assert note.links == (
            Wikilink("Page Name", "Link label"),
            Wikilink("WikiLink"),
        )
        assert note.metadata == {"category": "Example", "published": True}

    def test_frontmatter_tags_come_first_and_are_not_deduplicated(self):
        raw = "---\ntag: a, b\ntags:\n  - c\n  - a\n---\n#e and #a\n"
        note = parse_note("t", raw)
        assert note.tags == ("a", "b", "c", "a", "e", "a")

    def test_embeds(self):
        note = parse_note("t", "![[pic.png]] and [[other]]")
        assert note.links == (Wikilink("pic.png", embedded=True), Wikilink("other"))
        assert note.embeds == (Wikilink("pic.png", embedded=True),)

    def test_no_frontmatter(self):
        note = parse_note("simple", "# Simple\nJust text.\n")
        assert note.metadata == {}
        assert note.links == ()
        assert note.tags == ()

    def test_to_dict(self):
        note = parse_note("t", "---\ntags: [x]\n---\nSee [[a|A]].\n")
        assert note.to_dict() == {
            "title": "t",
            "body": "See [[a|A]].\n",
            "tags": ["x"],
            "links": [{"target": "a", "label": "A", "embedded": False}],
            "metadata": {"tags": ["x"]},
        }

    def test_note_is_hashable(self):
        first = parse_note("t", "---\ncategory: x\n---\n#a [[b]]\n")
        second = parse_note("t", "---\ncategory: x\n---\n#a [[b]]\n")
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_metadata_is_read_only(self):
        note = parse_note("t", "---\ncategory: x\n---\nBody.\n")
        with pytest.raises(TypeError):
            note.metadata["category"] = "y"
        assert note.metadata == {"category": "x"}

    def test_bad_frontmatter_raises(self):
        with pytest.raises(FrontmatterSyntaxError):
            parse_note("t", "---\nkey: [unclosed\n---\nBody.")


class TestReadNote:
    def test_title_is_file_stem(self, tmp_path: Path):
        md = tmp_path / "my-note.md"
        md.write_text("See [[getting-started]].\n", encoding="utf-8")
        note = read_note(md)
        assert note.title == "my-note"
        assert note.links == (Wikilink("getting-started"),)

    def test_missing_file(self, tmp_path: Path):
        path = tmp_path / "absent.md"
        with pytest.raises(NoteReadError) as info:
            read_note(path)
        assert info.value.path == path

    def test_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "binary.md"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(NoteReadError):
            read_note(path)

    def test_frontmatter_error_carries_path(self, tmp_path: Path):
        path = tmp_path / "bad.md"
        path.write_text("---\n42: oops\n---\n", encoding="utf-8")
        with pytest.raises(FrontmatterKeyError) as info:
            read_note(path)
        assert info.value.path == path
        assert str(path) in str(info.value)
