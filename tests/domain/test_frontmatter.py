"""Tests for frontmatter parsing and the plain / linked metadata split."""

from __future__ import annotations

import pytest

from mdxe.domain.frontmatter import (
    SplitDocument,
    extract_preamble,
    parse_frontmatter,
    parse_scalar,
    partition_metadata,
    split_metadata,
)


class TestExtractPreamble:
    def test_basic(self) -> None:
        lines, body = extract_preamble("---\ntitle: Hi\n---\nBody text.")
        assert lines == ["title: Hi"]
        assert body == "Body text."

    def test_no_frontmatter(self) -> None:
        lines, body = extract_preamble("Just plain text.")
        assert lines is None
        assert body == "Just plain text."

    def test_missing_closing_delimiter(self) -> None:
        content = "---\ntitle: Hi\nNo closing delimiter"
        lines, body = extract_preamble(content)
        assert lines is None
        assert body == content

    def test_crlf_line_endings(self) -> None:
        lines, body = extract_preamble("---\r\ntitle: Hi\r\n---\r\nBody")
        assert lines == ["title: Hi"]
        assert body == "Body"

    def test_single_blank_line_after_delimiter_is_dropped(self) -> None:
        _lines, body = extract_preamble("---\na: b\n---\n\n# Heading")
        assert body == "# Heading"


class TestParseScalar:
    def test_raw_string(self) -> None:
        assert parse_scalar("Hello World") == "Hello World"

    def test_double_quotes_stripped(self) -> None:
        assert parse_scalar('"Hello: World"') == "Hello: World"

    def test_single_quotes_stripped(self) -> None:
        assert parse_scalar("'quoted'") == "quoted"

    def test_mismatched_quotes_kept(self) -> None:
        assert parse_scalar("'half\"") == "'half\""

    def test_non_structured_values_stay_strings(self) -> None:
        assert parse_scalar("true") == "true"
        assert parse_scalar("42") == "42"

    def test_json_object(self) -> None:
        assert parse_scalar('{"Button": "react-button"}') == {"Button": "react-button"}

    def test_json_array(self) -> None:
        assert parse_scalar('["a", "b"]') == ["a", "b"]

    def test_yaml_flow_fallback(self) -> None:
        assert parse_scalar("{ Button: react-button }") == {"Button": "react-button"}
        assert parse_scalar("[mdx, docs]") == ["mdx", "docs"]

    def test_malformed_structured_raises(self) -> None:
        with pytest.raises(ValueError):
            parse_scalar("{unclosed: [")


class TestParseFrontmatter:
    def test_flat_keys_in_order(self) -> None:
        fm, body = parse_frontmatter("---\ntitle: Post\ndescription: About\n---\nBody")
        assert list(fm) == ["title", "description"]
        assert fm["title"] == "Post"
        assert body == "Body"

    def test_linked_keys_parsed(self) -> None:
        content = (
            "---\n"
            "$type: https://schema.org/BlogPosting\n"
            "@context: https://mdx.org.ai/docs\n"
            "---\n"
        )
        fm, _body = parse_frontmatter(content)
        assert fm["$type"] == "https://schema.org/BlogPosting"
        assert fm["@context"] == "https://mdx.org.ai/docs"

    def test_value_containing_colons(self) -> None:
        fm, _body = parse_frontmatter("---\nurl: https://esm.sh/a:b\n---\n")
        assert fm["url"] == "https://esm.sh/a:b"

    def test_block_mapping(self) -> None:
        content = "---\ncomponents:\n  Button: react-button\n  Card: '@ui/card'\n---\nBody"
        fm, _body = parse_frontmatter(content)
        assert fm["components"] == {"Button": "react-button", "Card": "@ui/card"}

    def test_block_list(self) -> None:
        fm, _body = parse_frontmatter("---\ntags:\n  - a\n  - b\n---\n")
        assert fm["tags"] == ["a", "b"]

    def test_block_list_without_indent(self) -> None:
        fm, _body = parse_frontmatter("---\ntags:\n- a\n- b\n---\n")
        assert fm["tags"] == ["a", "b"]

    def test_empty_value(self) -> None:
        fm, _body = parse_frontmatter("---\nlayout:\ntitle: X\n---\n")
        assert fm["layout"] == ""
        assert fm["title"] == "X"

    def test_malformed_lines_skipped(self) -> None:
        content = (
            "---\n"
            "title: Good\n"
            "this line has no key\n"
            "  stray indented line\n"
            "broken: {not: [valid\n"
            "# a comment\n"
            "\n"
            "author: Jane\n"
            "---\n"
            "Body"
        )
        fm, body = parse_frontmatter(content)
        assert fm == {"title": "Good", "author": "Jane"}
        assert body == "Body"

    def test_malformed_block_skipped(self) -> None:
        content = "---\nnested:\n  a: [1, 2\ntitle: Still here\n---\n"
        fm, _body = parse_frontmatter(content)
        assert "nested" not in fm
        assert fm["title"] == "Still here"

    def test_empty_preamble(self) -> None:
        fm, body = parse_frontmatter("---\n---\nBody")
        assert fm == {}
        assert body == "Body"


class TestPartition:
    def test_split_by_prefix(self) -> None:
        plain, linked = partition_metadata(
            {"title": "T", "$type": "Thing", "@context": "ctx", "tags": ["x"]}
        )
        assert plain == {"title": "T", "tags": ["x"]}
        assert linked == {"$type": "Thing", "@context": "ctx"}

    @pytest.mark.parametrize(
        "fm",
        [
            {},
            {"title": "only plain"},
            {"$type": "only linked"},
            {"$a": 1, "b": 2, "@c": 3, "d$": 4, "e@": 5},
            {"$": "bare dollar", "@": "bare at", "": "empty"},
        ],
    )
    def test_partition_is_total_and_disjoint(self, fm: dict[str, object]) -> None:
        plain, linked = partition_metadata(fm)
        assert set(plain).isdisjoint(linked)
        assert set(plain) | set(linked) == set(fm)
        assert {**plain, **linked} == fm


class TestSplitMetadata:
    def test_returns_split_document(self) -> None:
        result = split_metadata("---\ntitle: T\n$type: Thing\n---\n# Body")
        assert result == SplitDocument(
            body="# Body",
            plain={"title": "T"},
            linked={"$type": "Thing"},
        )

    def test_no_preamble_is_all_body(self) -> None:
        result = split_metadata("# Only body")
        assert result.body == "# Only body"
        assert result.plain == {}
        assert result.linked == {}
