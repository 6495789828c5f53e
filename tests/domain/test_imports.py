"""Tests for export statements, bare import rewriting, and page metadata."""

from __future__ import annotations

from mdxe.domain.imports import export_statement, page_metadata, rewrite_imports

BASE = "https://esm.sh"


class TestExportStatement:
    def test_format(self) -> None:
        assert (
            export_statement("Button", "https://esm.sh/react-button@1.0.0")
            == "export Button from 'https://esm.sh/react-button@1.0.0'"
        )


class TestRewriteImports:
    def test_default_import(self) -> None:
        body = "import Chart from 'chart-lib'\n\n# Title"
        assert rewrite_imports(body, BASE) == (
            "import Chart from 'https://esm.sh/chart-lib'\n\n# Title"
        )

    def test_named_import(self) -> None:
        body = 'import { useState, useEffect } from "react"'
        assert rewrite_imports(body, BASE) == (
            "import { useState, useEffect } from 'https://esm.sh/react'"
        )

    def test_relative_and_url_imports_untouched(self) -> None:
        body = (
            "import A from './A'\n"
            "import B from '../B'\n"
            "import C from '/abs/C'\n"
            "import D from 'https://unpkg.com/d'"
        )
        assert rewrite_imports(body, BASE) == body

    def test_alias_to_package(self) -> None:
        body = "import Ui from 'ui'"
        assert rewrite_imports(body, BASE + "/", {"ui": "@acme/ui@2"}) == (
            "import Ui from 'https://esm.sh/@acme/ui@2'"
        )

    def test_alias_to_url(self) -> None:
        body = "import Ui from 'ui'"
        assert rewrite_imports(body, BASE, {"ui": "https://unpkg.com/ui"}) == (
            "import Ui from 'https://unpkg.com/ui'"
        )

    def test_plain_text_untouched(self) -> None:
        body = "We import goods from abroad."
        assert rewrite_imports(body, BASE) == body


class TestPageMetadata:
    def test_selected_fields(self) -> None:
        meta = page_metadata(
            {
                "title": "Hello",
                "description": "A post",
                "keywords": ["mdx", "docs"],
                "layout": "ignored",
                "$type": "https://schema.org/BlogPosting",
                "@context": "https://schema.org",
            }
        )
        assert meta == {
            "title": "Hello",
            "description": "A post",
            "keywords": ["mdx", "docs"],
            "$type": "https://schema.org/BlogPosting",
            "@context": "https://schema.org",
        }

    def test_single_keyword_becomes_list(self) -> None:
        assert page_metadata({"keywords": "mdx"}) == {"keywords": ["mdx"]}

    def test_empty(self) -> None:
        assert page_metadata({}) == {}
