"""Body-level helpers: export statements, bare import rewriting, page metadata."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from mdxe.domain.frontmatter import is_linked_key
from mdxe.domain.specifiers import is_url

_IMPORT_RE = re.compile(
    r"""import\s+(?:\{\s*(?P<named>[^}]+?)\s*\}|(?P<default>[^'"{}]+?))\s+from\s+(?P<quote>['"])(?P<path>[^'"]+)(?P=quote)"""
)


def export_statement(name: str, url: str) -> str:
    return f"export {name} from '{url}'"


def rewrite_imports(
    body: str,
    base_url: str,
    aliases: Mapping[str, str] | None = None,
) -> str:
    """Point bare ``import ... from 'pkg'`` statements at *base_url*.

    Relative, absolute-path, and URL imports are left untouched. An alias
    replaces the module path before the base URL is applied; an alias to
    a full URL is used as-is.
    """
    base = base_url.rstrip("/")
    aliases = aliases or {}

    def _replace(match: re.Match[str]) -> str:
        path = match.group("path")
        if path.startswith((".", "/")) or is_url(path):
            return match.group(0)
        target = aliases.get(path, path)
        resolved = target if is_url(target) else f"{base}/{target}"
        named = match.group("named")
        binding = f"{{ {named} }}" if named else match.group("default").strip()
        return f"import {binding} from '{resolved}'"

    return _IMPORT_RE.sub(_replace, body)


def page_metadata(frontmatter: Mapping[str, Any]) -> dict[str, Any]:
    """Host-facing page metadata: title, description, keywords, linked keys.

    ``keywords`` is always a list when present.
    """
    meta: dict[str, Any] = {}
    if frontmatter.get("title"):
        meta["title"] = frontmatter["title"]
    if frontmatter.get("description"):
        meta["description"] = frontmatter["description"]
    keywords = frontmatter.get("keywords")
    if keywords:
        meta["keywords"] = keywords if isinstance(keywords, list) else [keywords]
    for key, value in frontmatter.items():
        if is_linked_key(key):
            meta[key] = value
    return meta
