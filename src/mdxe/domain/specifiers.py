"""Specifier parsing, URL synthesis, and artifact classification.

A specifier is how a document names an external artifact:

- fully-qualified URL:   ``https://esm.sh/react@18.2.0``
- scoped package:        ``@mdx-js/react`` (optionally ``/sub/path``)
- unscoped package:      ``react-button`` or ``lodash/debounce``
- relative local path:   ``./components/Button``, ``../shared/Card``
- abstract type URL:     ``https://schema.org/BlogPosting`` (layout lookup)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlsplit

_LOCAL_PREFIXES = ("./", "../")


class ArtifactKind(StrEnum):
    """What role a resolved artifact plays in the compiled document."""

    COMPONENT = "component"
    LAYOUT = "layout"


@dataclass(frozen=True)
class ResolvedSpecifier:
    """A fetchable URL and the inferred artifact kind."""

    url: str
    kind: ArtifactKind


@dataclass(frozen=True)
class PackageName:
    """A package specifier split into its name and optional sub-path."""

    name: str
    subpath: str = ""


def is_url(specifier: str) -> bool:
    return specifier.startswith(("http://", "https://"))


def is_local(specifier: str) -> bool:
    return specifier.startswith(_LOCAL_PREFIXES)


def host_of(url: str) -> str:
    """Lower-cased hostname of *url* (empty string when there is none)."""
    return (urlsplit(url).hostname or "").lower()


def is_host_allowed(url: str, allowed_domains: tuple[str, ...] | list[str]) -> bool:
    """Exact hostname match against the allow-list; subdomains do not count."""
    host = host_of(url)
    return bool(host) and host in {d.lower() for d in allowed_domains}


def parse_package_name(specifier: str) -> PackageName | None:
    """Split a bare package specifier into name and sub-path.

    Scoped names keep both ``@scope/name`` segments. Returns None for
    anything that cannot be a package name (URLs, local paths, blank or
    whitespace-containing strings, a lone ``@scope``).
    """
    spec = specifier.strip()
    if not spec or is_url(spec) or is_local(spec) or spec.startswith("/"):
        return None
    if any(ch.isspace() for ch in spec):
        return None

    parts = spec.split("/")
    if spec.startswith("@"):
        if len(parts) < 2 or not parts[0][1:] or not parts[1]:
            return None
        return PackageName(name="/".join(parts[:2]), subpath="/".join(parts[2:]))
    if not parts[0]:
        return None
    return PackageName(name=parts[0], subpath="/".join(parts[1:]))


def synthesize_url(base_url: str, specifier: str, version: str | None = None) -> str | None:
    """Compose ``base/<package>[@version][/subpath]`` for a package specifier.

    No version means no ``@`` suffix at all.
    """
    package = parse_package_name(specifier)
    if package is None:
        return None
    url = f"{base_url.rstrip('/')}/{package.name}"
    if version:
        url = f"{url}@{version}"
    if package.subpath:
        url = f"{url}/{package.subpath}"
    return url


def classify(
    specifier: str,
    context: str | None = None,
    *,
    layout_tokens: tuple[str, ...] = ("layout", "theme"),
) -> ArtifactKind:
    """Layout when the specifier or context mentions a layout token."""
    haystacks = [specifier.lower()]
    if context:
        haystacks.append(context.lower())
    for token in layout_tokens:
        needle = token.lower()
        if any(needle in hay for hay in haystacks):
            return ArtifactKind.LAYOUT
    return ArtifactKind.COMPONENT


def normalize_key(identifier: str) -> str:
    """Mapping-table key for a type, context, or specifier.

    ``https://schema.org/Thing/`` and ``schema.org/Thing`` share a key.
    """
    key = identifier.strip()
    for scheme in ("https://", "http://"):
        if key.lower().startswith(scheme):
            key = key[len(scheme) :]
            break
    return key.rstrip("/")
