"""Tests for SpecifierResolver — mapping tables, synthesis, allow-list, probe."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from mdxe.config.models import (
    MappingsConfig,
    MappingTableConfig,
    MdxeConfig,
    RemoteConfig,
)
from mdxe.domain.errors import DomainNotAllowed, UnresolvableSpecifier
from mdxe.domain.specifiers import ArtifactKind, ResolvedSpecifier
from mdxe.services.resolver import SpecifierResolver, build_tables


class TestResolve:
    def test_package_with_version(self, resolver: SpecifierResolver) -> None:
        assert resolver.resolve("react-button", version="1.0.0") == ResolvedSpecifier(
            url="https://esm.sh/react-button@1.0.0", kind=ArtifactKind.COMPONENT
        )

    def test_package_without_version(self, resolver: SpecifierResolver) -> None:
        resolved = resolver.resolve("react-button")
        assert resolved is not None
        assert resolved.url == "https://esm.sh/react-button"

    def test_scoped_layout_package(self, resolver: SpecifierResolver) -> None:
        resolved = resolver.resolve("@mdxui/layouts")
        assert resolved == ResolvedSpecifier(
            url="https://esm.sh/@mdxui/layouts", kind=ArtifactKind.LAYOUT
        )

    def test_allowed_url_unchanged(self, resolver: SpecifierResolver) -> None:
        url = "https://unpkg.com/some-theme@2/index.js"
        assert resolver.resolve(url) == ResolvedSpecifier(url=url, kind=ArtifactKind.LAYOUT)

    def test_disallowed_url(self, resolver: SpecifierResolver) -> None:
        with pytest.raises(DomainNotAllowed) as exc_info:
            resolver.resolve("https://evil.example.com/x.js")
        assert exc_info.value.host == "evil.example.com"
        assert "evil.example.com" in str(exc_info.value)

    def test_type_url_resolves_through_table(self, resolver: SpecifierResolver) -> None:
        assert resolver.resolve("https://schema.org/BlogPosting") == ResolvedSpecifier(
            url="https://esm.sh/@mdxui/layouts/blog-post", kind=ArtifactKind.LAYOUT
        )

    def test_context_specific_table(self, resolver: SpecifierResolver) -> None:
        resolved = resolver.resolve(
            "https://schema.org/BlogPosting", context="https://mdx.org.ai/docs"
        )
        assert resolved is not None
        assert resolved.url == "https://esm.sh/@mdxui/docs/blog-layout"

    @pytest.mark.parametrize("spec", ["", "   ", "./Button", "../shared/Card"])
    def test_nothing_to_resolve(self, resolver: SpecifierResolver, spec: str) -> None:
        assert resolver.resolve(spec) is None

    def test_unmapped_type_url_is_disallowed(self, resolver: SpecifierResolver) -> None:
        with pytest.raises(DomainNotAllowed):
            resolver.resolve("https://example.org/Unknown")

    def test_custom_registry_must_be_allowed(self) -> None:
        r = SpecifierResolver(RemoteConfig(registry_base_url="https://registry.example.com"))
        with pytest.raises(DomainNotAllowed):
            r.resolve("react")

    def test_custom_allow_list(self) -> None:
        r = SpecifierResolver(
            RemoteConfig(
                allowed_domains=("registry.example.com",),
                registry_base_url="https://registry.example.com",
            )
        )
        resolved = r.resolve("react", version="18")
        assert resolved is not None
        assert resolved.url == "https://registry.example.com/react@18"
        with pytest.raises(DomainNotAllowed):
            r.resolve("https://esm.sh/react")

    def test_mapped_url_checked_against_allow_list(self) -> None:
        tables = build_tables(
            MappingsConfig(components={"Widget": "https://evil.example.com/widget.js"})
        )
        r = SpecifierResolver(tables=tables)
        with pytest.raises(DomainNotAllowed):
            r.resolve("Widget")


class TestRequire:
    def test_hit(self, resolver: SpecifierResolver) -> None:
        assert resolver.require("react").url == "https://esm.sh/react"

    def test_miss_raises(self, resolver: SpecifierResolver) -> None:
        with pytest.raises(UnresolvableSpecifier) as exc_info:
            resolver.require("not a package")
        assert exc_info.value.specifier == "not a package"


class TestFromConfig:
    def test_config_mappings_overlay_builtin(self) -> None:
        config = MdxeConfig(
            mappings=MappingsConfig(
                components={"Button": "https://esm.sh/my-button@2"},
                contexts={
                    "https://example.com/site": MappingTableConfig(
                        layouts={"schema.org/Thing": "https://esm.sh/site-layout"}
                    )
                },
            )
        )
        r = SpecifierResolver.from_config(config)
        assert r.resolve("Button") == ResolvedSpecifier(
            url="https://esm.sh/my-button@2", kind=ArtifactKind.COMPONENT
        )
        site = r.resolve("https://schema.org/Article", context="https://example.com/site")
        assert site is not None
        assert site.url == "https://esm.sh/site-layout"
        default = r.resolve("https://schema.org/BlogPosting")
        assert default is not None
        assert default.url == "https://esm.sh/@mdxui/layouts/blog-post"

    def test_allowed_domains_exposed(self) -> None:
        r = SpecifierResolver.from_config(
            MdxeConfig(remote=RemoteConfig(allowed_domains=("esm.sh",)))
        )
        assert r.allowed_domains == ("esm.sh",)


class TestProbe:
    @pytest.fixture
    def probing(self, fake_session: MagicMock) -> SpecifierResolver:
        return SpecifierResolver(RemoteConfig(probe=True), session=fake_session)

    def test_probe_ok(self, probing: SpecifierResolver, fake_session: MagicMock, respond) -> None:
        fake_session.head.return_value = respond(200, url="https://esm.sh/react@18.2.0")
        resolved = probing.resolve("react", version="18.2.0")
        assert resolved is not None
        assert resolved.url == "https://esm.sh/react@18.2.0"
        fake_session.head.assert_called_once_with(
            "https://esm.sh/react@18.2.0", allow_redirects=True, timeout=30.0
        )

    def test_probe_404_is_a_miss(
        self, probing: SpecifierResolver, fake_session: MagicMock, respond
    ) -> None:
        fake_session.head.return_value = respond(404, reason="Not Found")
        assert probing.resolve("no-such-package") is None

    def test_probe_transport_failure_is_a_miss(
        self, probing: SpecifierResolver, fake_session: MagicMock
    ) -> None:
        fake_session.head.side_effect = requests.ConnectionError("offline")
        assert probing.resolve("react") is None

    def test_probe_redirect_to_disallowed_host(
        self, probing: SpecifierResolver, fake_session: MagicMock, respond
    ) -> None:
        fake_session.head.return_value = respond(200, url="https://evil.example.com/react")
        with pytest.raises(DomainNotAllowed):
            probing.resolve("react")

    def test_mapping_hits_skip_probe(
        self, probing: SpecifierResolver, fake_session: MagicMock
    ) -> None:
        probing.resolve("https://schema.org/Thing")
        fake_session.head.assert_not_called()

    def test_probe_disabled_by_default(
        self, resolver: SpecifierResolver, fake_session: MagicMock
    ) -> None:
        resolver.resolve("react")
        fake_session.head.assert_not_called()
