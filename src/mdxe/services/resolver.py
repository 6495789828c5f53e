"""Specifier resolution — logical reference to allowed, fetchable URL.

Precedence for a specifier:
  1. Context-specific mapping table (when a context is given)
  2. Default mapping table
  3. The specifier itself, when it is already a URL
  4. A URL synthesized from the registry base, package name, and version

Whatever URL comes out is validated against the host allow-list.

INVARIANT: The allow-list is a security boundary. Mapped, literal, and
synthesized URLs are all checked, and so is the final URL of a probe that
followed redirects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from mdxe.config.models import MdxeConfig, RemoteConfig
from mdxe.domain.errors import DomainNotAllowed, UnresolvableSpecifier
from mdxe.domain.registry import MappingTable, MappingTables
from mdxe.domain.specifiers import (
    ArtifactKind,
    ResolvedSpecifier,
    classify,
    host_of,
    is_host_allowed,
    is_local,
    is_url,
    synthesize_url,
)
from mdxe.infrastructure.http import build_session

if TYPE_CHECKING:
    from mdxe.config.models import MappingsConfig

logger = logging.getLogger(__name__)


def build_tables(mappings: MappingsConfig | None = None) -> MappingTables:
    """Built-in mapping tables overlaid with configured ones."""
    tables = MappingTables.builtin()
    if mappings is None:
        return tables
    return tables.extended(
        default=MappingTable.build(layouts=mappings.layouts, components=mappings.components),
        contexts={
            ctx: MappingTable.build(layouts=table.layouts, components=table.components)
            for ctx, table in mappings.contexts.items()
        },
    )


class SpecifierResolver:
    """Resolve specifiers against mapping tables, the registry, and the allow-list.

    Parameters:
        config: The ``[remote]`` section (allow-list, registry, probe flag).
        tables: Mapping tables; defaults to the built-in ones.
        session: HTTP session used only for the optional live probe.
    """

    def __init__(
        self,
        config: RemoteConfig | None = None,
        tables: MappingTables | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or RemoteConfig()
        self._tables = tables or MappingTables.builtin()
        self._session = session

    @classmethod
    def from_config(
        cls,
        config: MdxeConfig,
        *,
        session: requests.Session | None = None,
    ) -> SpecifierResolver:
        return cls(config.remote, build_tables(config.mappings), session=session)

    @property
    def allowed_domains(self) -> tuple[str, ...]:
        return self._config.allowed_domains

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_domain(self, url: str) -> None:
        """Raise :class:`DomainNotAllowed` unless *url*'s host is allowed."""
        if not is_host_allowed(url, self._config.allowed_domains):
            raise DomainNotAllowed(host_of(url), url)

    def resolve(
        self,
        specifier: str,
        version: str | None = None,
        context: str | None = None,
    ) -> ResolvedSpecifier | None:
        """Resolve *specifier*, or return None when nothing maps to it.

        Raises:
            DomainNotAllowed: If the resulting URL's host is not allowed.
        """
        spec = specifier.strip()
        if not spec or is_local(spec):
            return None

        mapped = self._tables.lookup(spec, context)
        if mapped is not None:
            self.check_domain(mapped.url)
            logger.debug("Resolved %s via mapping table -> %s", spec, mapped.url)
            return mapped

        if is_url(spec):
            self.check_domain(spec)
            return ResolvedSpecifier(url=spec, kind=self._classify(spec, context))

        url = synthesize_url(self._config.registry_base_url, spec, version)
        if url is None:
            logger.debug("No URL can be synthesized for specifier %r", spec)
            return None
        self.check_domain(url)

        if self._config.probe and not self._probe(url):
            return None

        return ResolvedSpecifier(url=url, kind=self._classify(spec, context))

    def require(
        self,
        specifier: str,
        version: str | None = None,
        context: str | None = None,
    ) -> ResolvedSpecifier:
        """Like :meth:`resolve`, but a miss raises :class:`UnresolvableSpecifier`."""
        resolved = self.resolve(specifier, version=version, context=context)
        if resolved is None:
            raise UnresolvableSpecifier(specifier)
        return resolved

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _classify(self, specifier: str, context: str | None) -> ArtifactKind:
        return classify(specifier, context, layout_tokens=self._config.layout_tokens)

    def _probe(self, url: str) -> bool:
        """HEAD the candidate URL. Transport failures count as a miss."""
        session = self._session or build_session()
        try:
            response = session.head(
                url,
                allow_redirects=True,
                timeout=self._config.request_timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Probe failed for %s: %s", url, exc)
            return False
        finally:
            if self._session is None:
                session.close()

        self.check_domain(response.url or url)
        if not response.ok:
            logger.info("Probe for %s returned HTTP %s", url, response.status_code)
            return False
        return True
