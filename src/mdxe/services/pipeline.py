"""Document compilation — metadata split, artifact resolution, export splicing.

Output layout (fixed order):

    export <Name> from '<url>'     # one per component, declaration order
    export layout from '<url>'     # at most one
    <blank line>
    <document body>

Exports precede the body so the host module sees them declared first.

Failure policy: compilation either fully succeeds or raises
:class:`CompilationError` naming the document and the failing reference.
Only layout auto-resolution (from ``$type``) is allowed to fail silently.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from mdxe.config.models import ImportsConfig, MdxeConfig
from mdxe.domain.document import CompiledOutput, CompileOptions, Document
from mdxe.domain.errors import CompilationError, MdxeError, UnresolvableSpecifier
from mdxe.domain.frontmatter import SplitDocument, partition_metadata, split_metadata
from mdxe.domain.imports import export_statement, rewrite_imports
from mdxe.domain.specifiers import is_local, is_url
from mdxe.services.fetcher import ArtifactFetcher
from mdxe.services.resolver import SpecifierResolver

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

# Linked keys listed first in CompiledOutput.linked_metadata, when present.
_LEADING_LINKED_KEYS = ("$type", "$context")


def _first_present(mapping: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = mapping.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def order_linked_metadata(linked: dict[str, Any]) -> dict[str, Any]:
    """``$type`` and ``$context`` first, then the rest in frontmatter order.

    Only keys actually present are included; nothing is defaulted.
    """
    ordered = {key: linked[key] for key in _LEADING_LINKED_KEYS if key in linked}
    for key, value in linked.items():
        if key not in ordered:
            ordered[key] = value
    return ordered


class CompilationPipeline:
    """Compile documents by resolving and fetching their referenced artifacts.

    Parameters:
        resolver: Specifier resolver (mapping tables + allow-list).
        fetcher: Artifact fetcher sharing the resolver's allow-list.
        imports: ``[imports]`` section for bare body-import rewriting.
    """

    def __init__(
        self,
        resolver: SpecifierResolver,
        fetcher: ArtifactFetcher,
        *,
        imports: ImportsConfig | None = None,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher
        self._imports = imports or ImportsConfig()

    @classmethod
    def from_config(
        cls,
        config: MdxeConfig,
        *,
        session: requests.Session | None = None,
        sync: bool = False,
    ) -> CompilationPipeline:
        """Wire resolver, cache store, and fetcher from one configuration."""
        resolver = SpecifierResolver.from_config(config, session=session)
        fetcher = ArtifactFetcher.from_config(config, resolver, session=session, sync=sync)
        return cls(resolver, fetcher, imports=config.imports)

    @property
    def resolver(self) -> SpecifierResolver:
        return self._resolver

    @property
    def fetcher(self) -> ArtifactFetcher:
        return self._fetcher

    def close(self) -> None:
        self._fetcher.close()

    def __enter__(self) -> CompilationPipeline:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, document: Document, options: CompileOptions | None = None) -> CompiledOutput:
        """Compile *document* into ordered source text plus split metadata.

        Raises:
            CompilationError: Any required specifier failed to resolve or
                fetch, or the body transform failed.
        """
        options = options or CompileOptions()
        split = self._split(document, options)
        context = _first_present(split.linked, "$context", "@context")
        base_dir = options.base_dir or document.directory

        exports: list[str] = []
        for name, specifier in self._declared_components(split, options).items():
            url = self._load_required(
                document, specifier, version=options.version, context=context, base_dir=base_dir
            )
            exports.append(export_statement(name, url))
        component_count = len(exports)

        layout = options.layout or _first_present(split.plain, "layout")
        if layout:
            url = self._load_required(
                document, layout, version=options.version, context=context, base_dir=base_dir
            )
            exports.append(export_statement("layout", url))
        else:
            type_id = options.type or _first_present(split.linked, "$type", "@type")
            if type_id:
                auto_url = self._auto_layout(document, type_id, context)
                if auto_url is not None:
                    exports.append(export_statement("layout", auto_url))

        body = self._prepare_body(document, split.body, options)
        code = "\n".join(exports) + "\n\n" + body if exports else body

        logger.debug(
            "Compiled %s: %d component(s), layout=%s",
            document.path,
            component_count,
            len(exports) > component_count,
        )
        return CompiledOutput(
            code=code,
            plain_metadata=split.plain,
            linked_metadata=order_linked_metadata(split.linked),
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _split(document: Document, options: CompileOptions) -> SplitDocument:
        if options.body is not None:
            plain, linked = partition_metadata(dict(options.frontmatter))
            return SplitDocument(body=options.body, plain=plain, linked=linked)
        return split_metadata(document.raw_text)

    @staticmethod
    def _declared_components(split: SplitDocument, options: CompileOptions) -> dict[str, str]:
        declared: dict[str, str] = {}
        from_frontmatter = split.plain.get("components")
        if isinstance(from_frontmatter, dict):
            declared.update({str(k): str(v) for k, v in from_frontmatter.items()})
        elif from_frontmatter not in (None, ""):
            logger.debug("Ignoring non-mapping 'components' frontmatter value")
        declared.update(options.components)
        return declared

    def _load_required(
        self,
        document: Document,
        specifier: str,
        *,
        version: str | None,
        context: str | None,
        base_dir: str,
    ) -> str:
        """Resolve and fetch a required specifier, returning the URL to export."""
        try:
            if is_url(specifier):
                self._fetcher.fetch(specifier)
                return specifier
            if is_local(specifier):
                self._fetcher.fetch(specifier, base_dir=base_dir)
                return specifier
            resolved = self._resolver.resolve(specifier, version=version, context=context)
            if resolved is None:
                raise UnresolvableSpecifier(specifier)
            self._fetcher.fetch(resolved.url)
            return resolved.url
        except (MdxeError, OSError) as exc:
            raise CompilationError(document.path, exc, specifier=specifier) from exc

    def _auto_layout(self, document: Document, type_id: str, context: str | None) -> str | None:
        """Best-effort layout for a type. Every failure means "no layout"."""
        try:
            resolved = self._resolver.resolve(type_id, context=context)
            if resolved is None:
                logger.debug("No layout for type %s in %s", type_id, document.path)
                return None
            self._fetcher.fetch(resolved.url)
        except (MdxeError, OSError) as exc:
            logger.warning(
                "Layout auto-resolution failed for %s in %s: %s", type_id, document.path, exc
            )
            return None
        return resolved.url

    def _prepare_body(self, document: Document, body: str, options: CompileOptions) -> str:
        if self._imports.base_url:
            body = rewrite_imports(body, self._imports.base_url, self._imports.aliases)
        if options.transform is None:
            return body
        try:
            return options.transform(body, dict(options.transform_options))
        except Exception as exc:
            raise CompilationError(document.path, exc) from exc
