"""Layout and component mapping tables.

Explicit mappings take precedence over synthesized registry URLs:
context-specific table -> default table -> synthesized. Keys are
normalized with :func:`~mdxe.domain.specifiers.normalize_key`, so a
document may write ``$type: https://schema.org/BlogPosting`` and match
the ``schema.org/BlogPosting`` entry.

Types inherit layouts: a type with no layout of its own uses the first
ancestor (depth-first, in declaration order) that has one.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from mdxe.domain.specifiers import ArtifactKind, ResolvedSpecifier, normalize_key

_THING = "schema.org/Thing"

# Types that fall back to the generic Thing layout.
TYPE_INHERITANCE: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "schema.org/CreativeWork": (_THING,),
        "schema.org/Article": ("schema.org/CreativeWork",),
        "schema.org/BlogPosting": ("schema.org/Article",),
        "schema.org/WebPage": ("schema.org/CreativeWork",),
        "schema.org/Product": (_THING,),
        "mdx.org.ai/Product": (_THING,),
        "mdx.org.ai/BlogPost": (_THING,),
        "mdx.org.ai/Agent": (_THING,),
        "mdx.org.ai/API": (_THING,),
        "mdx.org.ai/App": (_THING,),
        "mdx.org.ai/Assistant": (_THING,),
        "mdx.org.ai/Blog": (_THING,),
        "mdx.org.ai/Component": (_THING,),
        "mdx.org.ai/Function": (_THING,),
        "mdx.org.ai/Workflow": (_THING,),
        "mdx.org.ai/Directory": (_THING,),
        "mdx.org.ai/Eval": (_THING,),
        "mdx.org.ai/Package": (_THING,),
        "mdx.org.ai/Prompt": (_THING,),
        "mdx.org.ai/Startup": (_THING,),
        "mdx.org.ai/StateMachine": (_THING,),
        "mdx.org.ai/Tool": (_THING,),
        "mdx.org.ai/WebPage": (_THING,),
        "mdx.org.ai/Worker": (_THING,),
    }
)

DEFAULT_LAYOUTS: Mapping[str, str] = MappingProxyType(
    {
        _THING: "https://esm.sh/@mdxui/layouts/thing",
        "schema.org/BlogPosting": "https://esm.sh/@mdxui/layouts/blog-post",
        "mdx.org.ai/BlogPost": "https://esm.sh/@mdxui/layouts/blog-post",
        "mdx.org.ai/Blog": "https://esm.sh/@mdxui/layouts/blog",
    }
)

CONTEXT_LAYOUTS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "mdx.org.ai/docs": MappingProxyType(
            {
                _THING: "https://esm.sh/@mdxui/docs/layout",
                "schema.org/BlogPosting": "https://esm.sh/@mdxui/docs/blog-layout",
            }
        ),
    }
)


def _freeze(table: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({normalize_key(k): v for k, v in table.items()})


@dataclass(frozen=True)
class MappingTable:
    """Layouts and components for one lookup scope."""

    layouts: Mapping[str, str] = field(default_factory=dict)
    components: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        layouts: Mapping[str, str] | None = None,
        components: Mapping[str, str] | None = None,
    ) -> MappingTable:
        return cls(layouts=_freeze(layouts or {}), components=_freeze(components or {}))

    def merged(self, other: MappingTable) -> MappingTable:
        """A new table with *other*'s entries taking precedence."""
        return MappingTable(
            layouts=MappingProxyType({**self.layouts, **other.layouts}),
            components=MappingProxyType({**self.components, **other.components}),
        )

    def lookup(
        self,
        key: str,
        inheritance: Mapping[str, tuple[str, ...]],
    ) -> ResolvedSpecifier | None:
        """Find *key* as a component, then as a layout (walking ancestors)."""
        if key in self.components:
            return ResolvedSpecifier(url=self.components[key], kind=ArtifactKind.COMPONENT)
        for candidate in iter_lineage(key, inheritance):
            if candidate in self.layouts:
                return ResolvedSpecifier(url=self.layouts[candidate], kind=ArtifactKind.LAYOUT)
        return None


def iter_lineage(key: str, inheritance: Mapping[str, tuple[str, ...]]) -> Iterator[str]:
    """Yield *key* then its ancestors depth-first, each at most once."""
    seen: set[str] = set()
    stack = [key]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        yield current
        stack.extend(reversed(inheritance.get(current, ())))


@dataclass(frozen=True)
class MappingTables:
    """Immutable lookup tables keyed by ``(context, type_or_specifier)``."""

    default: MappingTable = field(default_factory=MappingTable)
    contexts: Mapping[str, MappingTable] = field(default_factory=dict)
    inheritance: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def builtin(cls) -> MappingTables:
        return cls(
            default=MappingTable.build(layouts=DEFAULT_LAYOUTS),
            contexts=MappingProxyType(
                {
                    normalize_key(ctx): MappingTable.build(layouts=table)
                    for ctx, table in CONTEXT_LAYOUTS.items()
                }
            ),
            inheritance=MappingProxyType(
                {
                    normalize_key(k): tuple(normalize_key(p) for p in parents)
                    for k, parents in TYPE_INHERITANCE.items()
                }
            ),
        )

    def extended(
        self,
        default: MappingTable | None = None,
        contexts: Mapping[str, MappingTable] | None = None,
    ) -> MappingTables:
        """Overlay user-supplied tables on top of these."""
        merged_contexts = dict(self.contexts)
        for ctx, table in (contexts or {}).items():
            key = normalize_key(ctx)
            base = merged_contexts.get(key, MappingTable())
            merged_contexts[key] = base.merged(table)
        return MappingTables(
            default=self.default.merged(default) if default else self.default,
            contexts=MappingProxyType(merged_contexts),
            inheritance=self.inheritance,
        )

    def lookup(self, identifier: str, context: str | None = None) -> ResolvedSpecifier | None:
        """Context-specific table first, then the default table."""
        key = normalize_key(identifier)
        if context:
            table = self.contexts.get(normalize_key(context))
            if table is not None:
                hit = table.lookup(key, self.inheritance)
                if hit is not None:
                    return hit
        return self.default.lookup(key, self.inheritance)
