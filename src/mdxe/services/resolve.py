"""ResolveService — show where a specifier resolves to."""

from __future__ import annotations

from mdxe.domain.errors import ResolutionError
from mdxe.domain.specifiers import is_local
from mdxe.services.base import BaseService
from mdxe.services.result import ServiceResult


class ResolveService(BaseService):
    """Resolve specifiers without fetching them."""

    def resolve(
        self,
        specifier: str,
        *,
        version: str | None = None,
        context: str | None = None,
    ) -> ServiceResult:
        op = "resolve"
        if is_local(specifier):
            return ServiceResult(
                ok=True,
                op=op,
                data={"specifier": specifier, "url": specifier, "kind": "local"},
            )
        try:
            resolved = self._pipeline.resolver.require(
                specifier, version=version, context=context
            )
        except ResolutionError as exc:
            return self._failure(op, exc, specifier=specifier, context=context)

        return ServiceResult(
            ok=True,
            op=op,
            data={"specifier": specifier, "url": resolved.url, "kind": str(resolved.kind)},
        )
