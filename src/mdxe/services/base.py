"""BaseService — shared foundation for CLI-facing services.

Every service receives a :class:`CompilationPipeline` at construction
time; the pipeline owns the resolver, the fetcher, and the cache store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdxe.domain.errors import (
    CompilationError,
    DomainNotAllowed,
    FetchError,
    LocalArtifactNotFound,
    MdxeError,
    UnresolvableSpecifier,
)
from mdxe.services.result import ServiceResult

if TYPE_CHECKING:
    from mdxe.services.pipeline import CompilationPipeline

# Most specific first: CompilationError is checked against its cause.
_ERROR_CODES: tuple[tuple[type[MdxeError], str], ...] = (
    (DomainNotAllowed, "DOMAIN_NOT_ALLOWED"),
    (UnresolvableSpecifier, "UNRESOLVABLE_SPECIFIER"),
    (LocalArtifactNotFound, "LOCAL_ARTIFACT_NOT_FOUND"),
    (FetchError, "FETCH_FAILED"),
)


def error_code(exc: Exception) -> str:
    """Stable error code for *exc* (the cause's code for CompilationError)."""
    target = exc.cause if isinstance(exc, CompilationError) else exc
    for exc_type, code in _ERROR_CODES:
        if isinstance(target, exc_type):
            return code
    return "COMPILATION_FAILED" if isinstance(exc, CompilationError) else "ERROR"


class BaseService:
    """Base for service-layer classes that drive the pipeline.

    Usage::

        class CompileService(BaseService):
            def compile_file(self, target: str) -> ServiceResult:
                output = self._pipeline.compile(...)
                ...
    """

    def __init__(self, pipeline: CompilationPipeline) -> None:
        self._pipeline = pipeline

    @staticmethod
    def _failure(op: str, exc: Exception, **detail: object) -> ServiceResult:
        return ServiceResult.failure(op, error_code(exc), str(exc), **detail)
