"""Typed error taxonomy for resolution, fetching, and compilation.

Every error carries the identifiers a user needs to locate the offending
reference: the host, the specifier, the URL, or the document path.
``CompilationError`` is the only type that escapes
:meth:`mdxe.services.pipeline.CompilationPipeline.compile`.
"""

from __future__ import annotations


class MdxeError(Exception):
    """Base class for all mdxe errors."""


class ResolutionError(MdxeError):
    """A specifier could not be turned into an allowed, fetchable location."""


class DomainNotAllowed(ResolutionError):
    """The URL's host is not in the trusted allow-list. Never retried."""

    def __init__(self, host: str, url: str | None = None) -> None:
        self.host = host
        self.url = url
        msg = f"Domain {host!r} not allowed for remote imports"
        if url:
            msg = f"{msg} ({url})"
        super().__init__(msg)


class UnresolvableSpecifier(ResolutionError):
    """No mapping and no valid synthesized URL exists for the specifier."""

    def __init__(self, specifier: str) -> None:
        self.specifier = specifier
        super().__init__(f"Unable to resolve specifier {specifier!r}")


class LocalArtifactNotFound(MdxeError):
    """None of the probed extensions matched an existing local file."""

    def __init__(self, specifier: str, base_dir: str) -> None:
        self.specifier = specifier
        self.base_dir = base_dir
        super().__init__(f"Local component not found: {specifier} in {base_dir}")


class FetchError(MdxeError):
    """Non-2xx response or transport failure on a required fetch."""

    def __init__(self, url: str, cause: str) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch {url}: {cause}")


class CompilationError(MdxeError):
    """Wraps any failure with the document path and the failing reference."""

    def __init__(self, path: str, cause: Exception, *, specifier: str | None = None) -> None:
        self.path = path
        self.cause = cause
        self.specifier = specifier
        where = f" (specifier {specifier!r})" if specifier else ""
        super().__init__(f"Failed to compile {path}{where}: {cause}")
