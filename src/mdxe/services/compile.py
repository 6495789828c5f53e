"""CompileService — compile one document file for the CLI.

Extends BaseService (drives the shared pipeline).
"""

from __future__ import annotations

import logging
from pathlib import Path

from mdxe.domain.document import CompileOptions, Document
from mdxe.domain.errors import CompilationError
from mdxe.domain.frontmatter import parse_frontmatter
from mdxe.domain.imports import page_metadata
from mdxe.infrastructure.filesystem import resolve_document_path
from mdxe.services.base import BaseService
from mdxe.services.result import ServiceResult

logger = logging.getLogger(__name__)


class CompileService(BaseService):
    """Compile documents from disk into code plus metadata payloads."""

    def compile_file(
        self,
        target: str,
        *,
        components: dict[str, str] | None = None,
        layout: str | None = None,
        type_id: str | None = None,
        version: str | None = None,
        output: Path | None = None,
        cwd: Path | None = None,
    ) -> ServiceResult:
        """Compile *target* (``.md``/``.mdx``; no extension means ``.mdx``).

        With *output*, the code is written there and omitted from the
        payload.
        """
        op = "compile"
        try:
            path = resolve_document_path(target, cwd)
        except (ValueError, FileNotFoundError) as exc:
            return ServiceResult.failure(op, "INVALID_DOCUMENT", str(exc), target=target)

        try:
            document = Document.from_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            return ServiceResult.failure(
                op, "INVALID_DOCUMENT", f"Cannot read {path}: {exc}", target=target, path=str(path)
            )

        options = CompileOptions(
            components=components or {},
            layout=layout,
            type=type_id,
            version=version,
        )
        try:
            compiled = self._pipeline.compile(document, options)
        except CompilationError as exc:
            logger.debug("Compilation failed for %s", path, exc_info=True)
            return self._failure(op, exc, path=str(path), specifier=exc.specifier)

        frontmatter, _body = parse_frontmatter(document.raw_text)
        data: dict[str, object] = {
            "path": str(path),
            "plain_metadata": compiled.plain_metadata,
            "linked_metadata": compiled.linked_metadata,
            "page_metadata": page_metadata(frontmatter),
        }
        if output is None:
            data["code"] = compiled.code
            return ServiceResult(ok=True, op=op, data=data)

        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(compiled.code, encoding="utf-8")
        except OSError as exc:
            return ServiceResult.failure(
                op,
                "OUTPUT_FAILED",
                f"Cannot write {output}: {exc}",
                path=str(path),
                output=str(output),
            )
        data["output"] = str(output)
        return ServiceResult(ok=True, op=op, data=data)
