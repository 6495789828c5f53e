"""Compilation inputs and outputs.

All models are frozen: a Document is created per compile request and a
CompiledOutput is handed back to the caller unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, Field

# transform(body, options) -> executable module text
BodyTransform = Callable[[str, dict[str, Any]], str]


class Document(BaseModel):
    """Raw document text and the identifier used in diagnostics."""

    model_config = {"frozen": True}

    path: str
    raw_text: str

    @classmethod
    def from_file(cls, path: Path) -> Self:
        return cls(path=str(path), raw_text=path.read_text(encoding="utf-8"))

    @property
    def directory(self) -> str:
        return str(Path(self.path).parent)


class CompileOptions(BaseModel):
    """Per-call overrides for a single compilation.

    Attributes:
        components: Extra ``name -> specifier`` references; these win over
            a ``components`` mapping declared in frontmatter.
        layout: Explicit layout specifier (overrides frontmatter ``layout``).
        type: Type identifier for layout auto-resolution (overrides
            ``$type``).
        version: Version applied when synthesizing package URLs.
        base_dir: Directory for ``./`` and ``../`` specifiers; defaults to
            the document's directory.
        body: Pre-extracted body; when set, ``frontmatter`` supplies the
            metadata and the raw text is not re-split.
        frontmatter: Pre-parsed metadata accompanying ``body``.
        transform: Host compiler hook applied to the body before splicing.
        transform_options: Passed through to ``transform``.
    """

    model_config = {"frozen": True}

    components: dict[str, str] = Field(default_factory=dict)
    layout: str | None = None
    type: str | None = None
    version: str | None = None
    base_dir: str | None = None
    body: str | None = None
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    transform: BodyTransform | None = None
    transform_options: dict[str, Any] = Field(default_factory=dict)


class CompiledOutput(BaseModel):
    """Ordered source text with exports spliced in, plus split metadata."""

    model_config = {"frozen": True}

    code: str
    plain_metadata: dict[str, Any] = Field(default_factory=dict)
    linked_metadata: dict[str, Any] = Field(default_factory=dict)
