"""Filesystem operations for local artifacts and source documents.

Local artifact reads are always live: nothing here touches the cache.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from mdxe.domain.errors import LocalArtifactNotFound

# Source document extensions accepted by the CLI.
DOCUMENT_EXTENSIONS = frozenset({".md", ".mdx"})


def find_local_artifact(
    specifier: str,
    base_dir: str | Path,
    extensions: Iterable[str],
) -> Path:
    """Try ``base_dir/specifier + ext`` for each extension, in order.

    Returns the first candidate that is a regular file.

    Raises:
        LocalArtifactNotFound: If no candidate exists.
    """
    base = Path(base_dir)
    for ext in extensions:
        candidate = base / f"{specifier}{ext}"
        if candidate.is_file():
            return candidate
    raise LocalArtifactNotFound(specifier, str(base_dir))


def read_local_artifact(
    specifier: str,
    base_dir: str | Path,
    extensions: Iterable[str],
) -> str:
    """Read the first matching local artifact as UTF-8 text.

    Undecodable bytes are replaced, matching how remote artifacts are read.
    """
    path = find_local_artifact(specifier, base_dir, extensions)
    return path.read_bytes().decode("utf-8", errors="replace")


def resolve_document_path(target: str, cwd: Path | None = None) -> Path:
    """Resolve a CLI target to a document path.

    A target without an extension is assumed to be ``<target>.mdx``.

    Raises:
        ValueError: If the extension is not ``.md`` or ``.mdx``.
        FileNotFoundError: If the document does not exist.
    """
    path = Path(target)
    if not path.suffix:
        path = path.with_suffix(".mdx")
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    if path.suffix not in DOCUMENT_EXTENSIONS:
        msg = f"File must be .mdx or .md: {path}"
        raise ValueError(msg)
    if not path.is_file():
        msg = f"File not found: {path}"
        raise FileNotFoundError(msg)
    return path
