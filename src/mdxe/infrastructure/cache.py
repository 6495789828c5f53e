"""Content-addressed on-disk cache for fetched artifacts.

One file per URL, named by the hex SHA-256 of the URL, holding the raw
response bytes with no envelope. The file's mtime is the fetch time.

INVARIANT: a reader never sees a partially written entry. Writes go to a
temp file in the cache root and are moved into place with ``os.replace``,
so concurrent writers of the same key race benignly (same URL, same
expected bytes) without any in-process locking.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    """Deterministic cache key for *url*."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    """A cached artifact as found on disk."""

    key: str
    path: Path
    content: bytes
    fetched_at: float

    @property
    def size(self) -> int:
        return len(self.content)

    def age(self, now: float) -> float:
        return now - self.fetched_at

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


class CacheStore:
    """The cache root directory, injected into the fetcher at construction.

    Created once per process (or per test), no teardown required. The
    directory itself is created lazily on first write.
    """

    def __init__(self, root: Path, *, clock: Callable[[], float] = time.time) -> None:
        self.root = Path(root)
        self._clock = clock

    def now(self) -> float:
        return self._clock()

    def path_for(self, url: str) -> Path:
        return self.root / cache_key(url)

    def lookup(self, url: str) -> CacheEntry | None:
        """Return the entry for *url*, or None if nothing is cached."""
        path = self.path_for(url)
        try:
            stat = path.stat()
            content = path.read_bytes()
        except FileNotFoundError:
            return None
        return CacheEntry(
            key=path.name,
            path=path,
            content=content,
            fetched_at=stat.st_mtime,
        )

    def store(self, url: str, content: bytes) -> Path:
        """Atomically write *content* as the entry for *url*."""
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.path_for(url)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Cached %s (%d bytes) at %s", url, len(content), path)
        return path
