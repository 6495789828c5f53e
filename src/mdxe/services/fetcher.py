"""Artifact fetching with a stale-while-revalidate disk cache.

Two disjoint paths:

- Local (``./`` or ``../`` with a base directory): try the configured
  extensions in order and read the first match. Never cached.
- Remote: validate the host, then serve from :class:`CacheStore` when the
  entry is younger than the TTL. Entries in the last refresh window of
  their life are still served, and a background refetch is submitted to a
  ``ThreadPoolExecutor``. Anything older (or empty) is refetched
  synchronously.

INVARIANT: Background refresh failures are logged and discarded. They
never reach the caller of the ``fetch`` that triggered them.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

import requests

from mdxe.config.models import CacheConfig, LocalConfig, MdxeConfig, RemoteConfig
from mdxe.domain.errors import FetchError
from mdxe.domain.specifiers import is_local, is_url
from mdxe.infrastructure.cache import CacheStore
from mdxe.infrastructure.filesystem import read_local_artifact
from mdxe.infrastructure.http import build_session

if TYPE_CHECKING:
    from types import TracebackType

    from mdxe.services.resolver import SpecifierResolver

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """Fetch artifact source text for specifiers and URLs.

    Parameters:
        cache: Cache store rooted at an isolated or shared directory.
        resolver: Resolves bare package specifiers and owns the allow-list.
        session: ``requests`` session; one is built (and owned) if omitted.
        remote: ``[remote]`` section (request timeout).
        cache_config: ``[cache]`` section (TTL, refresh window, workers).
        local: ``[local]`` section (extension probe order).
        sync: Run background refreshes inline (useful for testing).
    """

    def __init__(
        self,
        cache: CacheStore,
        resolver: SpecifierResolver,
        *,
        session: requests.Session | None = None,
        remote: RemoteConfig | None = None,
        cache_config: CacheConfig | None = None,
        local: LocalConfig | None = None,
        sync: bool = False,
    ) -> None:
        self._cache = cache
        self._resolver = resolver
        self._owns_session = session is None
        self._session = session or build_session()
        self._remote = remote or RemoteConfig()
        self._cache_config = cache_config or CacheConfig()
        self._local = local or LocalConfig()
        self._executor: ThreadPoolExecutor | None = (
            None
            if sync
            else ThreadPoolExecutor(
                max_workers=self._cache_config.background_workers,
                thread_name_prefix="mdxe-refresh",
            )
        )
        self._futures: list[Future[None]] = []
        self._futures_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: MdxeConfig,
        resolver: SpecifierResolver,
        *,
        session: requests.Session | None = None,
        sync: bool = False,
    ) -> ArtifactFetcher:
        return cls(
            CacheStore(config.cache.resolved_root),
            resolver,
            session=session,
            remote=config.remote,
            cache_config=config.cache,
            local=config.local,
            sync=sync,
        )

    @property
    def cache(self) -> CacheStore:
        return self._cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(self, specifier: str, base_dir: str | None = None) -> str:
        """Return the source text for *specifier*.

        Raises:
            LocalArtifactNotFound: No local file matched any extension.
            DomainNotAllowed: The URL's host is not in the allow-list.
            UnresolvableSpecifier: A package name could not be resolved.
            FetchError: Non-2xx response or transport failure.
        """
        if base_dir is not None and is_local(specifier):
            return read_local_artifact(specifier, base_dir, self._local.extensions)

        url = specifier if is_url(specifier) else self._resolver.require(specifier).url
        return self.fetch_url(url)

    def fetch_url(self, url: str) -> str:
        """Remote path: cache-first fetch of an absolute URL."""
        self._resolver.check_domain(url)

        entry = self._cache.lookup(url)
        if entry is not None and entry.size > 0:
            age = entry.age(self._cache.now())
            if age < self._cache_config.ttl_seconds:
                if age > self._cache_config.refresh_after_seconds:
                    logger.debug("Cache entry for %s near expiry (age %.0fs)", url, age)
                    self._schedule_refresh(url)
                else:
                    logger.debug("Cache hit for %s", url)
                return entry.text

        logger.debug("Cache miss for %s", url)
        return self._download(url).decode("utf-8", errors="replace")

    def wait(self) -> None:
        """Block until all submitted background refreshes have finished."""
        with self._futures_lock:
            futures, self._futures = self._futures, []
        for future in futures:
            future.result()

    def close(self) -> None:
        """Shut down the refresh executor and any owned HTTP session."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> ArtifactFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _download(self, url: str) -> bytes:
        """GET *url* and persist the body. Nothing is cached on failure."""
        try:
            response = self._session.get(url, timeout=self._remote.request_timeout)
        except requests.RequestException as exc:
            raise FetchError(url, str(exc)) from exc

        # Redirects are followed by requests; the landing host must be allowed too.
        self._resolver.check_domain(response.url or url)

        if not response.ok:
            raise FetchError(url, f"HTTP {response.status_code} {response.reason}".strip())

        content = response.content
        self._cache.store(url, content)
        return content

    def _schedule_refresh(self, url: str) -> None:
        if self._executor is None:
            self._refresh(url)
            return
        future = self._executor.submit(self._refresh, url)
        with self._futures_lock:
            self._futures = [f for f in self._futures if not f.done()]
            self._futures.append(future)

    def _refresh(self, url: str) -> None:
        try:
            self._download(url)
        except Exception:
            logger.warning("Background refresh failed for %s", url, exc_info=True)
        else:
            logger.debug("Background refresh stored %s", url)
