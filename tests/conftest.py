"""Shared pytest fixtures and test helpers for mdxe tests."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from click.testing import CliRunner

from mdxe.infrastructure.cache import CacheStore
from mdxe.services.fetcher import ArtifactFetcher
from mdxe.services.resolver import SpecifierResolver

ResponseFactory = Callable[..., MagicMock]


def _make_response(
    status: int = 200,
    content: bytes = b"",
    *,
    url: str = "",
    reason: str = "OK",
) -> MagicMock:
    """Build a mock ``requests.Response``."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.ok = status < 400
    response.reason = reason
    response.content = content
    response.url = url
    return response


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def respond() -> ResponseFactory:
    """Factory for mock HTTP responses."""
    return _make_response


@pytest.fixture
def fake_session() -> MagicMock:
    """A ``requests.Session`` stand-in; no test touches the network."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Isolated cache root per test (not created until first write)."""
    return tmp_path / "cache"


@pytest.fixture
def cache_store(cache_root: Path) -> CacheStore:
    return CacheStore(cache_root)


@pytest.fixture
def resolver() -> SpecifierResolver:
    """Resolver with the default allow-list and built-in mapping tables."""
    return SpecifierResolver()


@pytest.fixture
def fetcher(
    cache_store: CacheStore,
    resolver: SpecifierResolver,
    fake_session: MagicMock,
) -> Generator[ArtifactFetcher]:
    """Fetcher running background refreshes inline."""
    f = ArtifactFetcher(cache_store, resolver, session=fake_session, sync=True)
    try:
        yield f
    finally:
        f.close()


@pytest.fixture
def age_entry() -> Callable[[Path, float], None]:
    """Backdate a cache file's mtime by the given number of hours."""

    def _age(path: Path, hours: float) -> None:
        stamp = time.time() - hours * 3600
        os.utime(path, (stamp, stamp))

    return _age


@pytest.fixture
def _isolated_project(
    tmp_path: Path,
    fake_session: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None]:
    """Run CLI commands from a temp project with an isolated cache.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes. HTTP goes through ``fake_session``; the root logger's
    handlers (replaced by the CLI's logging setup) are restored afterwards.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MDXE_CONFIG", raising=False)
    monkeypatch.setenv("MDXE_CACHE__ROOT", str(tmp_path / ".cache"))
    monkeypatch.setattr("mdxe.services.fetcher.build_session", lambda: fake_session)
    monkeypatch.setattr("mdxe.services.resolver.build_session", lambda: fake_session)

    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    mdxe_level = logging.getLogger("mdxe").level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    logging.getLogger("mdxe").setLevel(mdxe_level)
