"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mdxe.toml only contains overrides.
An empty (or missing) mdxe.toml yields a fully working configuration.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_ALLOWED_DOMAINS: tuple[str, ...] = ("esm.sh", "cdn.skypack.dev", "unpkg.com")
DEFAULT_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx", ".ts", ".js")
CACHE_DIRNAME = "mdxe-remote-cache"


def default_cache_root() -> Path:
    """Platform temp directory plus the fixed cache folder name."""
    return Path(tempfile.gettempdir()) / CACHE_DIRNAME


# --- mdxe.toml sections ---


class RemoteConfig(BaseModel):
    """[remote] section."""

    model_config = {"frozen": True}

    allowed_domains: tuple[str, ...] = DEFAULT_ALLOWED_DOMAINS
    registry_base_url: str = "https://esm.sh"
    request_timeout: float | None = 30.0
    probe: bool = False
    layout_tokens: tuple[str, ...] = ("layout", "theme")


class CacheConfig(BaseModel):
    """[cache] section.

    ``root`` left unset means :func:`default_cache_root`.
    """

    model_config = {"frozen": True}

    root: Path | None = None
    ttl_hours: float = 24.0
    refresh_window_hours: float = 1.0
    background_workers: int = 2

    @property
    def resolved_root(self) -> Path:
        return self.root if self.root is not None else default_cache_root()

    @property
    def ttl_seconds(self) -> float:
        return self.ttl_hours * 3600

    @property
    def refresh_after_seconds(self) -> float:
        """Entry age after which a hit also schedules a background refresh."""
        return (self.ttl_hours - self.refresh_window_hours) * 3600


class LocalConfig(BaseModel):
    """[local] section."""

    model_config = {"frozen": True}

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS


class ImportsConfig(BaseModel):
    """[imports] section — bare import rewriting in document bodies."""

    model_config = {"frozen": True}

    base_url: str | None = None
    aliases: dict[str, str] = Field(default_factory=dict)


class MappingTableConfig(BaseModel):
    """One mapping table: type or specifier -> URL, split by artifact kind."""

    model_config = {"frozen": True}

    layouts: dict[str, str] = Field(default_factory=dict)
    components: dict[str, str] = Field(default_factory=dict)


class MappingsConfig(MappingTableConfig):
    """[mappings] section — merged over the built-in mapping tables.

    Top-level ``layouts``/``components`` extend the default table;
    ``[mappings.contexts."<context>"]`` extends a context-specific one.
    """

    contexts: dict[str, MappingTableConfig] = Field(default_factory=dict)


class MdxeConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    local: LocalConfig = Field(default_factory=LocalConfig)
    imports: ImportsConfig = Field(default_factory=ImportsConfig)
    mappings: MappingsConfig = Field(default_factory=MappingsConfig)
