"""Locating and reading ``mdxe.toml``.

Lookup order: the file named by ``MDXE_CONFIG`` when that variable is
set, otherwise the nearest ``mdxe.toml`` in the working directory or
any of its ancestors. No file means built-in defaults.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from mdxe.config.models import MdxeConfig

CONFIG_FILENAME = "mdxe.toml"
CONFIG_ENV_VAR = "MDXE_CONFIG"


def _from_env() -> Path | None:
    """``MDXE_CONFIG`` wins outright, even when it names a missing file."""
    explicit = Path(os.environ[CONFIG_ENV_VAR])
    return explicit if explicit.is_file() else None


def find_config(start: Path | None = None) -> Path | None:
    """Return the ``mdxe.toml`` that governs *start* (default: cwd), if any."""
    if os.environ.get(CONFIG_ENV_VAR):
        return _from_env()

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, cwd: Path | None = None) -> MdxeConfig:
    """Parse and validate *path*, or the discovered file when *path* is None."""
    source = path if path is not None else find_config(cwd)
    if source is None:
        return MdxeConfig()

    data: dict[str, Any] = tomllib.loads(source.read_text(encoding="utf-8"))
    return MdxeConfig.model_validate(data)
