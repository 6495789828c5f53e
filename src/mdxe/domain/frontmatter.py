"""Frontmatter parsing and the plain / linked-data metadata split.

The preamble is read line by line rather than as one YAML document so
that a single bad line never fails the whole compile:

- ``key: value`` lines start an entry.
- Values starting with ``{`` or ``[`` are structured (JSON, with YAML
  flow syntax as a fallback); quoted scalars lose their quotes;
  anything else stays a raw string.
- An empty value followed by indented lines is a YAML block value.
- Lines that fit none of the above are skipped.

Keys starting with ``$`` or ``@`` are linked-data (type/context/ontology)
fields; everything else is plain metadata.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)

LINKED_PREFIXES: tuple[str, ...] = ("$", "@")

_FRONTMATTER_DELIMITER = "---"
_KEY_LINE = re.compile(r"^(?P<key>[^\s#\-][^\s]*?):(?:\s+(?P<value>.*))?$")


@dataclass(frozen=True)
class SplitDocument:
    """Body text plus the two disjoint metadata views."""

    body: str
    plain: dict[str, Any] = field(default_factory=dict)
    linked: dict[str, Any] = field(default_factory=dict)


def _new_yaml() -> YAML:
    """Create a fresh safe YAML loader (plain dicts and lists, no tags)."""
    return YAML(typ="safe", pure=True)


def is_linked_key(key: str) -> bool:
    return key.startswith(LINKED_PREFIXES)


# ---------------------------------------------------------------------------
# Preamble extraction
# ---------------------------------------------------------------------------


def extract_preamble(content: str) -> tuple[list[str] | None, str]:
    """Split *content* into ``(preamble_lines, body)``.

    Returns ``(None, content)`` when the document does not start with a
    delimiter line or the closing delimiter is missing.
    """
    normalized = content.replace("\r\n", "\n")
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return None, content

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return None, content

    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]
    return lines[1:end_idx], body


# ---------------------------------------------------------------------------
# Value parsing
# ---------------------------------------------------------------------------


def _parse_structured(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass
    # Unquoted keys / single quotes: accept YAML flow syntax.
    value = _new_yaml().load(raw)
    if not isinstance(value, (dict, list)):
        msg = f"Not a structured value: {raw!r}"
        raise ValueError(msg)
    return value


def parse_scalar(raw: str) -> Any:
    """Interpret a single-line frontmatter value.

    Raises:
        ValueError: If the value looks structured but does not parse.
    """
    value = raw.strip()
    if value.startswith(("{", "[")):
        try:
            return _parse_structured(value)
        except YAMLError as exc:
            msg = f"Malformed structured value: {value!r}"
            raise ValueError(msg) from exc
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_block(key: str, block: list[str]) -> Any:
    doc = "\n".join([f"{key}:", *block])
    try:
        loaded = _new_yaml().load(doc)
    except YAMLError as exc:
        msg = f"Malformed block value for {key!r}"
        raise ValueError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Malformed block value for {key!r}"
        raise ValueError(msg)
    return loaded.get(key)


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse the preamble into an ordered key/value mapping plus body.

    Malformed lines are skipped individually; this never raises on bad
    metadata.
    """
    preamble, body = extract_preamble(content)
    if preamble is None:
        return {}, body

    fm: dict[str, Any] = {}
    pending_key: str | None = None
    block: list[str] = []

    def flush() -> None:
        nonlocal pending_key, block
        if pending_key is None:
            return
        if not block:
            fm[pending_key] = ""
        else:
            try:
                fm[pending_key] = _parse_block(pending_key, block)
            except ValueError:
                logger.debug("Skipping malformed frontmatter block %r", pending_key)
        pending_key = None
        block = []

    for lineno, line in enumerate(preamble, start=2):
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        # Indented lines (or a bare "- item" list) continue an open block.
        if pending_key is not None and (line[0].isspace() or line.startswith("- ")):
            block.append(line)
            continue

        flush()
        match = _KEY_LINE.match(line)
        if match is None:
            logger.debug("Skipping malformed frontmatter line %d: %r", lineno, line)
            continue

        key = match.group("key").strip("'\"")
        value = match.group("value")
        if not key:
            logger.debug("Skipping frontmatter line %d with empty key", lineno)
            continue
        if value is None or not value.strip():
            pending_key = key
            continue
        try:
            fm[key] = parse_scalar(value)
        except ValueError:
            logger.debug("Skipping malformed frontmatter value on line %d: %r", lineno, line)

    flush()
    return fm, body


# ---------------------------------------------------------------------------
# Plain / linked split
# ---------------------------------------------------------------------------


def partition_metadata(fm: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split *fm* into ``(plain, linked)`` preserving key order.

    INVARIANT: every key lands in exactly one of the two views.
    """
    plain: dict[str, Any] = {}
    linked: dict[str, Any] = {}
    for key, value in fm.items():
        if is_linked_key(key):
            linked[key] = value
        else:
            plain[key] = value
    return plain, linked


def split_metadata(content: str) -> SplitDocument:
    """Parse *content* and split its frontmatter into plain and linked views."""
    fm, body = parse_frontmatter(content)
    plain, linked = partition_metadata(fm)
    return SplitDocument(body=body, plain=plain, linked=linked)
