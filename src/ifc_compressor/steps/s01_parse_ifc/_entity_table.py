"""Entity table builder: one linear scan of ISO-10303-21 text.

Produces ``{id: RawEntity}`` for every ``#id=TYPE(...)`` record. All typed
extractors work on this table, never on the raw text.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_HEADER_RE = re.compile(r"#(\d+)\s*=\s*([A-Za-z0-9_]+)\s*\(")
_DELIM_RE = re.compile(r"[()']")
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


@dataclass(frozen=True)
class RawEntity:
    """One ``#id=TYPE(args)`` record; ``args`` excludes the outer parentheses."""

    id: int
    type: str
    args: str


def strip_comments(text: str) -> str:
    """Remove ``/* ... */`` comments so apostrophes in them cannot open a string."""
    return _COMMENT_RE.sub("", text)


def _find_close_paren(text: str, start: int) -> int:
    """Return the index of the paren closing the one just before ``start``, or -1.

    Parentheses inside quoted strings are ignored.
    """
    depth = 1
    in_quote = False
    for m in _DELIM_RE.finditer(text, start):
        idx = m.start()
        char = m.group(0)
        if char == "'":
            if text[idx - 1] != "\\":
                in_quote = not in_quote
            continue
        if in_quote:
            continue
        if char == "(":
            depth += 1
        else:
            depth -= 1
            if depth == 0:
                return idx
    return -1


def build_entity_table(text: str) -> dict[int, RawEntity]:
    """Scan ``text`` once and collect every well-formed entity record.

    Stray ``#`` characters are skipped one character at a time; entities
    without a matching close paren are dropped.
    """
    entities: dict[int, RawEntity] = {}
    pos = 0
    skipped = 0

    while True:
        start = text.find("#", pos)
        if start == -1:
            break

        m = _HEADER_RE.match(text, start)
        if m is None:
            pos = start + 1
            continue

        open_paren = m.end() - 1
        close_paren = _find_close_paren(text, open_paren + 1)
        if close_paren == -1:
            skipped += 1
            pos = start + 1
            continue

        entity_id = int(m.group(1))
        entities[entity_id] = RawEntity(
            id=entity_id,
            type=m.group(2),
            args=text[open_paren + 1:close_paren],
        )
        pos = close_paren + 1

    if skipped:
        logger.debug(f"Skipped {skipped} unterminated entity records")
    return entities


def type_census(entities: dict[int, RawEntity], top_n: int = 30) -> list[tuple[str, int]]:
    """Most frequent entity types (upper-case) with their counts."""
    counts = Counter(e.type.upper() for e in entities.values())
    return counts.most_common(top_n)
