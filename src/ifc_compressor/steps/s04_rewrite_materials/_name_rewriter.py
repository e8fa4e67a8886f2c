"""Write approved material names back into IFCMATERIAL records of STEP text."""

from __future__ import annotations

import logging
import re
from typing import Mapping

logger = logging.getLogger(__name__)


def effective_replacements(replacement_map: Mapping[str, str]) -> dict[str, str]:
    """Drop no-op entries (empty target or unchanged name), longest key first."""
    keys = sorted(
        (k for k, v in replacement_map.items() if k and v and v != k),
        key=len,
        reverse=True,
    )
    return {k: replacement_map[k] for k in keys}


def apply_replacements(text: str, replacement_map: Mapping[str, str]) -> tuple[str, int]:
    """Replace quoted names of ``IFCMATERIAL('<name>'`` records.

    The keyword matches case-insensitively, the name exactly. All names are
    replaced in one pass, so a replacement is never rewritten again by a
    later key. Returns the new text and the number of substitutions.
    """
    mapping = effective_replacements(replacement_map)
    if not mapping:
        return text, 0

    names = "|".join(re.escape(k) for k in mapping)
    pattern = re.compile(r"((?i:IFCMATERIAL)\s*\(\s*')(" + names + r")(')")
    new_text, count = pattern.subn(lambda m: m.group(1) + mapping[m.group(2)] + m.group(3), text)
    logger.info(f"Rewrote {count} IFCMATERIAL names ({len(mapping)} replacements)")
    return new_text, count
