"""Input format detection: data URI, compact JSON model, STEP text."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

logger = logging.getLogger(__name__)

SourceFormat = Literal["step", "compact", "unknown"]

_STEP_RECORD_RE = re.compile(r"#\d+\s*=\s*IFC", re.IGNORECASE)


@dataclass
class DetectedInput:
    source_format: SourceFormat
    text: str
    elements: list[Any] | None = None


def decode_data_uri(text: str) -> str:
    """Decode the base64 payload of a ``data:`` URI; other text is returned as is."""
    if not text.strip().startswith("data:"):
        return text
    comma = text.find(",")
    if comma == -1:
        return text
    try:
        raw = base64.b64decode(text[comma + 1:].strip())
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Failed to decode data URI: {e}")
        return text
    return raw.decode("utf-8", errors="replace")


def detect_input(content: str | bytes) -> DetectedInput:
    """Classify the input, checking data URI, compact JSON and STEP text in that order."""
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    text = decode_data_uri(content)

    trimmed = text.strip()
    if trimmed.startswith(("{", "[")):
        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict) and isinstance(parsed.get("elements"), list):
            return DetectedInput("compact", text, parsed["elements"])

    if "ISO-10303-21" in text or "DATA;" in text or _STEP_RECORD_RE.search(text):
        return DetectedInput("step", text)

    logger.warning("Input format not recognized, content is passed through unchanged")
    return DetectedInput("unknown", text)
