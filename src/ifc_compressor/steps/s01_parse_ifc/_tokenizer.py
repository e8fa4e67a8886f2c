"""STEP argument tokenizer and scalar decoders.

The tokenizer only splits; decoding (numbers, quoted strings, ``#id``
references) is done by the small helpers below on the raw argument text.
"""

from __future__ import annotations

import re

_REF_RE = re.compile(r"#(\d+)")
# Tolerates bare numbers and numbers wrapped in a type constructor,
# e.g. ``25.0`` or ``IFCVOLUMEMEASURE(25.)``.
_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]*)?(?:[Ee][+-]?[0-9]+)?")


def split_arguments(args: str) -> list[str]:
    """Split an entity argument list on top-level commas.

    Commas inside single-quoted strings or nested parentheses are kept.
    A quote preceded by a backslash does not toggle the string state.
    Malformed input degrades to a best-effort split.

    >>> split_arguments("'a, b', (c,d), e")
    ["'a, b'", '(c,d)', 'e']
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quote = False
    prev = ""

    for char in args:
        if char == "'" and prev != "\\":
            in_quote = not in_quote
        if not in_quote:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1

        if char == "," and depth == 0 and not in_quote:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        prev = char

    if current:
        parts.append("".join(current).strip())
    return parts


def clean_string(value: str) -> str:
    """Strip the surrounding quotes of a STEP string ('Text' -> Text)."""
    if not value:
        return ""
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return value[1:-1]
    return value


def parse_number(value: str) -> float | None:
    """Extract the first number from raw argument text, or None."""
    if not value:
        return None
    m = _NUMBER_RE.search(value)
    if m is None:
        return None
    try:
        return float(m.group(0))
    except ValueError:
        return None


def extract_ref(value: str) -> int | None:
    """Return the first ``#id`` reference in the argument, or None."""
    m = _REF_RE.search(value or "")
    return int(m.group(1)) if m else None


def extract_refs(value: str) -> list[int]:
    """Return every ``#id`` reference in the argument, in order."""
    return [int(m) for m in _REF_RE.findall(value or "")]
