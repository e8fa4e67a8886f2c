"""Reference material database: built-in defaults, OBD.csv merge, fuzzy matching."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path

from ifc_compressor.core.contracts import ReferenceMaterialEntry

logger = logging.getLogger(__name__)

MaterialDatabase = dict[str, ReferenceMaterialEntry]

DEFAULT_DATABASE_PATH = Path("OBD.csv")

# (name, GWP per m3, price per m3)
DEFAULT_MATERIALS: list[tuple[str, float, float]] = [
    ("Stahlbeton (C25/30)", 320.0, 450.0),
    ("Mauerziegel", 350.0, 550.0),
    ("Kalksandstein", 210.0, 480.0),
    ("Holz", -750.0, 900.0),
    ("Dämmung", 40.0, 250.0),
    ("Glas", 2500.0, 5000.0),
    ("Alu", 18000.0, 15000.0),
    ("Estrich", 350.0, 200.0),
    ("Gipskarton", 290.0, 600.0),
]

_PARENTHESIZED_RE = re.compile(r"\(.*?\)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


# ── Loading ──────────────────────────────────────────────────────────

def default_database() -> MaterialDatabase:
    """Fresh copy of the built-in reference table."""
    return {
        name: ReferenceMaterialEntry(name=name, gwp_value=gwp, price_per_m3=price)
        for name, gwp, price in DEFAULT_MATERIALS
    }


def _parse_gwp(raw: str) -> float:
    if not raw:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(value) else value


def merge_delimited(db: MaterialDatabase, text: str) -> int:
    """Merge a ``;``-separated table into ``db`` in place.

    The first non-blank line is the header; the name and GWP columns are the
    first headers containing ``name`` / ``gwp`` (case-insensitive). Rows
    overwrite entries of the same name and keep the existing price.
    Returns the number of merged rows.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return 0

    header = [h.strip() for h in lines[0].split(";")]
    name_idx = next((i for i, h in enumerate(header) if re.search("name", h, re.IGNORECASE)), None)
    gwp_idx = next((i for i, h in enumerate(header) if re.search("gwp", h, re.IGNORECASE)), None)

    merged = 0
    for line in lines[1:]:
        parts = [p.strip() for p in line.split(";")]
        name = ""
        if name_idx is not None and name_idx < len(parts):
            name = parts[name_idx]
        name = name or parts[0]
        if not name:
            continue
        gwp = _parse_gwp(parts[gwp_idx]) if gwp_idx is not None and gwp_idx < len(parts) else 0.0
        previous = db.get(name)
        db[name] = ReferenceMaterialEntry(
            name=name,
            gwp_value=gwp,
            price_per_m3=previous.price_per_m3 if previous else 0.0,
        )
        merged += 1
    return merged


def load_database(path: Path | str | None = DEFAULT_DATABASE_PATH) -> MaterialDatabase:
    """Build the reference database: defaults merged with an optional CSV file.

    A missing or unreadable file is not an error; the defaults are used alone.
    """
    db = default_database()
    if path is None:
        return db

    path = Path(path)
    if not path.exists():
        logger.debug(f"No reference file at {path}, using {len(db)} built-in materials")
        return db

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read reference file {path}: {e}")
        return db

    merged = merge_delimited(db, text)
    logger.info(f"Reference database: {len(db)} materials ({merged} rows from {path})")
    return db


# ── Matching ─────────────────────────────────────────────────────────

def normalize(name: str | None) -> str:
    """Lower-case, drop parenthesized parts, keep only ``[a-z0-9]``."""
    lowered = (name or "").lower()
    return _NON_ALNUM_RE.sub("", _PARENTHESIZED_RE.sub("", lowered))


def _is_match(query: str, candidate: str) -> bool:
    return query == candidate or query in candidate or candidate in query


def match_materials(material: str, db: MaterialDatabase) -> list[ReferenceMaterialEntry]:
    """All fuzzy matches for ``material`` in database order."""
    query = normalize(material)
    if not query:
        return []
    matches = []
    for entry in db.values():
        candidate = normalize(entry.name)
        if candidate and _is_match(query, candidate):
            matches.append(entry)
    return matches


def match_material(material: str, db: MaterialDatabase) -> ReferenceMaterialEntry | None:
    """Best (first) fuzzy match, or None."""
    matches = match_materials(material, db)
    return matches[0] if matches else None
