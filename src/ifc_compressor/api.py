"""In-memory entry points: compress, suggest replacements, rewrite material names.

Every call builds its tables fresh from ``content`` and keeps no state, so
calls on independent inputs can run concurrently.
"""

from __future__ import annotations

import logging
from typing import Mapping

from ifc_compressor.core.contracts import MaterialReplacement
from ifc_compressor.steps.s01_parse_ifc._input_detection import detect_input
from ifc_compressor.steps.s01_parse_ifc.config import ParseIfcConfig
from ifc_compressor.steps.s01_parse_ifc.step import decompose_input, to_records
from ifc_compressor.steps.s02_match_materials._suggestions import propose_replacements
from ifc_compressor.steps.s03_compress._aggregation import aggregate, format_table
from ifc_compressor.steps.s03_compress._valuation import value_rows
from ifc_compressor.steps.s04_rewrite_materials._name_rewriter import apply_replacements
from ifc_compressor.utils.materials_db import MaterialDatabase, load_database

logger = logging.getLogger(__name__)


def compress_ifc(
    content: str | bytes,
    replacement_map: Mapping[str, str] | None = None,
    database: MaterialDatabase | None = None,
    config: ParseIfcConfig | None = None,
) -> str:
    """Summarize an IFC model as ``Typ;Material;Volumen_m3;Flaeche_m2;Total_CO2;Total_Cost``.

    Unrecognized content is returned unchanged.
    """
    config = config or ParseIfcConfig()
    detected = detect_input(content)
    if detected.source_format == "unknown":
        return content if isinstance(content, str) else detected.text

    records = to_records(decompose_input(detected, config))
    db = database if database is not None else load_database()
    return format_table(aggregate(value_rows(records, db, replacement_map)))


def propose_material_replacements(
    content: str | bytes,
    database: MaterialDatabase | None = None,
    config: ParseIfcConfig | None = None,
) -> list[MaterialReplacement]:
    """Database suggestions for every distinct material name in the model."""
    config = config or ParseIfcConfig()
    records = to_records(decompose_input(detect_input(content), config))
    db = database if database is not None else load_database()
    return propose_replacements((r.material for r in records), db)


def apply_replacements_to_ifc(content: str, replacement_map: Mapping[str, str]) -> str:
    """Rewrite approved names inside ``IFCMATERIAL`` records; other text is untouched."""
    new_content, _ = apply_replacements(content, replacement_map)
    return new_content
