"""Emissions and cost valuation of decomposition rows.

Three regimes:
- no replacement map: every row takes its best fuzzy database match
- map with the row's material as key: the mapped name and its exact entry
  ("" keeps the original with no entry)
- map without the key: original name, no entry
Explicit element GWP replaces the database GWP factor in all regimes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from ifc_compressor.core.contracts import DecompositionRecord, ReferenceMaterialEntry
from ifc_compressor.utils.materials_db import MaterialDatabase, match_material

logger = logging.getLogger(__name__)


@dataclass
class ValuedRow:
    element_type: str
    material: str
    volume: float
    area: float
    total_co2: float
    total_cost: float


def resolve_material(
    material: str,
    db: MaterialDatabase,
    replacement_map: Mapping[str, str] | None,
) -> tuple[str, ReferenceMaterialEntry | None]:
    """Final material name and the database entry used to value it."""
    if replacement_map is None:
        best = match_material(material, db)
        if best is None:
            return material, None
        if best.name != material:
            logger.info(f'Material replaced (auto): "{material}" -> "{best.name}"')
        return best.name, best

    target = replacement_map.get(material)
    if not target:
        return material, None
    return target, db.get(target)


def value_row(
    record: DecompositionRecord,
    db: MaterialDatabase,
    replacement_map: Mapping[str, str] | None = None,
) -> ValuedRow:
    material, entry = resolve_material(record.material, db, replacement_map)
    if record.ifc_gwp is not None:
        gwp_factor = record.ifc_gwp
    else:
        gwp_factor = entry.gwp_value if entry else 0.0
    price = entry.price_per_m3 if entry else 0.0
    return ValuedRow(
        element_type=record.element_type,
        material=material,
        volume=record.volume,
        area=record.area,
        total_co2=record.volume * gwp_factor,
        total_cost=record.volume * price,
    )


def value_rows(
    records: Iterable[DecompositionRecord],
    db: MaterialDatabase,
    replacement_map: Mapping[str, str] | None = None,
) -> list[ValuedRow]:
    return [value_row(r, db, replacement_map) for r in records]
