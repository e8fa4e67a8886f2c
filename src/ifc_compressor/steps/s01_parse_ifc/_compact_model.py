"""Compact JSON path: pre-parsed element lists from an external IFC loader.

Elements are normalized into the same material shapes as the STEP path and
decomposed by the same resolver.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from ._decomposition import (
    ElementDecomposition,
    MaterialPart,
    MaterialShape,
    ShapeKind,
    canonical_element_type,
    decompose,
    target_type_lookup,
)
from ._extractors import AREA_PROPERTIES, GWP_PROPERTIES, VOLUME_PROPERTIES

logger = logging.getLogger(__name__)


def lookup_number(mapping: Any, keys: Sequence[str]) -> float | None:
    """First usable number under ``keys`` (verbatim, lower, upper case).

    Empty, zero and non-numeric values are skipped.
    """
    if not isinstance(mapping, dict):
        return None
    for key in keys:
        raw = None
        for variant in (key, key.lower(), key.upper()):
            if mapping.get(variant):
                raw = mapping[variant]
                break
        if raw is None:
            continue
        try:
            number = float(raw)
        except (TypeError, ValueError):
            continue
        if not math.isnan(number):
            return number
    return None


def _optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _entry_name(entry: Any, *keys: str) -> str | None:
    if isinstance(entry, str):
        return entry or None
    if not isinstance(entry, dict):
        return None
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _parts(entries: Any, name_keys: tuple[str, ...], weight_key: str | None) -> tuple[MaterialPart, ...]:
    if not isinstance(entries, list):
        return ()
    parts = []
    for entry in entries:
        weight = None
        if weight_key is not None and isinstance(entry, dict):
            weight = _optional_float(entry.get(weight_key))
        parts.append(MaterialPart(_entry_name(entry, *name_keys), weight))
    return tuple(parts)


def compact_shapes(element: dict) -> list[MaterialShape]:
    """Material shapes described by a compact element, most specific first."""
    shapes = []
    constituents = _parts(element.get("materialConstituents"), ("material", "name"), "fraction")
    if constituents:
        shapes.append(MaterialShape(ShapeKind.CONSTITUENT_SET, constituents))
    layers = _parts(element.get("materialLayers"), ("material", "name"), "thickness")
    if layers:
        shapes.append(MaterialShape(ShapeKind.LAYER_SET, layers))
    materials = _parts(element.get("materialList"), ("name", "material"), None)
    if materials:
        shapes.append(MaterialShape(ShapeKind.MATERIAL_LIST, materials))
    material = element.get("material")
    if isinstance(material, str) and material:
        shapes.append(MaterialShape(ShapeKind.SINGLE_MATERIAL, (MaterialPart(material),)))
    return shapes


def decompose_compact_elements(
    elements: list[Any], target_entities: Sequence[str]
) -> list[ElementDecomposition]:
    """Decompose every target element of a compact model."""
    lookup = target_type_lookup(target_entities)
    out: list[ElementDecomposition] = []

    for index, element in enumerate(elements):
        if not isinstance(element, dict) or not isinstance(element.get("type"), str):
            continue
        element_type = canonical_element_type(element["type"], lookup)
        if element_type is None:
            continue

        volume = lookup_number(element.get("quantities"), VOLUME_PROPERTIES) or 0.0
        area = lookup_number(element.get("quantities"), AREA_PROPERTIES) or 0.0
        shapes = compact_shapes(element)

        out.append(
            ElementDecomposition(
                element_id=str(element.get("id", index)),
                element_type=element_type,
                volume=volume,
                area=area,
                ifc_gwp=lookup_number(element.get("properties"), GWP_PROPERTIES),
                rows=decompose(shapes, bool(shapes), volume, area),
            )
        )

    logger.info(f"Decomposed {len(out)} of {len(elements)} compact elements")
    return out
