"""Material decomposition resolver.

Pure function over normalized material shapes, shared by the STEP text path
and the compact JSON path. Each material association of an element is turned
into one ``MaterialShape``; the most specific shape wins:

    constituent set (3) > layer set (2) > material list (1) > single material (0)

Ties keep the first shape found.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Iterable, Sequence

UNDEFINED_MATERIAL = "Nicht definiert"
UNKNOWN_MATERIAL = "Unbekannt"

DEFAULT_TARGET_ENTITIES = [
    "IfcWall", "IfcWallStandardCase", "IfcSlab", "IfcWindow", "IfcColumn", "IfcBeam",
    "IfcCovering", "IfcFooting", "IfcRoof", "IfcDoor", "IfcPlate", "IfcMember",
    "IfcBuildingElementProxy", "IfcStair", "IfcRailing", "IfcRamp",
]


class ShapeKind(IntEnum):
    """Material association shapes; the value is the priority."""

    SINGLE_MATERIAL = 0
    MATERIAL_LIST = 1
    LAYER_SET = 2
    CONSTITUENT_SET = 3


@dataclass(frozen=True)
class MaterialPart:
    """One material of a shape. ``name`` is None for a dangling reference.

    ``weight`` is the layer thickness or the constituent fraction.
    """

    name: str | None
    weight: float | None = None


@dataclass(frozen=True)
class MaterialShape:
    kind: ShapeKind
    parts: tuple[MaterialPart, ...]


@dataclass(frozen=True)
class DecompositionRow:
    material: str
    volume: float
    area: float


@dataclass
class ElementDecomposition:
    """Decomposition of one building element plus its element-level data."""

    element_id: str
    element_type: str
    volume: float = 0.0
    area: float = 0.0
    ifc_gwp: float | None = None
    rows: list[DecompositionRow] = field(default_factory=list)


def _part_name(part: MaterialPart) -> str:
    return part.name or UNKNOWN_MATERIAL


def _apportion_single(parts, volume, area) -> list[DecompositionRow]:
    return [DecompositionRow(_part_name(parts[0]), volume, area)]


def _apportion_list(parts, volume, area) -> list[DecompositionRow]:
    n = len(parts)
    return [DecompositionRow(_part_name(p), volume / n, area / n) for p in parts]


def _apportion_layers(parts, volume, area) -> list[DecompositionRow]:
    thicknesses = [p.weight or 0.0 for p in parts]
    total = sum(thicknesses)
    if total > 0:
        return [
            DecompositionRow(_part_name(p), volume * (t / total), area)
            for p, t in zip(parts, thicknesses)
        ]
    # No thickness anywhere: even split
    share = volume / len(parts)
    return [DecompositionRow(_part_name(p), share, area) for p in parts]


def _apportion_constituents(parts, volume, area) -> list[DecompositionRow]:
    defined = sum(p.weight * volume for p in parts if p.weight is not None)
    undefined_count = sum(1 for p in parts if p.weight is None)
    remaining = max(0.0, volume - defined)
    per_undefined = remaining / undefined_count if undefined_count else 0.0
    return [
        DecompositionRow(
            _part_name(p),
            p.weight * volume if p.weight is not None else per_undefined,
            area,
        )
        for p in parts
    ]


APPORTION: dict[ShapeKind, Callable[..., list[DecompositionRow]]] = {
    ShapeKind.SINGLE_MATERIAL: _apportion_single,
    ShapeKind.MATERIAL_LIST: _apportion_list,
    ShapeKind.LAYER_SET: _apportion_layers,
    ShapeKind.CONSTITUENT_SET: _apportion_constituents,
}


def select_shape(shapes: Iterable[MaterialShape | None]) -> MaterialShape | None:
    """Highest-priority shape with at least one part; first one wins ties."""
    best: MaterialShape | None = None
    for shape in shapes:
        if shape is None or not shape.parts:
            continue
        if best is None or shape.kind > best.kind:
            best = shape
    return best


def decompose(
    shapes: Sequence[MaterialShape | None],
    has_relation: bool,
    total_volume: float,
    total_area: float,
) -> list[DecompositionRow]:
    """Split an element's volume/area over its materials.

    Args:
        shapes: one resolved shape (or None when unresolvable) per material association
        has_relation: whether the element has any material association at all
        total_volume: element volume, negative values are treated as 0
        total_area: element area
    """
    if not has_relation:
        return [DecompositionRow(UNDEFINED_MATERIAL, total_volume, total_area)]

    volume = total_volume if total_volume > 0 else 0.0
    best = select_shape(shapes)
    if best is None:
        return [DecompositionRow(UNKNOWN_MATERIAL, volume, total_area)]
    return APPORTION[best.kind](best.parts, volume, total_area)


def _strip_ifc(name: str) -> str:
    return name[3:] if name[:3].upper() == "IFC" else name


def target_type_lookup(targets: Sequence[str]) -> dict[str, str]:
    """Upper-case class name without ``Ifc`` -> canonical name without ``Ifc``."""
    return {_strip_ifc(t).upper(): _strip_ifc(t) for t in targets}


def canonical_element_type(type_name: str, lookup: dict[str, str]) -> str | None:
    """Target class name without the ``Ifc`` prefix, or None if not a target.

    ``IFCWALL`` and ``IfcWall`` both map to ``Wall``.
    """
    return lookup.get(_strip_ifc(type_name).upper())
