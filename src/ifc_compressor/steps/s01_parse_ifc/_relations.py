"""Relation resolvers for the three STEP relationship entities.

All three share the ``(GlobalId, OwnerHistory, Name, Description,
RelatedObjects, Relating...)`` shape: one relation tuple is produced per
element in RelatedObjects (n-to-1 fan-out).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from ._entity_table import RawEntity
from ._extractors import decode_fields
from ._tokenizer import extract_ref, extract_refs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaterialRelation:
    element_id: int
    material_id: int


@dataclass(frozen=True)
class QuantityRelation:
    element_id: int
    quantity_set_id: int


@dataclass(frozen=True)
class PropertyRelation:
    element_id: int
    property_set_id: int


def _fan_out(groups: dict[str, list[RawEntity]], type_key: str) -> list[tuple[int, int]]:
    """(element_id, target_id) pairs for every well-formed relation of ``type_key``."""
    pairs: list[tuple[int, int]] = []
    skipped = 0
    for entity in groups.get(type_key, ()):
        fields = decode_fields(entity)
        if fields is None:
            skipped += 1
            continue
        target = extract_ref(fields.get("relating", ""))
        if target is None:
            skipped += 1
            continue
        for element_id in extract_refs(fields.get("related_objects", "")):
            pairs.append((element_id, target))
    if skipped:
        logger.debug(f"{type_key}: skipped {skipped} malformed relations")
    return pairs


def resolve_material_relations(groups) -> list[MaterialRelation]:
    return [MaterialRelation(e, t) for e, t in _fan_out(groups, "IFCRELASSOCIATESMATERIAL")]


def resolve_quantity_relations(groups) -> list[QuantityRelation]:
    return [QuantityRelation(e, t) for e, t in _fan_out(groups, "IFCRELDEFINESBYQUANTITY")]


def resolve_property_relations(groups) -> list[PropertyRelation]:
    return [PropertyRelation(e, t) for e, t in _fan_out(groups, "IFCRELDEFINESBYPROPERTIES")]


@dataclass
class RelationIndex:
    """Relation targets grouped by element id, in source order."""

    materials: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))
    quantities: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))
    properties: dict[int, list[int]] = field(default_factory=lambda: defaultdict(list))

    @classmethod
    def from_groups(cls, groups: dict[str, list[RawEntity]]) -> RelationIndex:
        index = cls()
        for rel in resolve_material_relations(groups):
            index.materials[rel.element_id].append(rel.material_id)
        for rel in resolve_quantity_relations(groups):
            index.quantities[rel.element_id].append(rel.quantity_set_id)
        for rel in resolve_property_relations(groups):
            index.properties[rel.element_id].append(rel.property_set_id)
        return index

    def material_ids(self, element_id: int) -> list[int]:
        return self.materials.get(element_id, [])

    def property_set_ids(self, element_id: int) -> list[int]:
        return self.properties.get(element_id, [])

    def quantity_set_ids(self, element_id: int, known_quantity_sets) -> list[int]:
        """Quantity sets of an element.

        Some exporters attach an IfcElementQuantity through
        IfcRelDefinesByProperties; those targets count when they are
        present in ``known_quantity_sets``.
        """
        ids = list(self.quantities.get(element_id, []))
        ids.extend(p for p in self.properties.get(element_id, []) if p in known_quantity_sets)
        return ids
