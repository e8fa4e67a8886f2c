"""STEP text path: entity table -> typed records -> per-element decomposition."""

from __future__ import annotations

import logging
from typing import Sequence

from ._decomposition import (
    ElementDecomposition,
    MaterialPart,
    MaterialShape,
    ShapeKind,
    canonical_element_type,
    decompose,
    target_type_lookup,
)
from ._entity_table import build_entity_table, strip_comments, type_census
from ._extractors import (
    AREA_PROPERTIES,
    GWP_PROPERTIES,
    VOLUME_PROPERTIES,
    ExtractedEntities,
    extract_all,
    group_by_type,
)
from ._relations import RelationIndex

logger = logging.getLogger(__name__)


def _material_name(material_id: int | None, ex: ExtractedEntities) -> str | None:
    if material_id is None:
        return None
    material = ex.materials.get(material_id)
    if material is None or not material.name:
        return None
    return material.name


def shape_for_material_ref(material_id: int, ex: ExtractedEntities) -> MaterialShape | None:
    """Resolve the RelatingMaterial of one association into a shape.

    A usage is followed to its layer set. Dangling layer/constituent ids are
    dropped; dangling material ids become parts with no name.
    """
    cset = ex.constituent_sets.get(material_id)
    if cset is not None:
        parts = []
        for cid in cset.constituent_ids:
            c = ex.constituents.get(cid)
            if c is not None:
                parts.append(MaterialPart(_material_name(c.material_id, ex), c.fraction))
        return MaterialShape(ShapeKind.CONSTITUENT_SET, tuple(parts))

    layer_set_id = None
    if material_id in ex.layer_set_usages:
        layer_set_id = ex.layer_set_usages[material_id].layer_set_id
    elif material_id in ex.layer_sets:
        layer_set_id = material_id
    if layer_set_id is not None:
        layer_set = ex.layer_sets.get(layer_set_id)
        if layer_set is None:
            logger.debug(f"Layer set usage #{material_id} points to missing set #{layer_set_id}")
            return None
        parts = []
        for lid in layer_set.layer_ids:
            layer = ex.layers.get(lid)
            if layer is not None:
                parts.append(MaterialPart(_material_name(layer.material_id, ex), layer.thickness))
        return MaterialShape(ShapeKind.LAYER_SET, tuple(parts))

    mlist = ex.material_lists.get(material_id)
    if mlist is not None:
        parts = [MaterialPart(_material_name(mid, ex)) for mid in mlist.material_ids]
        return MaterialShape(ShapeKind.MATERIAL_LIST, tuple(parts))

    name = _material_name(material_id, ex)
    if name is not None:
        return MaterialShape(ShapeKind.SINGLE_MATERIAL, (MaterialPart(name),))

    logger.debug(f"Material reference #{material_id} could not be resolved")
    return None


def element_quantities(
    element_id: int, relations: RelationIndex, ex: ExtractedEntities
) -> tuple[float, float]:
    """(volume, area) of an element from its quantity sets, 0 when absent."""
    volume = 0.0
    area = 0.0
    for qid in relations.quantity_set_ids(element_id, ex.quantity_sets):
        qset = ex.quantity_sets.get(qid)
        if qset is None:
            continue
        if volume <= 0:
            volume = next((qset.values[p] for p in VOLUME_PROPERTIES if p in qset.values), volume)
        if area <= 0:
            area = next((qset.values[p] for p in AREA_PROPERTIES if p in qset.values), area)
        if volume > 0 and area > 0:
            break
    return volume, area


def element_gwp(element_id: int, relations: RelationIndex, ex: ExtractedEntities) -> float | None:
    """Explicit GWP carried by the element's property sets, if any."""
    for psid in relations.property_set_ids(element_id):
        pset = ex.property_sets.get(psid)
        if pset is None:
            continue
        for key in GWP_PROPERTIES:
            if key in pset.values:
                return pset.values[key]
    return None


def decompose_step_text(
    text: str,
    target_entities: Sequence[str],
    remove_comments: bool = True,
    census_top_n: int = 30,
) -> list[ElementDecomposition]:
    """Decompose every target element found in raw STEP text."""
    if remove_comments:
        text = strip_comments(text)

    entities = build_entity_table(text)
    census = ", ".join(f"{t}:{c}" for t, c in type_census(entities, census_top_n))
    logger.info(f"Parsed {len(entities)} entities. Top types: {census}")

    groups = group_by_type(entities)
    ex = extract_all(groups)
    relations = RelationIndex.from_groups(groups)
    lookup = target_type_lookup(target_entities)

    elements: list[ElementDecomposition] = []
    for entity in entities.values():
        element_type = canonical_element_type(entity.type, lookup)
        if element_type is None:
            continue

        volume, area = element_quantities(entity.id, relations, ex)
        material_ids = relations.material_ids(entity.id)
        shapes = [shape_for_material_ref(mid, ex) for mid in material_ids]

        elements.append(
            ElementDecomposition(
                element_id=str(entity.id),
                element_type=element_type,
                volume=volume,
                area=area,
                ifc_gwp=element_gwp(entity.id, relations, ex),
                rows=decompose(shapes, bool(material_ids), volume, area),
            )
        )

    logger.info(f"Decomposed {len(elements)} target elements")
    return elements
