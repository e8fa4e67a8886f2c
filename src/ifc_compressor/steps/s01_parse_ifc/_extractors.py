"""Typed entity extractors.

Every extractor is a thin mapping over a per-type field index table:
positional arguments of a STEP record are decoded by index, never by a
schema-aware grammar. Records reference each other only by integer id.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from ._entity_table import RawEntity
from ._tokenizer import clean_string, extract_ref, extract_refs, parse_number, split_arguments

logger = logging.getLogger(__name__)

VOLUME_PROPERTIES = ("NetVolume", "GrossVolume", "Volume")
AREA_PROPERTIES = ("NetArea", "GrossArea", "Area")
GWP_PROPERTIES = ("GlobalWarmingPotential", "GWP", "CO2", "GWP_A1_A3")

# Positional argument index of every decoded field, per STEP keyword.
FIELD_INDEX: dict[str, dict[str, int]] = {
    "IFCMATERIAL": {"name": 0},
    "IFCMATERIALLAYER": {"material": 0, "thickness": 1},
    "IFCMATERIALLAYERSET": {"layers": 0},
    "IFCMATERIALLAYERSETUSAGE": {"layer_set": 0},
    "IFCMATERIALLIST": {"materials": 0},
    "IFCMATERIALCONSTITUENT": {"material": 2, "fraction": 3},
    "IFCMATERIALCONSTITUENTSET": {"constituents": 2},
    "IFCQUANTITYVOLUME": {"name": 0, "value": 3},
    "IFCQUANTITYAREA": {"name": 0, "value": 3},
    "IFCELEMENTQUANTITY": {"quantities": 5},
    "IFCPROPERTYSINGLEVALUE": {"name": 0, "nominal_value": 2},
    "IFCPROPERTYSET": {"properties": 4},
    "IFCRELASSOCIATESMATERIAL": {"related_objects": 4, "relating": 5},
    "IFCRELDEFINESBYQUANTITY": {"related_objects": 4, "relating": 5},
    "IFCRELDEFINESBYPROPERTIES": {"related_objects": 4, "relating": 5},
}

# Minimum decoded argument count for a record to be considered at all.
MIN_ARGS: dict[str, int] = {
    "IFCQUANTITYVOLUME": 4,
    "IFCQUANTITYAREA": 4,
    "IFCELEMENTQUANTITY": 6,
    "IFCPROPERTYSINGLEVALUE": 3,
    "IFCPROPERTYSET": 5,
    "IFCRELASSOCIATESMATERIAL": 6,
    "IFCRELDEFINESBYQUANTITY": 6,
    "IFCRELDEFINESBYPROPERTIES": 6,
}


@dataclass(frozen=True)
class Material:
    id: int
    name: str


@dataclass(frozen=True)
class MaterialLayer:
    id: int
    material_id: int | None = None
    thickness: float | None = None


@dataclass(frozen=True)
class MaterialLayerSet:
    id: int
    layer_ids: tuple[int, ...]


@dataclass(frozen=True)
class MaterialLayerSetUsage:
    id: int
    layer_set_id: int


@dataclass(frozen=True)
class MaterialList:
    id: int
    material_ids: tuple[int, ...]


@dataclass(frozen=True)
class MaterialConstituent:
    id: int
    material_id: int | None = None
    fraction: float | None = None


@dataclass(frozen=True)
class MaterialConstituentSet:
    id: int
    constituent_ids: tuple[int, ...]


@dataclass(frozen=True)
class NamedValue:
    """A single quantity or property value (name + number)."""

    id: int
    name: str
    value: float


@dataclass
class ElementQuantity:
    id: int
    values: dict[str, float] = field(default_factory=dict)


@dataclass
class PropertySet:
    id: int
    values: dict[str, float] = field(default_factory=dict)


@dataclass
class ExtractedEntities:
    """All typed records of one model, keyed by entity id."""

    materials: dict[int, Material] = field(default_factory=dict)
    layers: dict[int, MaterialLayer] = field(default_factory=dict)
    layer_sets: dict[int, MaterialLayerSet] = field(default_factory=dict)
    layer_set_usages: dict[int, MaterialLayerSetUsage] = field(default_factory=dict)
    material_lists: dict[int, MaterialList] = field(default_factory=dict)
    constituents: dict[int, MaterialConstituent] = field(default_factory=dict)
    constituent_sets: dict[int, MaterialConstituentSet] = field(default_factory=dict)
    quantity_sets: dict[int, ElementQuantity] = field(default_factory=dict)
    property_sets: dict[int, PropertySet] = field(default_factory=dict)


def group_by_type(entities: dict[int, RawEntity]) -> dict[str, list[RawEntity]]:
    """Bucket entities by upper-case type so each extractor sees only its own kind."""
    groups: dict[str, list[RawEntity]] = defaultdict(list)
    for entity in entities.values():
        groups[entity.type.upper()].append(entity)
    return groups


def decode_fields(entity: RawEntity) -> dict[str, str] | None:
    """Decode the fields listed in FIELD_INDEX for this entity's type.

    Returns None when the record has fewer arguments than its minimum;
    fields beyond the decoded argument count are simply absent.
    """
    type_key = entity.type.upper()
    indices = FIELD_INDEX.get(type_key)
    if indices is None:
        return None
    params = split_arguments(entity.args)
    if len(params) < MIN_ARGS.get(type_key, 0):
        return None
    return {name: params[idx] for name, idx in indices.items() if idx < len(params)}


def _records(groups: dict[str, list[RawEntity]], type_key: str):
    for entity in groups.get(type_key, ()):
        fields = decode_fields(entity)
        if fields is not None:
            yield entity.id, fields


def extract_materials(groups) -> dict[int, Material]:
    out: dict[int, Material] = {}
    for eid, f in _records(groups, "IFCMATERIAL"):
        if "name" in f:
            out[eid] = Material(eid, clean_string(f["name"]))
    return out


def extract_layers(groups) -> dict[int, MaterialLayer]:
    out: dict[int, MaterialLayer] = {}
    for eid, f in _records(groups, "IFCMATERIALLAYER"):
        out[eid] = MaterialLayer(
            eid,
            material_id=extract_ref(f.get("material", "")),
            thickness=parse_number(f.get("thickness", "")),
        )
    return out


def extract_layer_sets(groups) -> dict[int, MaterialLayerSet]:
    out: dict[int, MaterialLayerSet] = {}
    for eid, f in _records(groups, "IFCMATERIALLAYERSET"):
        refs = extract_refs(f.get("layers", ""))
        if refs:
            out[eid] = MaterialLayerSet(eid, tuple(refs))
    return out


def extract_layer_set_usages(groups) -> dict[int, MaterialLayerSetUsage]:
    out: dict[int, MaterialLayerSetUsage] = {}
    for eid, f in _records(groups, "IFCMATERIALLAYERSETUSAGE"):
        ref = extract_ref(f.get("layer_set", ""))
        if ref is not None:
            out[eid] = MaterialLayerSetUsage(eid, ref)
    return out


def extract_material_lists(groups) -> dict[int, MaterialList]:
    out: dict[int, MaterialList] = {}
    for eid, f in _records(groups, "IFCMATERIALLIST"):
        refs = extract_refs(f.get("materials", ""))
        if refs:
            out[eid] = MaterialList(eid, tuple(refs))
    return out


def extract_constituents(groups) -> dict[int, MaterialConstituent]:
    out: dict[int, MaterialConstituent] = {}
    for eid, f in _records(groups, "IFCMATERIALCONSTITUENT"):
        out[eid] = MaterialConstituent(
            eid,
            material_id=extract_ref(f.get("material", "")),
            fraction=parse_number(f.get("fraction", "")),
        )
    return out


def extract_constituent_sets(groups) -> dict[int, MaterialConstituentSet]:
    out: dict[int, MaterialConstituentSet] = {}
    for eid, f in _records(groups, "IFCMATERIALCONSTITUENTSET"):
        refs = extract_refs(f.get("constituents", ""))
        if refs:
            out[eid] = MaterialConstituentSet(eid, tuple(refs))
    return out


def extract_quantity_values(groups) -> dict[int, NamedValue]:
    """IFCQUANTITYVOLUME / IFCQUANTITYAREA with a numeric value."""
    out: dict[int, NamedValue] = {}
    for type_key in ("IFCQUANTITYVOLUME", "IFCQUANTITYAREA"):
        for eid, f in _records(groups, type_key):
            value = parse_number(f.get("value", ""))
            if value is not None:
                out[eid] = NamedValue(eid, clean_string(f.get("name", "")), value)
    return out


def canonical_quantity_name(name: str) -> str | None:
    """Map an exporter's quantity name onto the volume/area whitelist."""
    n = name.upper()
    if "NETVOLUME" in n:
        return "NetVolume"
    if "GROSSVOLUME" in n:
        return "GrossVolume"
    if "NETAREA" in n:
        return "NetArea"
    if "GROSSAREA" in n:
        return "GrossArea"
    if "AREA" in n:
        return "Area"
    if "VOLUME" in n:
        return "NetVolume"
    return None


def extract_quantity_sets(groups, values: dict[int, NamedValue]) -> dict[int, ElementQuantity]:
    out: dict[int, ElementQuantity] = {}
    for eid, f in _records(groups, "IFCELEMENTQUANTITY"):
        qset = ElementQuantity(eid)
        for ref in extract_refs(f.get("quantities", "")):
            q = values.get(ref)
            if q is None:
                continue
            key = canonical_quantity_name(q.name)
            if key is not None:
                qset.values[key] = q.value
        if qset.values:
            out[eid] = qset
    return out


def _gwp_keys(name: str) -> list[str]:
    upper = name.upper()
    return [key for key in GWP_PROPERTIES if key.upper() in upper]


def extract_property_values(groups) -> dict[int, NamedValue]:
    """IFCPROPERTYSINGLEVALUE records whose name is on the GWP whitelist."""
    out: dict[int, NamedValue] = {}
    for eid, f in _records(groups, "IFCPROPERTYSINGLEVALUE"):
        name = clean_string(f.get("name", ""))
        if not _gwp_keys(name):
            continue
        value = parse_number(f.get("nominal_value", ""))
        if value is not None:
            out[eid] = NamedValue(eid, name, value)
    return out


def extract_property_sets(groups, values: dict[int, NamedValue]) -> dict[int, PropertySet]:
    out: dict[int, PropertySet] = {}
    for eid, f in _records(groups, "IFCPROPERTYSET"):
        pset = PropertySet(eid)
        for ref in extract_refs(f.get("properties", "")):
            p = values.get(ref)
            if p is None:
                continue
            for key in _gwp_keys(p.name):
                pset.values[key] = p.value
        if pset.values:
            out[eid] = pset
    return out


def extract_all(groups: dict[str, list[RawEntity]]) -> ExtractedEntities:
    """Run every typed extractor over the type-grouped entity table."""
    quantity_values = extract_quantity_values(groups)
    property_values = extract_property_values(groups)

    extracted = ExtractedEntities(
        materials=extract_materials(groups),
        layers=extract_layers(groups),
        layer_sets=extract_layer_sets(groups),
        layer_set_usages=extract_layer_set_usages(groups),
        material_lists=extract_material_lists(groups),
        constituents=extract_constituents(groups),
        constituent_sets=extract_constituent_sets(groups),
        quantity_sets=extract_quantity_sets(groups, quantity_values),
        property_sets=extract_property_sets(groups, property_values),
    )
    logger.info(
        f"Extracted {len(extracted.materials)} materials, "
        f"{len(extracted.layer_sets)} layer sets, "
        f"{len(extracted.material_lists)} material lists, "
        f"{len(extracted.constituent_sets)} constituent sets, "
        f"{len(extracted.quantity_sets)} quantity sets, "
        f"{len(extracted.property_sets)} GWP property sets"
    )
    return extracted
