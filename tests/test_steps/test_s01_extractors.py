"""Tests for S01: typed entity extractors and relation resolvers."""

import pytest

from ifc_compressor.steps.s01_parse_ifc._entity_table import RawEntity, build_entity_table
from ifc_compressor.steps.s01_parse_ifc._extractors import (
    canonical_quantity_name,
    decode_fields,
    extract_all,
    extract_property_sets,
    extract_property_values,
    extract_quantity_sets,
    extract_quantity_values,
    group_by_type,
)
from ifc_compressor.steps.s01_parse_ifc._relations import (
    RelationIndex,
    resolve_material_relations,
    resolve_property_relations,
    resolve_quantity_relations,
)


def _groups(*records: str):
    return group_by_type(build_entity_table("\n".join(records)))


# ── Field decoding ──


class TestDecodeFields:
    def test_known_type(self):
        entity = RawEntity(1, "IfcMaterialConstituent", "'A',$,#23,0.5,$")
        assert decode_fields(entity) == {"material": "#23", "fraction": "0.5"}

    def test_unknown_type(self):
        assert decode_fields(RawEntity(1, "IFCWALL", "'w',$")) is None

    def test_too_few_arguments(self):
        assert decode_fields(RawEntity(1, "IFCRELASSOCIATESMATERIAL", "'r',$,$,$,(#10)")) is None

    def test_missing_trailing_fields_are_absent(self):
        assert decode_fields(RawEntity(1, "IFCMATERIALLAYER", "#20")) == {"material": "#20"}


# ── Material extractors ──


class TestMaterialExtractors:
    def test_extract_all(self, entity_groups):
        ex = extract_all(entity_groups)
        assert {m.name for m in ex.materials.values()} == {"Putz", "Mauerziegel", "Dämmung", "Beton"}
        assert ex.layers[30].material_id == 20
        assert ex.layers[30].thickness == pytest.approx(100.0)
        assert ex.layer_sets[33].layer_ids == (30, 31, 32)
        assert ex.layer_set_usages[34].layer_set_id == 33
        assert ex.material_lists[55].material_ids == (21, 23)
        assert ex.constituents[50].fraction == pytest.approx(0.5)
        assert ex.constituents[51].fraction is None
        assert ex.constituent_sets[53].constituent_ids == (50, 51, 52)

    def test_lowercase_keyword(self):
        ex = extract_all(_groups("#1=IfcMaterial('Glas',$,$);"))
        assert ex.materials[1].name == "Glas"


# ── Quantities and properties ──


class TestQuantities:
    @pytest.mark.parametrize("name, expected", [
        ("NetVolume", "NetVolume"),
        ("GrossVolume", "GrossVolume"),
        ("NetArea", "NetArea"),
        ("GrossFootprintArea", "Area"),
        ("NetSideArea", "Area"),
        ("Volume", "NetVolume"),
        ("Length", None),
    ])
    def test_canonical_quantity_name(self, name, expected):
        assert canonical_quantity_name(name) == expected

    def test_quantity_set(self, entity_groups):
        qsets = extract_quantity_sets(entity_groups, extract_quantity_values(entity_groups))
        assert qsets[62].values == {"NetVolume": 10.0, "Area": 5.0}

    def test_set_without_recognized_quantity_dropped(self):
        groups = _groups(
            "#1=IFCQUANTITYLENGTH('Width',$,$,0.3,$);",
            "#2=IFCQUANTITYAREA('Height',$,$,2.,$);",
            "#3=IFCELEMENTQUANTITY('q',$,'Qto',$,$,(#1));",
        )
        assert extract_quantity_sets(groups, extract_quantity_values(groups)) == {}


class TestProperties:
    def test_gwp_whitelist_substring(self):
        groups = _groups(
            "#1=IFCPROPERTYSINGLEVALUE('GWP_A1_A3',$,IFCREAL(120.),$);",
            "#2=IFCPROPERTYSINGLEVALUE('FireRating',$,IFCLABEL('F90'),$);",
            "#3=IFCPROPERTYSET('p',$,'Pset',$,(#1,#2));",
        )
        values = extract_property_values(groups)
        assert list(values) == [1]
        psets = extract_property_sets(groups, values)
        assert psets[3].values == {"GWP": 120.0, "GWP_A1_A3": 120.0}

    def test_negative_gwp(self, entity_groups):
        psets = extract_property_sets(entity_groups, extract_property_values(entity_groups))
        assert psets[71].values == {"GlobalWarmingPotential": -12.5}


# ── Relations ──


class TestRelations:
    def test_fan_out(self, entity_groups):
        rels = resolve_quantity_relations(entity_groups)
        assert [(r.element_id, r.quantity_set_id) for r in rels] == [
            (10, 62), (11, 62), (12, 62), (13, 62),
        ]

    def test_material_relations_in_source_order(self, entity_groups):
        rels = resolve_material_relations(entity_groups)
        assert [(r.element_id, r.material_id) for r in rels] == [
            (10, 23), (10, 34), (11, 53), (13, 55),
        ]

    def test_malformed_relation_skipped(self):
        groups = _groups(
            "#1=IFCRELASSOCIATESMATERIAL('r',$,$,$,(#10));",
            "#2=IFCRELDEFINESBYPROPERTIES('p',$,$,$,(#10),$);",
        )
        assert resolve_material_relations(groups) == []
        assert resolve_property_relations(groups) == []

    def test_quantity_set_attached_by_properties(self):
        groups = _groups(
            "#1=IFCQUANTITYVOLUME('NetVolume',$,$,2.,$);",
            "#2=IFCELEMENTQUANTITY('q',$,'Qto',$,$,(#1));",
            "#3=IFCPROPERTYSET('p',$,'Pset',$,());",
            "#4=IFCRELDEFINESBYPROPERTIES('r1',$,$,$,(#10),#2);",
            "#5=IFCRELDEFINESBYPROPERTIES('r2',$,$,$,(#10),#3);",
        )
        qsets = extract_quantity_sets(groups, extract_quantity_values(groups))
        index = RelationIndex.from_groups(groups)
        assert index.quantity_set_ids(10, qsets) == [2]
        assert index.property_set_ids(10) == [2, 3]
        assert index.material_ids(10) == []
