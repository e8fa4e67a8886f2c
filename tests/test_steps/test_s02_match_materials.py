"""Tests for S02: replacement proposals and MatchMaterialsStep."""

import json
from pathlib import Path

import pytest

from ifc_compressor.steps.s01_parse_ifc.config import ParseIfcConfig
from ifc_compressor.steps.s01_parse_ifc.contracts import ParseIfcInput
from ifc_compressor.steps.s01_parse_ifc.step import ParseIfcStep
from ifc_compressor.steps.s02_match_materials._suggestions import propose_replacements, proposed_map
from ifc_compressor.steps.s02_match_materials.config import MatchMaterialsConfig
from ifc_compressor.steps.s02_match_materials.contracts import MatchMaterialsInput
from ifc_compressor.steps.s02_match_materials.step import MatchMaterialsStep
from ifc_compressor.utils.materials_db import default_database


class TestProposeReplacements:
    def test_fuzzy_proposal(self):
        (p,) = propose_replacements(["Beton"], default_database())
        assert p.original == "Beton"
        assert p.replacement == "Stahlbeton (C25/30)"
        assert p.original_entry.gwp_value == 320.0
        assert p.suggestions == ["Stahlbeton (C25/30)"]

    def test_exact_single_match_not_proposed(self):
        assert propose_replacements(["Holz", "Mauerziegel", "Dämmung"], default_database()) == []

    def test_multiple_matches_in_database_order(self):
        (p,) = propose_replacements(["Alu-Glas Fassade"], default_database())
        assert p.suggestions == ["Glas", "Alu"]
        assert p.replacement == "Glas"

    def test_sorted_and_distinct(self):
        proposals = propose_replacements(["Holzwolle", "Beton", "Holzwolle", "Putz"], default_database())
        assert [p.original for p in proposals] == ["Beton", "Holzwolle"]

    def test_proposed_map(self):
        proposals = propose_replacements(["Beton", "Holzwolle"], default_database())
        assert proposed_map(proposals) == {"Beton": "Stahlbeton (C25/30)", "Holzwolle": "Holz"}


class TestMatchMaterialsStep:
    def test_validate_missing(self, data_root: Path):
        step = MatchMaterialsStep(config=MatchMaterialsConfig(), data_root=data_root)
        with pytest.raises(ValueError):
            step.execute(MatchMaterialsInput(decomposition_path=data_root / "nope.json"))

    def test_run(self, data_root: Path, multi_material_ifc: Path):
        s01 = ParseIfcStep(config=ParseIfcConfig(), data_root=data_root)
        parsed = s01.execute(ParseIfcInput(ifc_path=multi_material_ifc))

        config = MatchMaterialsConfig(database_path=data_root / "missing.csv")
        step = MatchMaterialsStep(config=config, data_root=data_root)
        out = step.execute(MatchMaterialsInput(decomposition_path=parsed.decomposition_path))

        assert out.num_materials == 5
        assert out.num_suggestions == 1
        proposals = json.loads(out.replacements_path.read_text(encoding="utf-8"))
        assert proposals[0]["original"] == "Beton"
        assert proposals[0]["original_entry"]["name"] == "Stahlbeton (C25/30)"
        assert json.loads(out.proposed_map_path.read_text(encoding="utf-8")) == {
            "Beton": "Stahlbeton (C25/30)"
        }
