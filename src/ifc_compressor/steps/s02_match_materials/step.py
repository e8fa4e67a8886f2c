"""Step 02: Match extracted material names against the reference database.

Writes replacements.json (all proposals with their fuzzy suggestions) and
proposed_map.json (original -> best match) for an external review step.
"""

from __future__ import annotations

import json
import logging
from typing import ClassVar

from ifc_compressor.core.step_base import BaseStep
from ifc_compressor.utils.io import load_decomposition, save_replacement_map
from ifc_compressor.utils.materials_db import load_database
from ._suggestions import propose_replacements, proposed_map
from .config import MatchMaterialsConfig
from .contracts import MatchMaterialsInput, MatchMaterialsOutput

logger = logging.getLogger(__name__)


class MatchMaterialsStep(BaseStep[MatchMaterialsInput, MatchMaterialsOutput, MatchMaterialsConfig]):
    name: ClassVar[str] = "match_materials"
    input_type: ClassVar = MatchMaterialsInput
    output_type: ClassVar = MatchMaterialsOutput
    config_type: ClassVar = MatchMaterialsConfig

    def validate_inputs(self, inputs: MatchMaterialsInput) -> bool:
        if not inputs.decomposition_path.is_file():
            logger.error(f"Decomposition not found: {inputs.decomposition_path}")
            return False
        return True

    def run(self, inputs: MatchMaterialsInput) -> MatchMaterialsOutput:
        output_dir = self.output_dir("interim", "s02_match_materials")

        artifact = load_decomposition(inputs.decomposition_path)
        materials = {row.material for row in artifact.rows}
        logger.info(f"Loaded {len(artifact.rows)} rows with {len(materials)} distinct materials")

        db = load_database(self.config.database_path)
        proposals = propose_replacements(materials, db)

        replacements_path = output_dir / "replacements.json"
        replacements_path.write_text(
            json.dumps([p.model_dump() for p in proposals], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        map_path = save_replacement_map(proposed_map(proposals), output_dir / "proposed_map.json")
        logger.info(f"Saved {len(proposals)} replacement proposals -> {replacements_path}")

        return MatchMaterialsOutput(
            replacements_path=replacements_path,
            proposed_map_path=map_path,
            num_materials=len(materials),
            num_suggestions=len(proposals),
        )
