"""Step 01: Parse IFC input (STEP text or compact JSON) into material decompositions.

Output is decomposition.json: one record per (element, material) row, before
any reference database lookup. Unrecognized input is recorded with
source_format "unknown" so later steps can pass it through unchanged.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ifc_compressor.core.contracts import DecompositionArtifact, DecompositionRecord
from ifc_compressor.core.step_base import BaseStep
from ._compact_model import decompose_compact_elements
from ._decomposition import ElementDecomposition
from ._input_detection import DetectedInput, detect_input
from ._step_model import decompose_step_text
from .config import ParseIfcConfig
from .contracts import ParseIfcInput, ParseIfcOutput

logger = logging.getLogger(__name__)


def decompose_input(detected: DetectedInput, config: ParseIfcConfig) -> list[ElementDecomposition]:
    """Route detected input to the STEP or compact decomposition path."""
    if detected.source_format == "compact":
        return decompose_compact_elements(detected.elements or [], config.target_entities)
    if detected.source_format == "step":
        return decompose_step_text(
            detected.text,
            config.target_entities,
            remove_comments=config.strip_comments,
            census_top_n=config.census_top_n,
        )
    return []


def to_records(elements: list[ElementDecomposition]) -> list[DecompositionRecord]:
    """Flatten element decompositions into one record per material row."""
    return [
        DecompositionRecord(
            element_id=el.element_id,
            element_type=el.element_type,
            material=row.material,
            volume=row.volume,
            area=row.area,
            ifc_gwp=el.ifc_gwp,
        )
        for el in elements
        for row in el.rows
    ]


class ParseIfcStep(BaseStep[ParseIfcInput, ParseIfcOutput, ParseIfcConfig]):
    name: ClassVar[str] = "parse_ifc"
    input_type: ClassVar = ParseIfcInput
    output_type: ClassVar = ParseIfcOutput
    config_type: ClassVar = ParseIfcConfig

    def validate_inputs(self, inputs: ParseIfcInput) -> bool:
        if not inputs.ifc_path.is_file():
            logger.error(f"IFC file not found: {inputs.ifc_path}")
            return False
        return True

    def run(self, inputs: ParseIfcInput) -> ParseIfcOutput:
        output_dir = self.output_dir("interim", "s01_parse_ifc")

        content = inputs.ifc_path.read_text(encoding="utf-8", errors="replace")
        logger.info(f"Read {len(content)} characters from {inputs.ifc_path.name}")

        detected = detect_input(content)
        logger.info(f"Detected input format: {detected.source_format}")

        elements = decompose_input(detected, self.config)
        records = to_records(elements)

        artifact = DecompositionArtifact(
            source_format=detected.source_format,
            source_path=inputs.ifc_path,
            num_elements=len(elements),
            rows=records,
        )
        decomposition_path = output_dir / "decomposition.json"
        decomposition_path.write_text(artifact.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Saved {len(records)} rows of {len(elements)} elements -> {decomposition_path}")

        return ParseIfcOutput(
            decomposition_path=decomposition_path,
            source_format=detected.source_format,
            num_elements=len(elements),
            num_rows=len(records),
            materials=sorted({r.material for r in records}),
        )
