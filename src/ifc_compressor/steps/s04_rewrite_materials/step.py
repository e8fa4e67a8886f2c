"""Step 04: Apply a reviewed replacement map to the IFC file's material names.

Only IFCMATERIAL('<name>' records are touched; everything else in the file is
written back byte for byte.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ifc_compressor.core.step_base import BaseStep
from ifc_compressor.utils.io import load_replacement_map
from ._name_rewriter import apply_replacements
from .config import RewriteMaterialsConfig
from .contracts import RewriteMaterialsInput, RewriteMaterialsOutput

logger = logging.getLogger(__name__)


class RewriteMaterialsStep(BaseStep[RewriteMaterialsInput, RewriteMaterialsOutput, RewriteMaterialsConfig]):
    name: ClassVar[str] = "rewrite_materials"
    input_type: ClassVar = RewriteMaterialsInput
    output_type: ClassVar = RewriteMaterialsOutput
    config_type: ClassVar = RewriteMaterialsConfig

    def validate_inputs(self, inputs: RewriteMaterialsInput) -> bool:
        if not inputs.ifc_path.is_file():
            logger.error(f"IFC file not found: {inputs.ifc_path}")
            return False
        if inputs.replacement_map_path is None or not inputs.replacement_map_path.is_file():
            logger.error(f"Replacement map not found: {inputs.replacement_map_path}")
            return False
        return True

    def run(self, inputs: RewriteMaterialsInput) -> RewriteMaterialsOutput:
        output_dir = self.output_dir("processed")

        # newline="" keeps the file's line endings
        with open(inputs.ifc_path, encoding="utf-8", errors="surrogateescape", newline="") as f:
            text = f.read()
        replacement_map = load_replacement_map(inputs.replacement_map_path)

        new_text, count = apply_replacements(text, replacement_map)

        out_path = output_dir / f"{inputs.ifc_path.stem}{self.config.output_suffix}{inputs.ifc_path.suffix}"
        with open(out_path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(new_text)
        logger.info(f"Saved rewritten IFC -> {out_path}")

        return RewriteMaterialsOutput(rewritten_ifc_path=out_path, num_replacements=count)
