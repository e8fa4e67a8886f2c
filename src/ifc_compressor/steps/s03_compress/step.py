"""Step 03: Value decomposition rows and aggregate them into the compressed table.

The table (Typ;Material;Volumen_m3;Flaeche_m2;Total_CO2;Total_Cost) is the
compact model summary handed to downstream analysis.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from ifc_compressor.core.step_base import BaseStep
from ifc_compressor.utils.io import load_decomposition, load_replacement_map
from ifc_compressor.utils.materials_db import load_database
from ._aggregation import aggregate, format_table
from ._valuation import value_rows
from .config import CompressConfig
from .contracts import CompressInput, CompressOutput

logger = logging.getLogger(__name__)


class CompressStep(BaseStep[CompressInput, CompressOutput, CompressConfig]):
    name: ClassVar[str] = "compress"
    input_type: ClassVar = CompressInput
    output_type: ClassVar = CompressOutput
    config_type: ClassVar = CompressConfig

    def validate_inputs(self, inputs: CompressInput) -> bool:
        if not inputs.decomposition_path.is_file():
            logger.error(f"Decomposition not found: {inputs.decomposition_path}")
            return False
        if inputs.replacement_map_path is not None and not inputs.replacement_map_path.is_file():
            logger.error(f"Replacement map not found: {inputs.replacement_map_path}")
            return False
        return True

    def run(self, inputs: CompressInput) -> CompressOutput:
        output_dir = self.output_dir("processed")
        table_path = output_dir / self.config.output_name

        artifact = load_decomposition(inputs.decomposition_path)

        if artifact.source_format == "unknown":
            logger.warning("Input was not recognized as IFC, writing it through unchanged")
            text = ""
            if artifact.source_path is not None and artifact.source_path.is_file():
                text = artifact.source_path.read_text(encoding="utf-8", errors="replace")
            table_path.write_text(text, encoding="utf-8")
            return CompressOutput(table_path=table_path, num_groups=0, passthrough=True)

        replacement_map = None
        if inputs.replacement_map_path is not None:
            replacement_map = load_replacement_map(inputs.replacement_map_path)
            logger.info(f"Using {len(replacement_map)} reviewed replacements")

        db = load_database(self.config.database_path)
        valued = value_rows(artifact.rows, db, replacement_map)
        groups = aggregate(valued)

        table_path.write_text(format_table(groups), encoding="utf-8")
        logger.info(f"Aggregated {len(valued)} rows into {len(groups)} groups -> {table_path}")

        return CompressOutput(
            table_path=table_path,
            num_groups=len(groups),
            total_co2=sum(g.total_co2 for g in groups.values()),
            total_cost=sum(g.total_cost for g in groups.values()),
        )
