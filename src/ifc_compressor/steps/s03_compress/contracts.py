"""I/O contracts for Step 03: Compressed summary table."""

from pathlib import Path

from pydantic import BaseModel, Field


class CompressInput(BaseModel):
    decomposition_path: Path = Field(..., description="decomposition.json from parse_ifc")
    replacement_map_path: Path | None = Field(
        None, description="Reviewed JSON map original -> replacement; None auto-replaces by best match"
    )


class CompressOutput(BaseModel):
    table_path: Path = Field(..., description="Semicolon-delimited summary table")
    num_groups: int = Field(..., description="Aggregated (type, material) rows")
    total_co2: float = 0.0
    total_cost: float = 0.0
    passthrough: bool = Field(False, description="Input was not recognized and copied unchanged")
