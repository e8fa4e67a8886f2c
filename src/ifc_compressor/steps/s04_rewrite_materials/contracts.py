"""I/O contracts for Step 04: Material name rewriting."""

from pathlib import Path

from pydantic import BaseModel, Field


class RewriteMaterialsInput(BaseModel):
    ifc_path: Path = Field(..., description="Original IFC STEP file")
    replacement_map_path: Path | None = Field(None, description="Reviewed JSON map original -> replacement")


class RewriteMaterialsOutput(BaseModel):
    rewritten_ifc_path: Path = Field(..., description="IFC file with replaced material names")
    num_replacements: int = Field(..., description="Number of rewritten IFCMATERIAL names")
