"""I/O contracts for Step 01: Parse IFC input."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ParseIfcInput(BaseModel):
    ifc_path: Path = Field(..., description="IFC STEP file, compact JSON model, or data URI text file")


class ParseIfcOutput(BaseModel):
    decomposition_path: Path = Field(..., description="Path to decomposition.json")
    source_format: Literal["step", "compact", "unknown"]
    num_elements: int = Field(..., description="Number of decomposed target elements")
    num_rows: int = Field(..., description="Number of material rows")
    materials: list[str] = Field(default_factory=list, description="Distinct material names, sorted")
