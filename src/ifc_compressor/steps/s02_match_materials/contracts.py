"""I/O contracts for Step 02: Material matching and replacement suggestions."""

from pathlib import Path

from pydantic import BaseModel, Field


class MatchMaterialsInput(BaseModel):
    decomposition_path: Path = Field(..., description="decomposition.json from parse_ifc")


class MatchMaterialsOutput(BaseModel):
    replacements_path: Path = Field(..., description="JSON list of MaterialReplacement proposals")
    proposed_map_path: Path = Field(..., description="JSON object original -> best match, ready for review")
    num_materials: int = Field(..., description="Distinct material names found")
    num_suggestions: int = Field(..., description="Materials with at least one proposal")
