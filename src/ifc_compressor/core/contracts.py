"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field


class ReferenceMaterialEntry(BaseModel):
    """One row of the reference cost/emissions database."""

    name: str
    gwp_value: float = Field(0.0, description="Global warming potential per m3")
    price_per_m3: float = Field(0.0, description="Price per m3")


class MaterialReplacement(BaseModel):
    """Replacement proposal for one material name found in a model."""

    original: str
    replacement: str | None = None
    original_entry: ReferenceMaterialEntry | None = None
    suggestions: list[str] = Field(default_factory=list)


class DecompositionRecord(BaseModel):
    """One material row of one building element."""

    element_id: str
    element_type: str = Field(..., description="IFC class without the Ifc prefix, e.g. Wall")
    material: str
    volume: float = 0.0
    area: float = 0.0
    ifc_gwp: float | None = Field(None, description="Explicit GWP from the element's property sets")


class DecompositionArtifact(BaseModel):
    """Content of decomposition.json, written by parse_ifc and read by later steps."""

    source_format: Literal["step", "compact", "unknown"]
    source_path: Path | None = None
    num_elements: int = 0
    rows: list[DecompositionRecord] = Field(default_factory=list)


class PipelineConfig(BaseModel):
    """Top-level pipeline configuration loaded from pipeline.yaml."""

    project_name: str = "ifc_compressor"
    data_root: Path = Path("./data")
    inputs: dict[str, Any] = Field(
        default_factory=dict, description="Seed values merged into every step input"
    )
    steps: list[StepEntry] = Field(default_factory=list)


class StepEntry(BaseModel):
    """One entry in the pipeline step list."""

    name: str
    module: str
    config_file: str
    depends_on: list[str] = Field(default_factory=list)
    enabled: bool = True


# Fix forward reference
PipelineConfig.model_rebuild()
