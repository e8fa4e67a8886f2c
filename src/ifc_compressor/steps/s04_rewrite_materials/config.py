"""Configuration for Step 04: Rewrite material names in the IFC file."""

from pydantic import BaseModel, Field


class RewriteMaterialsConfig(BaseModel):
    output_suffix: str = Field("_rewritten", description="Appended to the input file stem")
