"""Configuration for Step 01: Parse IFC input into per-element decompositions."""

from pydantic import BaseModel, Field

from ._decomposition import DEFAULT_TARGET_ENTITIES


class ParseIfcConfig(BaseModel):
    target_entities: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TARGET_ENTITIES),
        description="IFC classes that are decomposed (case-insensitive, Ifc prefix optional)",
    )
    strip_comments: bool = Field(True, description="Remove /* ... */ comments before scanning")
    census_top_n: int = Field(30, ge=0, description="Entity types listed in the type census log")
