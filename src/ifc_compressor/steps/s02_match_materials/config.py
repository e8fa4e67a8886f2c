"""Configuration for Step 02: Match materials against the reference database."""

from pathlib import Path

from pydantic import BaseModel, Field


class MatchMaterialsConfig(BaseModel):
    database_path: Path | None = Field(
        Path("OBD.csv"),
        description="Optional ';'-separated reference file merged over the built-in table",
    )
