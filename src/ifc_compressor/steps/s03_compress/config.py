"""Configuration for Step 03: Valuation and aggregation into the compressed table."""

from pathlib import Path

from pydantic import BaseModel, Field


class CompressConfig(BaseModel):
    database_path: Path | None = Field(
        Path("OBD.csv"),
        description="Optional ';'-separated reference file merged over the built-in table",
    )
    output_name: str = Field("compressed.csv", description="File name under processed/")
