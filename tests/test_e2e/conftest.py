"""Fixtures for E2E pipeline tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

STEP_MODULES = [
    ("parse_ifc", "ifc_compressor.steps.s01_parse_ifc", []),
    ("match_materials", "ifc_compressor.steps.s02_match_materials", ["parse_ifc"]),
    ("compress", "ifc_compressor.steps.s03_compress", ["parse_ifc"]),
    ("rewrite_materials", "ifc_compressor.steps.s04_rewrite_materials", []),
]


def write_pipeline_config(
    root: Path,
    inputs: dict,
    enabled: set[str],
    database_path: Path | None = None,
) -> Path:
    """
    Write pipeline.yaml plus per-step configs under ``root``.

    Args:
        root: Directory that receives the configs and the data root
        inputs: Pipeline-level inputs seeding every step
        enabled: Names of the steps to run
        database_path: Reference CSV for the matching and compress steps

    Returns:
        Path to the pipeline.yaml
    """
    steps_dir = root / "configs" / "steps"
    steps_dir.mkdir(parents=True, exist_ok=True)
    db = str(database_path or root / "OBD.csv")
    step_configs = {
        "parse_ifc": {"strip_comments": True},
        "match_materials": {"database_path": db},
        "compress": {"database_path": db},
        "rewrite_materials": {"output_suffix": "_reviewed"},
    }

    steps = []
    for name, module, depends_on in STEP_MODULES:
        config_file = steps_dir / f"{name}.yaml"
        config_file.write_text(yaml.safe_dump(step_configs[name]), encoding="utf-8")
        steps.append({
            "name": name,
            "module": module,
            "config_file": str(config_file),
            "depends_on": depends_on,
            "enabled": name in enabled,
        })

    pipeline_file = root / "configs" / "pipeline.yaml"
    pipeline_file.write_text(
        yaml.safe_dump({
            "project_name": "e2e",
            "data_root": str(root / "data"),
            "inputs": {k: str(v) if v is not None else None for k, v in inputs.items()},
            "steps": steps,
        }),
        encoding="utf-8",
    )
    return pipeline_file


@pytest.fixture
def pipeline_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root
