"""I/O helpers for pipeline artifacts: replacement maps, decomposition files."""

from __future__ import annotations

import json
from pathlib import Path

from ifc_compressor.core.contracts import DecompositionArtifact


def load_replacement_map(path: Path) -> dict[str, str]:
    """Read a JSON object ``{original: replacement}``.

    ``null`` values are read as "" (keep the original).
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Replacement map must be a JSON object: {path}")
    return {str(k): "" if v is None else str(v) for k, v in raw.items()}


def save_replacement_map(mapping: dict[str, str], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(mapping, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def load_decomposition(path: Path) -> DecompositionArtifact:
    return DecompositionArtifact.model_validate_json(Path(path).read_text(encoding="utf-8"))
