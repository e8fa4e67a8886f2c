"""Replacement proposals for the material names of a model."""

from __future__ import annotations

from typing import Iterable

from ifc_compressor.core.contracts import MaterialReplacement
from ifc_compressor.utils.materials_db import MaterialDatabase, match_materials


def propose_replacements(materials: Iterable[str], db: MaterialDatabase) -> list[MaterialReplacement]:
    """One proposal per distinct material name that has database matches.

    Names already equal to their single match are left out.
    """
    proposals = []
    for name in sorted(set(materials)):
        matches = match_materials(name, db)
        if not matches:
            continue
        best = matches[0]
        if best.name == name and len(matches) == 1:
            continue
        proposals.append(
            MaterialReplacement(
                original=name,
                replacement=best.name,
                original_entry=best,
                suggestions=[m.name for m in matches],
            )
        )
    return proposals


def proposed_map(proposals: Iterable[MaterialReplacement]) -> dict[str, str]:
    return {p.original: p.replacement for p in proposals if p.replacement}
