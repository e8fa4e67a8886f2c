"""Shared pytest fixtures and markers for step tests."""

import pytest


def _has_ifcopenshell() -> bool:
    try:
        import ifcopenshell  # noqa: F401
        return True
    except ImportError:
        return False


needs_ifc = pytest.mark.skipif(
    not _has_ifcopenshell(), reason="ifcopenshell not installed"
)


@pytest.fixture
def entity_groups():
    """Type-grouped entity table of the multi-material sample model."""
    from ifc_compressor.steps.s01_parse_ifc._entity_table import build_entity_table
    from ifc_compressor.steps.s01_parse_ifc._extractors import group_by_type
    from tests.conftest import MULTI_MATERIAL_IFC

    return group_by_type(build_entity_table(MULTI_MATERIAL_IFC))
