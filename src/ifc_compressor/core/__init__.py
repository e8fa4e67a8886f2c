"""IFC compressor core: pipeline runner, base step, shared contracts."""

from .step_base import BaseStep
from .contracts import (
    DecompositionArtifact,
    DecompositionRecord,
    MaterialReplacement,
    PipelineConfig,
    ReferenceMaterialEntry,
    StepEntry,
)
from .pipeline_runner import run_pipeline, load_pipeline_config
from .logging import setup_logging

__all__ = [
    "BaseStep",
    "PipelineConfig",
    "StepEntry",
    "DecompositionArtifact",
    "DecompositionRecord",
    "ReferenceMaterialEntry",
    "MaterialReplacement",
    "run_pipeline",
    "load_pipeline_config",
    "setup_logging",
]
