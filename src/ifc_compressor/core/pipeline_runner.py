"""Pipeline orchestrator: reads pipeline.yaml and executes steps in order."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from .contracts import PipelineConfig
from .step_base import BaseStep

logger = logging.getLogger(__name__)


def load_pipeline_config(config_path: Path) -> PipelineConfig:
    """Load and validate pipeline.yaml."""
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return PipelineConfig(**raw)


def load_step_config(config_path: Path, config_class: type[BaseModel]) -> BaseModel:
    """Load a step-specific YAML config into its Pydantic model.

    A missing file yields the model defaults.
    """
    if not Path(config_path).exists():
        logger.warning(f"Step config not found, using defaults: {config_path}")
        return config_class()
    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    return config_class(**raw)


def import_step_class(module_path: str) -> type[BaseStep]:
    """Return the BaseStep subclass defined in ``<module_path>.step``.

    ``module_path`` is a step package such as ``ifc_compressor.steps.s03_compress``.
    """
    step_module = importlib.import_module(f"{module_path}.step")
    candidates = [
        obj
        for obj in vars(step_module).values()
        if isinstance(obj, type)
        and issubclass(obj, BaseStep)
        and obj is not BaseStep
        and obj.__module__ == step_module.__name__
    ]
    if not candidates:
        raise ImportError(f"No step class found in {module_path}.step")
    return candidates[0]


def run_pipeline(config_path: Path, inputs: dict[str, Any] | None = None) -> dict[str, BaseModel]:
    """Execute the full pipeline from a config file.

    ``inputs`` override the pipeline-level ``inputs`` section (e.g. ``ifc_path``).
    Returns the output model of every executed step keyed by step name.
    """
    pipeline_cfg = load_pipeline_config(config_path)
    data_root = pipeline_cfg.data_root
    seed = {**pipeline_cfg.inputs, **(inputs or {})}
    results: dict[str, BaseModel] = {}

    enabled_steps = [s for s in pipeline_cfg.steps if s.enabled]
    logger.info(f"Pipeline '{pipeline_cfg.project_name}' with {len(enabled_steps)} steps")

    for entry in enabled_steps:
        logger.info(f"--- Step: {entry.name} ---")

        step_cls = import_step_class(entry.module)
        step_config = load_step_config(Path(entry.config_file), step_cls.config_type)
        step_instance = step_cls(config=step_config, data_root=data_root)

        # Seed values first, then outputs of the steps this one depends on
        input_data = dict(seed)
        for dep in entry.depends_on:
            if dep in results:
                input_data.update(results[dep].model_dump())
            else:
                logger.warning(f"Step '{entry.name}' depends on '{dep}' which has not run")

        step_input = step_cls.input_type(**input_data)
        output = step_instance.execute(step_input)
        results[entry.name] = output

    logger.info("Pipeline complete.")
    return results
