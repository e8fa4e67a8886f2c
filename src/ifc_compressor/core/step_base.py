"""Typed base class shared by the compression pipeline steps.

A step reads artifacts from disk, writes new ones below ``data_root`` and
returns a small pydantic model pointing at them. The runner chains steps by
merging those output models into the next step's input.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)
ConfigT = TypeVar("ConfigT", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseStep(ABC, Generic[InputT, OutputT, ConfigT]):
    """One stage of the IFC compression pipeline.

    Concrete steps set ``name`` plus the three model types and implement
    ``validate_inputs()`` (cheap existence checks) and ``run()``::

        class CompressStep(BaseStep[CompressInput, CompressOutput, CompressConfig]):
            name = "compress"
            input_type = CompressInput
            output_type = CompressOutput
            config_type = CompressConfig
    """

    name: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]
    config_type: ClassVar[type[BaseModel]]

    def __init__(self, config: ConfigT, data_root: Path | str):
        self.config = config
        self.data_root = Path(data_root)

    @property
    def label(self) -> str:
        return self.name or type(self).__name__

    @abstractmethod
    def validate_inputs(self, inputs: InputT) -> bool:
        """False when a required input artifact is missing."""

    @abstractmethod
    def run(self, inputs: InputT) -> OutputT:
        ...

    def output_dir(self, *parts: str) -> Path:
        """``data_root / parts``, created on demand."""
        path = self.data_root.joinpath(*parts)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def execute(self, inputs: InputT) -> OutputT:
        """Validate, run and log the elapsed time.

        Raises:
            ValueError: if ``validate_inputs`` rejects the inputs.
        """
        if not self.validate_inputs(inputs):
            raise ValueError(f"[{self.label}] Input validation failed: {inputs.model_dump_json()}")

        logger.info(f"[{self.label}] Starting (data_root={self.data_root})")
        t0 = time.perf_counter()
        result = self.run(inputs)
        logger.info(f"[{self.label}] Done in {time.perf_counter() - t0:.2f}s")
        return result

    @classmethod
    def get_input_schema(cls) -> dict:
        return cls.input_type.model_json_schema()

    @classmethod
    def get_output_schema(cls) -> dict:
        return cls.output_type.model_json_schema()

    @classmethod
    def get_config_schema(cls) -> dict:
        return cls.config_type.model_json_schema()
