"""Runtime configuration read from the environment.

Environment variables:

- ``BATTLE_CORE_SEED``: root seed (non-negative integer, default 42)
- ``BATTLE_CORE_STREAMS``: comma-separated stream labels
- ``BATTLE_CORE_LOG_LEVEL``: logging level name for scripts
"""

from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, Field, field_validator

from battle_core.sim.core.rng import create_rng
from battle_core.sim.core.rng_streams import DEFAULT_STREAMS, RngStreams

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CoreConfig(BaseModel):
    root_seed: int = Field(default=42, ge=0)
    stream_labels: tuple[str, ...] = DEFAULT_STREAMS
    log_level: str = "WARNING"

    @field_validator("stream_labels")
    @classmethod
    def _labels_unique(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(value)) != len(value):
            raise ValueError("stream labels must be unique")
        if any(not label for label in value):
            raise ValueError("stream labels must be non-empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level

    def build_streams(self) -> RngStreams:
        """Create the root generator and fork every configured stream."""
        return RngStreams(create_rng(self.root_seed, label="root"), self.stream_labels)


def load_config(env: Mapping[str, str] | None = None) -> CoreConfig:
    """Build a :class:`CoreConfig` from *env* (defaults to ``os.environ``)."""
    env = os.environ if env is None else env
    values: dict[str, object] = {}
    if "BATTLE_CORE_SEED" in env:
        values["root_seed"] = env["BATTLE_CORE_SEED"]
    if "BATTLE_CORE_STREAMS" in env:
        values["stream_labels"] = tuple(
            label.strip() for label in env["BATTLE_CORE_STREAMS"].split(",")
        )
    if "BATTLE_CORE_LOG_LEVEL" in env:
        values["log_level"] = env["BATTLE_CORE_LOG_LEVEL"]
    return CoreConfig.model_validate(values)


def configure_logging(config: CoreConfig) -> None:
    """Attach a stream handler at the configured level.  For scripts only."""
    logging.basicConfig(level=config.log_level, format=_LOG_FORMAT)
