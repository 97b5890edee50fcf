"""Pipeline configuration.

A single EpicycleConfig record is passed to the pipeline entry points and
shared by every stage, so the decomposition and the evaluation always use
the same frequency convention.

Values can also be read from the ``[epicycles]`` table of a TOML file:

    [epicycles]
    term_count = 200
    frequency_convention = "symmetric"
    centering = "mask_center"
"""

from __future__ import annotations

import logging
import os
import tomllib
from typing import Any, Literal, cast

from pydantic import BaseModel, ConfigDict, Field

from epicycle_ecs.evaluate import DEFAULT_FRAME_COUNT

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "EPICYCLES_CONFIG"
CONFIG_FILENAME = "epicycle_ecs.toml"


class EpicycleConfig(BaseModel):
    """Options recognized by the pipeline.

    Attributes:
        term_count: Maximum number of epicycles K to keep
        frequency_convention: 'symmetric' (signed, centered) or 'zero_based'
        centering: Which point of the image becomes the path origin
        min_radius: Drop epicycles with radius <= this value (0 disables)
        decompose_method: 'fft' or the O(N^2) 'direct' sum
        frame_count: Frames per animation cycle. Not read by the pipeline;
            callers pass it to trace() or sample_times() when rendering
        canny_sigma: Gaussian sigma for Canny edge detection
        canny_low: Canny low threshold on the 0..255 intensity scale
        canny_high: Canny high threshold on the 0..255 intensity scale
        dilate_radius: Radius of the square dilation footprint (0 disables)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    term_count: int = Field(default=500, ge=1)
    frequency_convention: Literal["symmetric", "zero_based"] = "symmetric"
    centering: Literal["mask_center", "centroid", "none"] = "mask_center"
    min_radius: float = Field(default=0.0, ge=0.0)
    decompose_method: Literal["fft", "direct"] = "fft"
    frame_count: int = Field(default=DEFAULT_FRAME_COUNT, ge=1)
    canny_sigma: float = Field(default=1.0, ge=0.0)
    canny_low: float = Field(default=50.0, ge=0.0)
    canny_high: float = Field(default=100.0, ge=0.0)
    dilate_radius: int = Field(default=2, ge=0)


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(f"~/{CONFIG_FILENAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_config(config_path: str | None = None, **overrides: Any) -> EpicycleConfig:
    """Load an EpicycleConfig from TOML, falling back to defaults.

    Args:
        config_path: Path to epicycle_ecs.toml (auto-detected if None)
        **overrides: Field values taking precedence over the file

    Raises:
        FileNotFoundError: If an explicit or env-provided path does not exist
        pydantic.ValidationError: If a value is invalid
    """
    resolved_path = _resolve_config_path(config_path)
    values: dict[str, Any] = {}
    if resolved_path is not None:
        if not os.path.exists(resolved_path):
            raise FileNotFoundError(
                f"Config file not found at {resolved_path}. "
                f"Set {CONFIG_ENV_VAR} or create {CONFIG_FILENAME}"
            )
        with open(resolved_path, "rb") as f:
            document = cast(dict[str, Any], tomllib.load(f))
        values = dict(document.get("epicycles", {}))
        logger.debug("Loaded config from %s: %s", resolved_path, values)
    values.update(overrides)
    return EpicycleConfig(**values)
