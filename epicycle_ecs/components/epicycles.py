"""Epicycle descriptors.

Unlike the other components these hold plain values rather than arena
refs: an EpicycleSet is kept for a whole animation run, long after the
World that computed it has been cleared.
"""

from __future__ import annotations

import math
from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from epicycle_ecs.components.image import Component


class Epicycle(BaseModel):
    """One rotating vector of the chain.

    Attributes:
        frequency: Signed frequency index k (turns per cycle)
        radius: |amplitude| / N
        phase: Argument of the amplitude, in [-pi, pi]
        angular_velocity: 2*pi*k / N, radians per path sample
    """

    model_config = ConfigDict(frozen=True)

    frequency: int
    radius: float = Field(ge=0.0)
    phase: float = Field(ge=-math.pi, le=math.pi)
    angular_velocity: float


class EpicycleSet(Component):
    """Selected epicycles, sorted by descending radius.

    Attributes:
        epicycles: Descriptors in summation order
        signal_length: Length N of the decomposed path
        convention: Frequency-index convention used by the decomposition
        center: Image-space point corresponding to the origin
    """

    model_config = ConfigDict(frozen=True)

    epicycles: tuple[Epicycle, ...]
    signal_length: int = Field(ge=1)
    convention: Literal["symmetric", "zero_based"] = "symmetric"
    center: tuple[float, float] = (0.0, 0.0)

    def __len__(self) -> int:
        return len(self.epicycles)

    @property
    def radii(self) -> np.ndarray:
        return np.array([e.radius for e in self.epicycles], dtype=np.float64)

    @property
    def phases(self) -> np.ndarray:
        return np.array([e.phase for e in self.epicycles], dtype=np.float64)

    @property
    def frequencies(self) -> np.ndarray:
        return np.array([e.frequency for e in self.epicycles], dtype=np.int64)
