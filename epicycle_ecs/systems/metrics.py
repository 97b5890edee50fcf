"""Reconstruction quality metric.

Stores its result in World metadata rather than creating a component.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
from skimage.metrics import mean_squared_error

from epicycle_ecs.components.epicycles import EpicycleSet
from epicycle_ecs.components.points import OrderedPath
from epicycle_ecs.core.system import System
from epicycle_ecs.evaluate import trace

if TYPE_CHECKING:
    from epicycle_ecs.core.world import World


def reconstruction_mse(points: np.ndarray, epicycles: EpicycleSet) -> float:
    """Per-coordinate MSE between a path and the epicycles at its sample times."""
    n = len(points)
    recon = trace(epicycles, 2.0 * math.pi * np.arange(n) / n)
    return float(mean_squared_error(points, recon))


class MetricReconstructionMSE(System):
    """Mean squared error of the epicycle reconstruction.

    Stores result in world.metadata[eid]['reconstruction_mse'].
    """

    def required_components(self) -> list[type]:
        return [OrderedPath, EpicycleSet]

    def produced_components(self) -> list[type]:
        return []

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            path = world.get_component(eid, OrderedPath)
            epicycles = world.get_component(eid, EpicycleSet)
            points = world.arena.view(path.points)
            world.metadata[eid]["reconstruction_mse"] = reconstruction_mse(points, epicycles)
