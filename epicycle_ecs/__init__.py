"""Fourier epicycles from image silhouettes, built on an ECS pipeline.

An image's edges are chained into a single path, the path is transformed
with a discrete Fourier transform and the dominant terms become epicycles:
rotating vectors whose summed tip redraws the silhouette.

Quick Start:
    >>> from epicycle_ecs import EpicycleConfig, epicycles_from_points, evaluate
    >>> square = [(0, 0), (1, 0), (1, 1), (0, 1)]
    >>> epicycles = epicycles_from_points(square, EpicycleConfig(centering="none"))
    >>> evaluate(epicycles, 0.0)  # ~ (0.0, 0.0)

For more control, run the systems directly:
    >>> from epicycle_ecs.core.world import World
    >>> world = World()
    >>> entity = world.spawn_mask(mask)
    >>> epicycles = (
    ...     world.pipe(entity)
    ...     .to(IngestPoints())
    ...     .to(SequencePath(centering="centroid"))
    ...     .to(SpectralDecompose(convention="symmetric"))
    ...     .to(SelectEpicycles(term_count=200))
    ...     .out(EpicycleSet)
    ... )
"""

__version__ = "0.1.0"

from epicycle_ecs.api import (
    epicycles_from_file,
    epicycles_from_image,
    epicycles_from_mask,
    epicycles_from_points,
    load_grayscale,
)
from epicycle_ecs.components.epicycles import Epicycle, EpicycleSet
from epicycle_ecs.config import EpicycleConfig, load_config
from epicycle_ecs.errors import DegenerateSignal, InvalidInput
from epicycle_ecs.evaluate import evaluate, partial_sums, sample_times, trace

__all__ = [
    "__version__",
    "DegenerateSignal",
    "Epicycle",
    "EpicycleConfig",
    "EpicycleSet",
    "InvalidInput",
    "epicycles_from_file",
    "epicycles_from_image",
    "epicycles_from_mask",
    "epicycles_from_points",
    "evaluate",
    "load_config",
    "load_grayscale",
    "partial_sums",
    "sample_times",
    "trace",
]
