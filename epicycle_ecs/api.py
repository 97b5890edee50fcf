"""High-level API: silhouette in, epicycles out.

Each entry point builds a World sized for its input, runs the pipeline
configured by an EpicycleConfig and returns the resulting EpicycleSet,
which stays valid after the World is cleared.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from skimage.color import rgb2gray
from skimage.io import imread

from epicycle_ecs.components.epicycles import EpicycleSet
from epicycle_ecs.config import EpicycleConfig
from epicycle_ecs.core.pipeline import Pipe
from epicycle_ecs.core.world import World
from epicycle_ecs.systems.edges import ExtractEdges
from epicycle_ecs.systems.fourier import SpectralDecompose
from epicycle_ecs.systems.ingest import IngestPoints, normalize_coords
from epicycle_ecs.systems.select import SelectEpicycles
from epicycle_ecs.systems.sequence import SequencePath

logger = logging.getLogger(__name__)

# Bytes per pixel covering the mask, image and every per-point intermediate
_ARENA_BYTES_PER_ELEMENT = 96
_ARENA_MIN_BYTES = 1 << 20


def _arena_bytes(elements: int) -> int:
    return _ARENA_MIN_BYTES + _ARENA_BYTES_PER_ELEMENT * elements


def _spectral_stages(pipe: Pipe, config: EpicycleConfig) -> EpicycleSet:
    return (
        pipe.to(SequencePath(centering=config.centering))
        .to(SpectralDecompose(convention=config.frequency_convention, method=config.decompose_method))
        .to(SelectEpicycles(term_count=config.term_count, min_radius=config.min_radius))
        .out(EpicycleSet)
    )


def epicycles_from_points(points: Any, config: EpicycleConfig | None = None) -> EpicycleSet:
    """Epicycles tracing a set of (x, y) pixel coordinates.

    Args:
        points: Sequence of (x, y) non-negative integer pairs, or an (M, 2) array
        config: Pipeline options (defaults if None)

    Raises:
        InvalidInput: If the point set is empty or malformed
    """
    config = config or EpicycleConfig()
    coords = normalize_coords(points)
    world = World(arena_bytes=_arena_bytes(coords.size))
    try:
        entity = world.spawn_points(coords)
        return _spectral_stages(world.pipe(entity), config)
    finally:
        world.clear()


def epicycles_from_mask(mask: np.ndarray, config: EpicycleConfig | None = None) -> EpicycleSet:
    """Epicycles tracing the foreground pixels of a binary edge mask.

    Raises:
        InvalidInput: If the mask is not 2-D or has no foreground pixels
    """
    config = config or EpicycleConfig()
    mask = np.asarray(mask)
    world = World(arena_bytes=_arena_bytes(mask.size))
    try:
        entity = world.spawn_mask(mask)
        return _spectral_stages(world.pipe(entity).to(IngestPoints()), config)
    finally:
        world.clear()


def epicycles_from_image(image: np.ndarray, config: EpicycleConfig | None = None) -> EpicycleSet:
    """Epicycles tracing the edges of an image.

    Args:
        image: (H, W) grayscale or (H, W, 3|4) color array
        config: Pipeline options, including edge detection settings

    Raises:
        InvalidInput: If no edges are found
        ValueError: If the image shape is unsupported
    """
    config = config or EpicycleConfig()
    if image.ndim == 3 and image.shape[2] in (3, 4):
        image = rgb2gray(image[..., :3])
    elif image.ndim != 2:
        raise ValueError(f"Expected (H, W) or (H, W, 3) image, got {image.shape}")

    world = World(arena_bytes=_arena_bytes(image.size))
    try:
        entity = world.spawn_image(image)
        pipe = world.pipe(entity).to(
            ExtractEdges(
                sigma=config.canny_sigma,
                low=config.canny_low,
                high=config.canny_high,
                dilate_radius=config.dilate_radius,
            )
        )
        epicycles = _spectral_stages(pipe.to(IngestPoints()), config)
        logger.info(
            "Traced %dx%d image with %d epicycles over %d points",
            image.shape[1],
            image.shape[0],
            len(epicycles),
            epicycles.signal_length,
        )
        return epicycles
    finally:
        world.clear()


def load_grayscale(path: str) -> np.ndarray:
    """Read an image file as a 2-D grayscale array."""
    return np.asarray(imread(path, as_gray=True))


def epicycles_from_file(path: str, config: EpicycleConfig | None = None) -> EpicycleSet:
    """Epicycles tracing the edges of the image stored at ``path``."""
    return epicycles_from_image(load_grayscale(path), config)
