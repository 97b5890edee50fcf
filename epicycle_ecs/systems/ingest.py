"""PointSet ingest.

Turns an edge mask, or any sequence of (x, y) integer pairs, into the set
of unique foreground pixel coordinates. Rows are kept in raster order
(by y, then x) so every later stage sees the same deterministic order
regardless of how the input was given.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from epicycle_ecs.components.image import EdgeMask
from epicycle_ecs.components.points import PointSet
from epicycle_ecs.core.system import System
from epicycle_ecs.errors import InvalidInput

if TYPE_CHECKING:
    from epicycle_ecs.core.arena import Arena
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)


def raster_sorted(coords: np.ndarray) -> np.ndarray:
    """Return unique (x, y) rows sorted by y, then x."""
    unique = np.unique(coords, axis=0)
    return unique[np.lexsort((unique[:, 0], unique[:, 1]))]


def mask_to_coords(mask: np.ndarray) -> np.ndarray:
    """Foreground pixels of a 2-D mask as an (M, 2) int64 array of (x, y).

    Raises:
        InvalidInput: If the mask is not 2-D or has no foreground pixels
    """
    if mask.ndim != 2:
        raise InvalidInput(f"Expected mask with shape (H, W), got {mask.shape}")
    # argwhere yields (row, col) in raster order already
    rows_cols = np.argwhere(mask)
    if len(rows_cols) == 0:
        raise InvalidInput("Edge mask has no foreground pixels; nothing to trace")
    return rows_cols[:, ::-1].astype(np.int64)


def normalize_coords(points: Any) -> np.ndarray:
    """Validate (x, y) pairs and return them unique and raster sorted.

    Raises:
        InvalidInput: If the set is empty, not (M, 2), negative or non-integer
    """
    try:
        arr = np.asarray(points)
    except ValueError as e:
        raise InvalidInput(f"Expected (M, 2) array of (x, y) pairs: {e}") from e
    if arr.size == 0:
        raise InvalidInput("Point set is empty; nothing to trace")
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidInput(f"Expected (M, 2) array of (x, y) pairs, got shape {arr.shape}")

    if not np.issubdtype(arr.dtype, np.integer):
        if not np.issubdtype(arr.dtype, np.floating):
            raise InvalidInput(f"Expected integer pixel coordinates, got dtype {arr.dtype}")
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.round(arr)):
            raise InvalidInput("Pixel coordinates must be whole numbers")
    arr = arr.astype(np.int64)

    if np.any(arr < 0):
        raise InvalidInput("Pixel coordinates must be non-negative")

    return raster_sorted(arr)


def point_set_from_coords(
    arena: Arena,
    points: Any,
    width: int | None = None,
    height: int | None = None,
) -> PointSet:
    """Store validated coordinates in the arena and wrap them in a PointSet.

    Width and height default to the smallest extent containing every point.
    """
    coords = normalize_coords(points)
    if width is None:
        width = int(coords[:, 0].max()) + 1
    if height is None:
        height = int(coords[:, 1].max()) + 1
    return PointSet(coords=arena.copy_tensor(coords), width=width, height=height)


class IngestPoints(System):
    """Collect the foreground pixels of an EdgeMask.

    EdgeMask -> PointSet
    """

    def required_components(self) -> list[type]:
        return [EdgeMask]

    def produced_components(self) -> list[type]:
        return [PointSet]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            edge_mask = world.get_component(eid, EdgeMask)
            mask = world.arena.view(edge_mask.mask)
            height, width = mask.shape

            coords = mask_to_coords(mask)
            point_set = PointSet(
                coords=world.arena.copy_tensor(coords),
                width=width,
                height=height,
            )
            world.add_component(eid, point_set)
            logger.debug("Entity %d: %d edge pixels in %dx%d mask", eid, len(coords), width, height)
