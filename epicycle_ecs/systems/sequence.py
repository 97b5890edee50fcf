"""Path sequencing by greedy nearest-neighbor walk.

The edge mask carries no ordering, so the pixels are chained into a single
path: start at the first point in raster order, then repeatedly step to the
closest unvisited point. Squared distances are computed on the integer
coordinates, so ties are exact and are resolved in favor of the point that
comes first in raster order (by y, then x).

Disjoint fragments get stitched together by whichever jump the walk finds
shortest when a fragment runs out; that is accepted, not an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

import numpy as np

from epicycle_ecs.components.points import OrderedPath, PointSet
from epicycle_ecs.core.system import System

if TYPE_CHECKING:
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)

_VISITED = np.iinfo(np.int64).max


def nearest_neighbor_order(coords: np.ndarray) -> np.ndarray:
    """Greedy nearest-neighbor traversal order of integer points.

    Args:
        coords: (M, 2) integer array, already in tie-break order

    Returns:
        (M,) permutation of row indices, starting at 0
    """
    n = len(coords)
    order = np.empty(n, dtype=np.int64)
    if n == 0:
        return order

    pts = coords.astype(np.int64)
    visited = np.zeros(n, dtype=bool)
    current = 0
    order[0] = current
    visited[current] = True

    for step in range(1, n):
        delta = pts - pts[current]
        dist_sq = np.einsum("ij,ij->i", delta, delta)
        dist_sq[visited] = _VISITED
        # argmin returns the first minimum, i.e. the earliest in raster order
        current = int(np.argmin(dist_sq))
        order[step] = current
        visited[current] = True

    return order


def path_center(
    coords: np.ndarray,
    width: int,
    height: int,
    centering: Literal["mask_center", "centroid", "none"],
) -> tuple[float, float]:
    """Image-space point that becomes the path origin."""
    if centering == "mask_center":
        return (width / 2.0, height / 2.0)
    if centering == "centroid":
        mean = coords.astype(np.float64).mean(axis=0)
        return (float(mean[0]), float(mean[1]))
    return (0.0, 0.0)


class SequencePath(System):
    """Order a PointSet into a single traversal and recenter it.

    PointSet -> OrderedPath
    """

    def __init__(
        self,
        centering: Literal["mask_center", "centroid", "none"] = "mask_center",
    ) -> None:
        """Initialize path sequencer.

        Args:
            centering: 'mask_center' moves (width/2, height/2) to the origin,
                'centroid' the mean of the points, 'none' leaves pixel coordinates
        """
        if centering not in ("mask_center", "centroid", "none"):
            raise ValueError(f"Unknown centering {centering!r}")
        self.centering = centering

    def required_components(self) -> list[type]:
        return [PointSet]

    def produced_components(self) -> list[type]:
        return [OrderedPath]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            point_set = world.get_component(eid, PointSet)
            coords = world.arena.view(point_set.coords)

            order = nearest_neighbor_order(coords)
            cx, cy = path_center(coords, point_set.width, point_set.height, self.centering)

            points_ref = world.arena.alloc_tensor((len(order), 2), np.float64)
            points = world.arena.view(points_ref)
            points[:] = coords[order]
            points[:, 0] -= cx
            points[:, 1] -= cy

            world.add_component(eid, OrderedPath(points=points_ref, center=(cx, cy)))
            logger.debug("Entity %d: sequenced %d points around (%.1f, %.1f)", eid, len(order), cx, cy)

    def __repr__(self) -> str:
        return f"SequencePath(centering={self.centering!r})"
