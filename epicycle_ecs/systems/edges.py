"""Edge extraction from a grayscale image.

Canny edges are dilated to merge the double edges Canny reports along thick
strokes, then thinned back to a one-pixel centerline so each stroke
contributes a single run of points to the path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from skimage.feature import canny
from skimage.morphology import dilation, skeletonize

from epicycle_ecs.components.image import EdgeMask, GrayImage
from epicycle_ecs.core.system import System

if TYPE_CHECKING:
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)


def extract_edges(
    image: np.ndarray,
    sigma: float = 1.0,
    low: float = 50.0,
    high: float = 100.0,
    dilate_radius: int = 2,
    thin: bool = True,
) -> np.ndarray:
    """Binary edge mask of a grayscale image in [0, 1].

    Args:
        image: (H, W) float image
        sigma: Gaussian smoothing for Canny
        low: Low hysteresis threshold on the 0..255 scale
        high: High hysteresis threshold on the 0..255 scale
        dilate_radius: Square (L-infinity) dilation radius, 0 to skip
        thin: Skeletonize the dilated edges

    Returns:
        (H, W) bool mask
    """
    edges = canny(
        image,
        sigma=sigma,
        low_threshold=low / 255.0,
        high_threshold=high / 255.0,
    )
    if dilate_radius > 0:
        size = 2 * dilate_radius + 1
        edges = dilation(edges, np.ones((size, size), dtype=bool)) > 0
    if thin:
        edges = skeletonize(edges)
    return np.asarray(edges, dtype=bool)


class ExtractEdges(System):
    """Detect edges in a GrayImage.

    GrayImage -> EdgeMask
    """

    def __init__(
        self,
        sigma: float = 1.0,
        low: float = 50.0,
        high: float = 100.0,
        dilate_radius: int = 2,
        thin: bool = True,
    ) -> None:
        if low > high:
            raise ValueError(f"low threshold {low} exceeds high threshold {high}")
        if dilate_radius < 0:
            raise ValueError(f"dilate_radius must be non-negative, got {dilate_radius}")
        self.sigma = sigma
        self.low = low
        self.high = high
        self.dilate_radius = dilate_radius
        self.thin = thin

    def required_components(self) -> list[type]:
        return [GrayImage]

    def produced_components(self) -> list[type]:
        return [EdgeMask]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            gray = world.get_component(eid, GrayImage)
            mask = extract_edges(
                world.arena.view(gray.pix),
                sigma=self.sigma,
                low=self.low,
                high=self.high,
                dilate_radius=self.dilate_radius,
                thin=self.thin,
            )
            world.add_component(eid, EdgeMask(mask=world.arena.copy_tensor(mask), thinned=self.thin))
            logger.debug("Entity %d: %d edge pixels", eid, int(mask.sum()))

    def __repr__(self) -> str:
        return (
            f"ExtractEdges(sigma={self.sigma}, low={self.low}, high={self.high}, "
            f"dilate_radius={self.dilate_radius}, thin={self.thin})"
        )
