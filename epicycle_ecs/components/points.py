"""Point components: PointSet, OrderedPath."""

from pydantic import Field

from epicycle_ecs.components.image import Component
from epicycle_ecs.core.arena import TensorRef


class PointSet(Component):
    """Unordered set of unique foreground pixel coordinates.

    Rows are stored in raster order (by y, then x), which is also the
    order the path sequencer uses to break ties.

    Attributes:
        coords: TensorRef to (M, 2) int64 array of (x, y) pairs
        width: Width of the source mask in pixels
        height: Height of the source mask in pixels
    """

    coords: TensorRef
    width: int = Field(ge=1)
    height: int = Field(ge=1)


class OrderedPath(Component):
    """Traversal of a PointSet, recentered around ``center``.

    Attributes:
        points: TensorRef to (N, 2) float64 array of (x, y) in traversal order
        center: Image-space point that was moved to the origin
    """

    points: TensorRef
    center: tuple[float, float] = (0.0, 0.0)
