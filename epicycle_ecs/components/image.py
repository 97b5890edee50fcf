"""Image components: GrayImage, EdgeMask."""

from pydantic import BaseModel, Field

from epicycle_ecs.core.arena import TensorRef


class Component(BaseModel):
    """Base class for all ECS components.

    Components are data containers using Pydantic for validation and type safety.
    Array data is stored as TensorRef handles pointing into the arena.
    """

    model_config = {"arbitrary_types_allowed": True}


class GrayImage(Component):
    """Grayscale source image.

    Attributes:
        pix: TensorRef to intensities (H, W) float64 in [0, 1]
    """

    pix: TensorRef


class EdgeMask(Component):
    """Binary edge mask, foreground = edge pixel.

    Attributes:
        mask: TensorRef to (H, W) bool array
        thinned: Whether the mask was skeletonized to a one-pixel centerline
    """

    mask: TensorRef
    thinned: bool = Field(default=False)
