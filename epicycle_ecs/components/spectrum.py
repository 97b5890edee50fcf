"""Frequency-domain component."""

from typing import Literal

from pydantic import Field

from epicycle_ecs.components.image import Component
from epicycle_ecs.core.arena import TensorRef


class Spectrum(Component):
    """DFT of an OrderedPath read as a complex signal x + iy.

    Attributes:
        coeffs: TensorRef to (N,) complex128 coefficients, unnormalized
        frequencies: TensorRef to (N,) int64 signed frequency per coefficient
        length: Signal length N used for normalization
        convention: Frequency-index convention the frequencies follow
        center: Carried over from the OrderedPath
    """

    coeffs: TensorRef
    frequencies: TensorRef
    length: int = Field(ge=1)
    convention: Literal["symmetric", "zero_based"] = "symmetric"
    center: tuple[float, float] = (0.0, 0.0)
