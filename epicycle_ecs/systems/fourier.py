"""Spectral decomposition of an ordered path.

The path is read as the complex signal s[n] = x[n] + i*y[n] and transformed
with an unnormalized DFT. numpy's FFT handles any length N exactly (no
zero padding), so coefficients are normalized later by the true N.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Literal

import numpy as np

from epicycle_ecs.components.points import OrderedPath
from epicycle_ecs.components.spectrum import Spectrum
from epicycle_ecs.core.system import System
from epicycle_ecs.errors import DegenerateSignal
from epicycle_ecs.eval.spectrum import direct_dft, signed_frequencies

if TYPE_CHECKING:
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)


def path_to_signal(points: np.ndarray) -> np.ndarray:
    """(N, 2) path as an (N,) complex128 signal x + iy."""
    return points[:, 0].astype(np.float64) + 1j * points[:, 1].astype(np.float64)


class SpectralDecompose(System):
    """Discrete Fourier transform of the ordered path.

    OrderedPath -> Spectrum
    """

    def __init__(
        self,
        convention: Literal["symmetric", "zero_based"] = "symmetric",
        method: Literal["fft", "direct"] = "fft",
    ) -> None:
        """Initialize decomposer.

        Args:
            convention: Frequency-index convention recorded on the Spectrum
            method: 'fft' (numpy.fft) or 'direct' (O(N^2) defining sum)
        """
        if convention not in ("symmetric", "zero_based"):
            raise ValueError(f"Unknown frequency convention {convention!r}")
        if method not in ("fft", "direct"):
            raise ValueError(f"Unknown transform method {method!r}")
        self.convention = convention
        self.method = method

    def required_components(self) -> list[type]:
        return [OrderedPath]

    def produced_components(self) -> list[type]:
        return [Spectrum]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            path = world.get_component(eid, OrderedPath)
            signal = path_to_signal(world.arena.view(path.points))
            n = len(signal)

            if n == 1:
                logger.warning("Entity %d: single-point path, epicycles reduce to a fixed point", eid)
                warnings.warn(
                    "Path has a single point; its only epicycle has zero frequency",
                    DegenerateSignal,
                    stacklevel=2,
                )

            if self.method == "fft":
                coeffs = np.fft.fft(signal)
            else:
                coeffs = direct_dft(signal)

            spectrum = Spectrum(
                coeffs=world.arena.copy_tensor(coeffs.astype(np.complex128)),
                frequencies=world.arena.copy_tensor(signed_frequencies(n, self.convention)),
                length=n,
                convention=self.convention,
                center=path.center,
            )
            world.add_component(eid, spectrum)
            logger.debug("Entity %d: %s transform of %d samples", eid, self.method, n)

    def __repr__(self) -> str:
        return f"SpectralDecompose(convention={self.convention!r}, method={self.method!r})"
