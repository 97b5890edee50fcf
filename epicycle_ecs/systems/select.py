"""Epicycle selection.

Ranks DFT coefficients by magnitude (lower |frequency| first on ties),
keeps the top K and turns each into an Epicycle descriptor:

    radius           = |c_k| / N
    phase            = atan2(Im c_k, Re c_k)
    angular_velocity = 2*pi*k / N
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from epicycle_ecs.components.epicycles import Epicycle, EpicycleSet
from epicycle_ecs.components.spectrum import Spectrum
from epicycle_ecs.core.system import System
from epicycle_ecs.eval.spectrum import rank_coefficients

if TYPE_CHECKING:
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)


def select_epicycles(
    coeffs: np.ndarray,
    frequencies: np.ndarray,
    term_count: int,
    min_radius: float = 0.0,
) -> tuple[Epicycle, ...]:
    """Build the K = min(term_count, N) most significant descriptors.

    With ``min_radius`` > 0, descriptors whose radius does not exceed it are
    dropped, except that the largest one is always kept.
    """
    if term_count < 1:
        raise ValueError(f"term_count must be positive, got {term_count}")

    n = len(coeffs)
    ranked = rank_coefficients(coeffs, frequencies)[: min(term_count, n)]
    radii = np.abs(coeffs[ranked]) / n
    phases = np.angle(coeffs[ranked])

    if min_radius > 0.0:
        keep = radii > min_radius
        keep[0] = True
        ranked, radii, phases = ranked[keep], radii[keep], phases[keep]

    return tuple(
        Epicycle(
            frequency=int(frequencies[j]),
            radius=float(radius),
            phase=float(phase),
            angular_velocity=2.0 * math.pi * int(frequencies[j]) / n,
        )
        for j, radius, phase in zip(ranked, radii, phases)
    )


class SelectEpicycles(System):
    """Keep the dominant terms of a Spectrum as epicycles.

    Spectrum -> EpicycleSet
    """

    def __init__(self, term_count: int = 500, min_radius: float = 0.0) -> None:
        """Initialize selector.

        Args:
            term_count: Maximum number of epicycles; values >= N keep every term
            min_radius: Drop epicycles with radius <= this value (0 disables)
        """
        if term_count < 1:
            raise ValueError(f"term_count must be positive, got {term_count}")
        if min_radius < 0.0:
            raise ValueError(f"min_radius must be non-negative, got {min_radius}")
        self.term_count = term_count
        self.min_radius = min_radius

    def required_components(self) -> list[type]:
        return [Spectrum]

    def produced_components(self) -> list[type]:
        return [EpicycleSet]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            spectrum = world.get_component(eid, Spectrum)
            coeffs = world.arena.view(spectrum.coeffs)
            frequencies = world.arena.view(spectrum.frequencies)

            epicycles = select_epicycles(coeffs, frequencies, self.term_count, self.min_radius)
            world.add_component(
                eid,
                EpicycleSet(
                    epicycles=epicycles,
                    signal_length=spectrum.length,
                    convention=spectrum.convention,
                    center=spectrum.center,
                ),
            )
            logger.debug("Entity %d: kept %d of %d terms", eid, len(epicycles), spectrum.length)

    def __repr__(self) -> str:
        return f"SelectEpicycles(term_count={self.term_count}, min_radius={self.min_radius})"
