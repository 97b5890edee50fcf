"""Epicycle evaluation.

Pure functions of (epicycles, t): nothing here keeps state, so a render
loop may call them from any thread, as often as it likes.

The time parameter t is the cycle angle in [0, 2*pi). Each epicycle adds
radius * exp(i * (frequency * t + phase)); at t = 2*pi*n/N this equals
angular_velocity * n + phase, the rotation after n path samples.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from epicycle_ecs.components.epicycles import Epicycle, EpicycleSet

Epicycles = EpicycleSet | Sequence[Epicycle]

DEFAULT_FRAME_COUNT = 1200


def _arrays(epicycles: Epicycles) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    if isinstance(epicycles, EpicycleSet):
        return epicycles.radii, epicycles.frequencies, epicycles.phases
    radii = np.array([e.radius for e in epicycles], dtype=np.float64)
    frequencies = np.array([e.frequency for e in epicycles], dtype=np.float64)
    phases = np.array([e.phase for e in epicycles], dtype=np.float64)
    return radii, frequencies, phases


def _terms(epicycles: Epicycles, t: float) -> np.ndarray:
    radii, frequencies, phases = _arrays(epicycles)
    return radii * np.exp(1j * (frequencies * t + phases))


def sample_times(frame_count: int) -> np.ndarray:
    """Equally spaced cycle angles 2*pi*i/frame_count for one full cycle."""
    if frame_count < 1:
        raise ValueError(f"frame_count must be positive, got {frame_count}")
    return 2.0 * math.pi * np.arange(frame_count) / frame_count


def evaluate(
    epicycles: Epicycles,
    t: float,
    origin: tuple[float, float] = (0.0, 0.0),
) -> tuple[float, float]:
    """Tip of the epicycle chain at cycle angle ``t``.

    Args:
        epicycles: Descriptors, summed in the given order
        t: Cycle angle in radians
        origin: Point the chain is anchored at

    Returns:
        (x, y) of the composite point
    """
    z = complex(np.sum(_terms(epicycles, t)))
    return (origin[0] + z.real, origin[1] + z.imag)


def partial_sums(
    epicycles: Epicycles,
    t: float,
    origin: tuple[float, float] = (0.0, 0.0),
) -> np.ndarray:
    """Chain joints at cycle angle ``t``.

    Returns:
        (K + 1, 2) array: the origin, then the tip after each epicycle.
        Row i is the center of circle i; the last row is the traced point.
    """
    joints = np.concatenate(([0.0 + 0.0j], np.cumsum(_terms(epicycles, t))))
    out = np.empty((len(joints), 2), dtype=np.float64)
    out[:, 0] = origin[0] + joints.real
    out[:, 1] = origin[1] + joints.imag
    return out


def trace(
    epicycles: Epicycles,
    times: int | np.ndarray = DEFAULT_FRAME_COUNT,
    origin: tuple[float, float] = (0.0, 0.0),
) -> np.ndarray:
    """Traced point for many cycle angles at once.

    Args:
        epicycles: Descriptors
        times: Frame count for one full cycle, or explicit cycle angles
        origin: Point the chain is anchored at

    Returns:
        (F, 2) array of (x, y), one row per time
    """
    if isinstance(times, (int, np.integer)):
        times = sample_times(int(times))
    times = np.asarray(times, dtype=np.float64)

    radii, frequencies, phases = _arrays(epicycles)
    rotations = np.exp(1j * (np.outer(times, frequencies) + phases))
    z = rotations @ radii.astype(np.complex128)

    out = np.empty((len(times), 2), dtype=np.float64)
    out[:, 0] = origin[0] + z.real
    out[:, 1] = origin[1] + z.imag
    return out
