#!/usr/bin/env python3
"""Example demonstrating the fluent Pipe API.

This example shows how to compose the epicycle systems into a pipeline
by hand, inspect intermediate components and compare term counts.
"""

import numpy as np

from epicycle_ecs.components.epicycles import EpicycleSet
from epicycle_ecs.components.points import OrderedPath
from epicycle_ecs.components.spectrum import Spectrum
from epicycle_ecs.core.world import World
from epicycle_ecs.eval import energy_fraction, truncation_errors
from epicycle_ecs.evaluate import partial_sums
from epicycle_ecs.systems.fourier import SpectralDecompose
from epicycle_ecs.systems.ingest import IngestPoints
from epicycle_ecs.systems.metrics import MetricReconstructionMSE
from epicycle_ecs.systems.select import SelectEpicycles
from epicycle_ecs.systems.sequence import SequencePath


def _star_mask(size: int = 96, points: int = 5) -> np.ndarray:
    """One-pixel outline of a star."""
    mask = np.zeros((size, size), dtype=bool)
    angles = np.linspace(0, 2 * np.pi, 2000, endpoint=False)
    radius = size * (0.3 + 0.12 * np.cos(points * angles))
    xs = np.rint(size / 2 + radius * np.cos(angles)).astype(int)
    ys = np.rint(size / 2 + radius * np.sin(angles)).astype(int)
    mask[ys, xs] = True
    return mask


def main() -> None:
    """Demonstrate fluent pipeline API."""
    print("=== Fluent Pipeline API Example ===\n")

    world = World(arena_bytes=16 << 20)
    print("[OK] Created World with 16 MB arena\n")

    mask = _star_mask()
    entity = world.spawn_mask(mask)
    print(f"[OK] Created mask entity {entity} with {int(mask.sum())} edge pixels\n")

    # Example 1: pipeline with .to()
    print("Example 1: Simple pipeline with .to()")
    print("-" * 40)
    epicycles = (
        world.pipe(entity)
        .to(IngestPoints())
        .to(SequencePath(centering="mask_center"))
        .to(SpectralDecompose(convention="symmetric"))
        .to(SelectEpicycles(term_count=40))
        .out(EpicycleSet)
    )
    print(f"Result: {len(epicycles)} epicycles over {epicycles.signal_length} samples\n")

    # Example 2: intermediate components stay on the entity
    print("Example 2: Inspecting intermediates")
    print("-" * 40)
    path = world.arena.view(world.get_component(entity, OrderedPath).points)
    spectrum = world.get_component(entity, Spectrum)
    coeffs = world.arena.view(spectrum.coeffs)
    freqs = world.arena.view(spectrum.frequencies)
    print(f"Path: {path.shape}, spectrum: {coeffs.shape}")
    for k in (5, 20, 40):
        print(f"  top {k:3d} terms hold {100 * energy_fraction(coeffs, k):5.1f}% of the energy")
    errors = truncation_errors(path, coeffs, freqs)
    print(f"  MSE with 1 / 10 / all terms: {errors[0]:.3f} / {errors[9]:.3f} / {errors[-1]:.2e}\n")

    # Example 3: pipe operator, with the metric as the last stage
    print("Example 3: Pipe operator | and metrics")
    print("-" * 40)
    for term_count in (5, 20, 80):
        other = world.spawn_mask(mask)
        pipe = (
            world.pipe(other)
            | IngestPoints()
            | SequencePath()
            | SpectralDecompose()
            | SelectEpicycles(term_count=term_count)
        )
        pipe.to(MetricReconstructionMSE()).execute()
        mse = world.metadata[other]["reconstruction_mse"]
        print(f"  {term_count:3d} terms -> MSE {mse:.4f}")

    # Example 4: the chain of circle centers at one instant
    print("\nExample 4: Partial sums at t = 0")
    print("-" * 40)
    chain = partial_sums(epicycles, 0.0, origin=epicycles.center)
    print(f"Chain has {len(chain)} joints; tip at ({chain[-1, 0]:.2f}, {chain[-1, 1]:.2f})")

    world.clear()
    print("\n[OK] World cleared")


if __name__ == "__main__":
    main()
