#!/usr/bin/env python3
"""Quickstart example using the high-level epicycles API.

This example demonstrates the simplest way to use the package:
- Load an image (or draw a synthetic silhouette)
- Turn its edges into epicycles with epicycles_from_image()
- Trace the epicycles back and report the fit
- Optionally save the descriptors to a binary file
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from epicycle_ecs import (
    epicycles_from_image,
    load_config,
    load_grayscale,
    trace,
)
from epicycle_ecs.core.serialization import serialize_epicycles


def _synthetic_silhouette(size: int) -> np.ndarray:
    """Dark heart-ish blob on a white background."""
    yy, xx = np.mgrid[:size, :size] / size - 0.5
    yy = -yy * 1.2 + 0.1
    inside = (xx**2 + yy**2 - 0.08) ** 3 - xx**2 * yy**3 < 0
    img = np.full((size, size), 255, dtype=np.uint8)
    img[inside] = 0
    return img


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart API example")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Input image path (a synthetic silhouette is used if omitted)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path for the serialized epicycles",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=200,
        help="Synthetic silhouette size if no input image is given",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an epicycle_ecs.toml file",
    )
    parser.add_argument(
        "--terms",
        type=int,
        default=None,
        help="Number of epicycles to keep (overrides config)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    overrides = {"term_count": args.terms} if args.terms is not None else {}
    config = load_config(args.config, **overrides)

    if args.input is not None:
        image = load_grayscale(str(args.input))
        print(f"[OK] Loaded {args.input} with shape {image.shape}")
    else:
        image = _synthetic_silhouette(args.size)
        print(f"[OK] Drew synthetic silhouette {image.shape}")

    epicycles = epicycles_from_image(image, config)
    print(f"[OK] {len(epicycles)} epicycles from {epicycles.signal_length} edge points")
    print(f"     center: ({epicycles.center[0]:.1f}, {epicycles.center[1]:.1f})")

    print("\nLargest epicycles:")
    for e in epicycles.epicycles[:5]:
        print(f"  k={e.frequency:+5d}  radius={e.radius:8.3f}  phase={e.phase:+.3f}")

    path = trace(epicycles, config.frame_count, origin=epicycles.center)
    print(f"\n[OK] Traced {len(path)} frames")
    print(f"     x range: {path[:, 0].min():.1f} .. {path[:, 0].max():.1f}")
    print(f"     y range: {path[:, 1].min():.1f} .. {path[:, 1].max():.1f}")

    if args.output is not None:
        data = serialize_epicycles(epicycles)
        args.output.write_bytes(data)
        print(f"\n[OK] Wrote {len(data)} bytes to {args.output}")


if __name__ == "__main__":
    main()
