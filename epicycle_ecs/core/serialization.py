"""EpicycleSet serialization.

Binary layout:
  [Header: 14 bytes]
    - Magic: 4 bytes ('EPI\\x00')
    - Version: 2 bytes (major << 8 | minor)
    - Metadata length: 4 bytes
    - Reserved: 4 bytes
  [Metadata: variable JSON]
    - signal length, frequency convention, center, epicycle count
  [Radii: count float64]
  [Phases: count float64]
  [Frequencies: count int64]
"""

from __future__ import annotations

import json
import math
import struct
from typing import Any, cast

import numpy as np

from epicycle_ecs.components.epicycles import Epicycle, EpicycleSet

MAGIC = b"EPI\x00"
VERSION_MAJOR = 1
VERSION_MINOR = 0
HEADER_FORMAT = "<4sHII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)


def serialize_epicycles(epicycles: EpicycleSet) -> bytes:
    """Serialize an EpicycleSet to bytes.

    Raises:
        TypeError: If ``epicycles`` is not an EpicycleSet
    """
    if not isinstance(epicycles, EpicycleSet):
        raise TypeError(f"Expected EpicycleSet, got {type(epicycles)}")

    metadata: dict[str, Any] = {
        "signal_length": epicycles.signal_length,
        "convention": epicycles.convention,
        "center": list(epicycles.center),
        "count": len(epicycles),
    }
    metadata_bytes = json.dumps(metadata).encode("utf-8")

    header = struct.pack(
        HEADER_FORMAT,
        MAGIC,
        (VERSION_MAJOR << 8) | VERSION_MINOR,
        len(metadata_bytes),
        0,
    )

    return (
        header
        + metadata_bytes
        + epicycles.radii.astype("<f8").tobytes()
        + epicycles.phases.astype("<f8").tobytes()
        + epicycles.frequencies.astype("<i8").tobytes()
    )


def deserialize_epicycles(data: bytes) -> EpicycleSet:
    """Rebuild an EpicycleSet from ``serialize_epicycles`` output.

    Raises:
        ValueError: If data format is invalid or corrupted
    """
    if len(data) < HEADER_SIZE:
        raise ValueError(f"Data too short: need {HEADER_SIZE} bytes, got {len(data)}")

    magic, version, meta_len, _ = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])

    if magic != MAGIC:
        raise ValueError(f"Invalid file format: expected {MAGIC!r}, got {magic!r}")

    ver_major = (version >> 8) & 0xFF
    ver_minor = version & 0xFF
    if ver_major != VERSION_MAJOR:
        raise ValueError(
            f"Unsupported version {ver_major}.{ver_minor}. "
            f"Expected {VERSION_MAJOR}.{VERSION_MINOR}"
        )

    meta_end = HEADER_SIZE + meta_len
    if meta_end > len(data):
        raise ValueError(
            f"Metadata region extends beyond data: need {meta_end} bytes, got {len(data)}"
        )

    try:
        metadata = cast(dict[str, Any], json.loads(data[HEADER_SIZE:meta_end].decode("utf-8")))
        count = int(metadata["count"])
        n = int(metadata["signal_length"])
    except (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Failed to parse metadata: {e}") from e

    if n < 1 or count < 0 or count > n:
        raise ValueError(
            f"Invalid metadata: count {count} and signal_length {n} "
            f"need 0 <= count <= signal_length and signal_length >= 1"
        )

    expected = meta_end + 24 * count
    if len(data) != expected:
        raise ValueError(
            f"Epicycle arrays have wrong size: expected {expected} bytes in total, got {len(data)}"
        )

    radii = np.frombuffer(data, dtype="<f8", count=count, offset=meta_end)
    phases = np.frombuffer(data, dtype="<f8", count=count, offset=meta_end + 8 * count)
    frequencies = np.frombuffer(data, dtype="<i8", count=count, offset=meta_end + 16 * count)

    return EpicycleSet(
        epicycles=tuple(
            Epicycle(
                frequency=int(k),
                radius=float(r),
                phase=float(p),
                angular_velocity=2.0 * math.pi * int(k) / n,
            )
            for r, p, k in zip(radii, phases, frequencies)
        ),
        signal_length=n,
        convention=metadata["convention"],
        center=tuple(metadata["center"]),
    )
