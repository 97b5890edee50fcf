"""Tests for EpicycleSet serialization."""

import json
import math
import struct

import numpy as np
import pytest

from epicycle_ecs.components.epicycles import Epicycle, EpicycleSet
from epicycle_ecs.core.serialization import (
    HEADER_SIZE,
    MAGIC,
    deserialize_epicycles,
    serialize_epicycles,
)


@pytest.fixture
def epicycles() -> EpicycleSet:
    return EpicycleSet(
        epicycles=(
            Epicycle(frequency=0, radius=3.5, phase=-0.25, angular_velocity=0.0),
            Epicycle(frequency=-3, radius=1.25, phase=math.pi, angular_velocity=-2 * math.pi * 3 / 10),
            Epicycle(frequency=2, radius=0.5, phase=1.0, angular_velocity=2 * math.pi * 2 / 10),
        ),
        signal_length=10,
        convention="symmetric",
        center=(64.0, 48.0),
    )


class TestSerialize:
    """Tests for serialize_epicycles."""

    def test_header(self, epicycles: EpicycleSet) -> None:
        """Test the header carries magic and version 1.0."""
        data = serialize_epicycles(epicycles)

        magic, version, meta_len, _ = struct.unpack("<4sHII", data[:HEADER_SIZE])
        assert magic == MAGIC
        assert version >> 8 == 1
        assert len(data) == HEADER_SIZE + meta_len + 24 * 3

    def test_invalid_type(self) -> None:
        """Test non-EpicycleSet input raises TypeError."""
        with pytest.raises(TypeError, match="Expected EpicycleSet"):
            serialize_epicycles([1, 2, 3])  # type: ignore[arg-type]

    def test_round_trip(self, epicycles: EpicycleSet) -> None:
        """Test deserialization restores the identical set."""
        restored = deserialize_epicycles(serialize_epicycles(epicycles))

        assert restored == epicycles
        assert np.array_equal(restored.radii, epicycles.radii)

    def test_empty_set(self) -> None:
        """Test a set without epicycles survives a round trip."""
        empty = EpicycleSet(epicycles=(), signal_length=4)
        assert deserialize_epicycles(serialize_epicycles(empty)) == empty


class TestDeserializeErrors:
    """Tests for corrupted input."""

    def test_too_short(self) -> None:
        """Test data shorter than the header."""
        with pytest.raises(ValueError, match="Data too short"):
            deserialize_epicycles(b"EPI")

    def test_bad_magic(self, epicycles: EpicycleSet) -> None:
        """Test wrong magic bytes."""
        data = b"XYZ\x00" + serialize_epicycles(epicycles)[4:]
        with pytest.raises(ValueError, match="Invalid file format"):
            deserialize_epicycles(data)

    def test_unsupported_version(self, epicycles: EpicycleSet) -> None:
        """Test a newer major version is rejected."""
        data = bytearray(serialize_epicycles(epicycles))
        data[4:6] = struct.pack("<H", 2 << 8)
        with pytest.raises(ValueError, match="Unsupported version 2.0"):
            deserialize_epicycles(bytes(data))

    def test_truncated_metadata(self, epicycles: EpicycleSet) -> None:
        """Test metadata cut short."""
        data = serialize_epicycles(epicycles)
        with pytest.raises(ValueError, match="Metadata region extends beyond data"):
            deserialize_epicycles(data[: HEADER_SIZE + 5])

    def test_truncated_arrays(self, epicycles: EpicycleSet) -> None:
        """Test missing array bytes."""
        data = serialize_epicycles(epicycles)
        with pytest.raises(ValueError, match="wrong size"):
            deserialize_epicycles(data[:-8])

    def test_bad_metadata(self) -> None:
        """Test metadata that is not JSON."""
        data = struct.pack("<4sHII", MAGIC, 1 << 8, 4, 0) + b"nope"
        with pytest.raises(ValueError, match="Failed to parse metadata"):
            deserialize_epicycles(data)

    @pytest.mark.parametrize(
        "signal_length, count",
        [(0, 1), (-4, 0), (3, 4), (3, -1)],
    )
    def test_inconsistent_lengths(self, signal_length: int, count: int) -> None:
        """Test metadata whose count and signal length cannot describe a set."""
        metadata = json.dumps(
            {
                "signal_length": signal_length,
                "convention": "symmetric",
                "center": [0.0, 0.0],
                "count": count,
            }
        ).encode("utf-8")
        header = struct.pack("<4sHII", MAGIC, 1 << 8, len(metadata), 0)
        arrays = np.zeros(3 * max(count, 0), dtype="<f8").tobytes()

        with pytest.raises(ValueError, match="Invalid metadata"):
            deserialize_epicycles(header + metadata + arrays)
