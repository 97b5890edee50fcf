"""Tests for the high-level API."""

from pathlib import Path

import numpy as np
import pytest
from skimage.io import imsave

from epicycle_ecs import (
    EpicycleConfig,
    EpicycleSet,
    InvalidInput,
    epicycles_from_file,
    epicycles_from_image,
    epicycles_from_mask,
    epicycles_from_points,
    evaluate,
)


@pytest.fixture
def ring_mask() -> np.ndarray:
    """One-pixel ring drawn on a 40x40 mask."""
    mask = np.zeros((40, 40), dtype=bool)
    angles = np.linspace(0, 2 * np.pi, 200, endpoint=False)
    mask[np.rint(20 + 12 * np.sin(angles)).astype(int), np.rint(20 + 12 * np.cos(angles)).astype(int)] = True
    return mask


@pytest.fixture
def disc_image() -> np.ndarray:
    """Dark disc on a white 64x64 background, uint8."""
    yy, xx = np.mgrid[:64, :64]
    img = np.full((64, 64), 255, dtype=np.uint8)
    img[(yy - 32) ** 2 + (xx - 32) ** 2 < 18**2] = 0
    return img


class TestEpicyclesFromPoints:
    """Tests for epicycles_from_points."""

    def test_unit_square(self) -> None:
        """Test the square corners are reproduced at quarter turns."""
        epicycles = epicycles_from_points(
            [(0, 1), (1, 1), (0, 0), (1, 0)], EpicycleConfig(centering="none")
        )

        assert isinstance(epicycles, EpicycleSet)
        assert len(epicycles) == 4
        assert evaluate(epicycles, 0.0) == pytest.approx((0.0, 0.0), abs=1e-9)
        assert evaluate(epicycles, np.pi / 2) == pytest.approx((1.0, 0.0), abs=1e-9)

    def test_empty(self) -> None:
        """Test an empty point list raises InvalidInput."""
        with pytest.raises(InvalidInput):
            epicycles_from_points([])

    def test_ragged(self) -> None:
        """Test pairs of mixed length raise InvalidInput."""
        with pytest.raises(InvalidInput, match=r"\(M, 2\)"):
            epicycles_from_points([(0, 0), (1, 2, 3)])

    def test_default_config(self) -> None:
        """Test defaults center on the point extent."""
        epicycles = epicycles_from_points([(0, 0), (4, 0), (4, 2)])
        assert epicycles.center == (2.5, 1.5)


class TestEpicyclesFromMask:
    """Tests for epicycles_from_mask."""

    def test_ring(self, ring_mask: np.ndarray) -> None:
        """Test a ring is dominated by a single rotating term."""
        epicycles = epicycles_from_mask(ring_mask, EpicycleConfig(term_count=10))

        assert len(epicycles) == 10
        assert epicycles.center == (20.0, 20.0)
        assert abs(epicycles.epicycles[0].frequency) == 1
        assert epicycles.epicycles[0].radius == pytest.approx(12.0, rel=0.15)

    def test_empty_mask(self) -> None:
        """Test an empty mask raises InvalidInput."""
        with pytest.raises(InvalidInput, match="no foreground"):
            epicycles_from_mask(np.zeros((10, 10), dtype=bool))

    def test_min_radius(self, ring_mask: np.ndarray) -> None:
        """Test the minimum radius filter shrinks the set."""
        full = epicycles_from_mask(ring_mask)
        filtered = epicycles_from_mask(ring_mask, EpicycleConfig(min_radius=0.5))
        assert 1 <= len(filtered) < len(full)
        assert all(e.radius > 0.5 for e in filtered.epicycles)


class TestEpicyclesFromImage:
    """Tests for image and file input."""

    def test_grayscale(self, disc_image: np.ndarray) -> None:
        """Test the disc outline yields a circle-like spectrum."""
        epicycles = epicycles_from_image(disc_image, EpicycleConfig(term_count=50))

        assert len(epicycles) == 50
        assert epicycles.center == (32.0, 32.0)
        assert abs(epicycles.epicycles[0].frequency) == 1

    def test_color(self, disc_image: np.ndarray) -> None:
        """Test color input is converted to grayscale."""
        rgb = np.stack([disc_image] * 3, axis=-1)
        epicycles = epicycles_from_image(rgb, EpicycleConfig(term_count=5))
        assert len(epicycles) == 5

    def test_blank_image(self) -> None:
        """Test an image without edges raises InvalidInput."""
        with pytest.raises(InvalidInput):
            epicycles_from_image(np.full((32, 32), 128, dtype=np.uint8))

    def test_bad_shape(self) -> None:
        """Test unsupported shapes raise ValueError."""
        with pytest.raises(ValueError, match="Expected"):
            epicycles_from_image(np.zeros((4, 4, 2)))

    def test_from_file(self, disc_image: np.ndarray, tmp_path: Path) -> None:
        """Test reading the image from disk."""
        path = tmp_path / "disc.png"
        imsave(path, disc_image)

        from_file = epicycles_from_file(str(path), EpicycleConfig(term_count=20))
        from_array = epicycles_from_image(disc_image, EpicycleConfig(term_count=20))

        assert from_file == from_array
