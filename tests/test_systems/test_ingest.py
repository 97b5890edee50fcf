"""Tests for PointSet ingest."""

import numpy as np
import pytest

from epicycle_ecs.components.image import EdgeMask
from epicycle_ecs.components.points import PointSet
from epicycle_ecs.core.world import World
from epicycle_ecs.errors import InvalidInput
from epicycle_ecs.systems.ingest import (
    IngestPoints,
    mask_to_coords,
    normalize_coords,
    raster_sorted,
)


class TestMaskToCoords:
    """Tests for mask_to_coords."""

    def test_coordinates_are_x_y(self) -> None:
        """Test columns map to x and rows to y."""
        mask = np.zeros((3, 4), dtype=bool)
        mask[2, 3] = True
        mask[0, 1] = True

        coords = mask_to_coords(mask)

        assert coords.tolist() == [[1, 0], [3, 2]]
        assert coords.dtype == np.int64

    def test_empty_mask(self) -> None:
        """Test an empty mask raises InvalidInput."""
        with pytest.raises(InvalidInput, match="no foreground"):
            mask_to_coords(np.zeros((5, 5), dtype=bool))


class TestNormalizeCoords:
    """Tests for coordinate validation."""

    def test_duplicates_collapse(self) -> None:
        """Test duplicate pixels are collapsed."""
        coords = normalize_coords([(1, 1), (1, 1), (0, 0)])
        assert coords.tolist() == [[0, 0], [1, 1]]

    def test_raster_order(self) -> None:
        """Test rows are sorted by y, then x."""
        coords = normalize_coords([(1, 1), (0, 1), (1, 0), (0, 0)])
        assert coords.tolist() == [[0, 0], [1, 0], [0, 1], [1, 1]]

    def test_whole_floats_accepted(self) -> None:
        """Test float input holding whole numbers is accepted."""
        coords = normalize_coords(np.array([[2.0, 3.0]]))
        assert coords.dtype == np.int64
        assert coords.tolist() == [[2, 3]]

    @pytest.mark.parametrize(
        "points, message",
        [
            ([], "empty"),
            ([(1, 2, 3)], r"\(M, 2\)"),
            ([(0, 0), (1, 2, 3)], r"\(M, 2\)"),
            ([(-1, 0)], "non-negative"),
            ([(0.5, 1.0)], "whole numbers"),
            ([("a", "b")], "integer"),
        ],
    )
    def test_invalid(self, points: list, message: str) -> None:
        """Test malformed point sets raise InvalidInput."""
        with pytest.raises(InvalidInput, match=message):
            normalize_coords(points)

    def test_raster_sorted_is_independent_of_input_order(self) -> None:
        """Test shuffled input yields the same ordering."""
        rng = np.random.default_rng(0)
        coords = rng.integers(0, 20, size=(50, 2))
        shuffled = coords[rng.permutation(len(coords))]

        assert np.array_equal(raster_sorted(coords), raster_sorted(shuffled))


class TestIngestPoints:
    """Tests for the IngestPoints system."""

    def test_components(self) -> None:
        """Test declared inputs and outputs."""
        system = IngestPoints()
        assert system.required_components() == [EdgeMask]
        assert system.produced_components() == [PointSet]

    def test_run(self) -> None:
        """Test ingesting a mask records its extent."""
        world = World(arena_bytes=1 << 16)
        mask = np.zeros((6, 8), dtype=bool)
        mask[1, 1:4] = True
        eid = world.spawn_mask(mask)

        IngestPoints().run(world, [eid])

        point_set = world.get_component(eid, PointSet)
        assert point_set.width == 8
        assert point_set.height == 6
        assert world.arena.view(point_set.coords).tolist() == [[1, 1], [2, 1], [3, 1]]
