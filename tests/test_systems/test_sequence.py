"""Tests for greedy nearest-neighbor path sequencing."""

import numpy as np
import pytest

from epicycle_ecs.components.points import OrderedPath, PointSet
from epicycle_ecs.core.world import World
from epicycle_ecs.systems.ingest import normalize_coords
from epicycle_ecs.systems.sequence import SequencePath, nearest_neighbor_order, path_center


def _sequence(points: list, centering: str = "none") -> np.ndarray:
    world = World(arena_bytes=1 << 20)
    eid = world.spawn_points(points)
    SequencePath(centering=centering).run(world, [eid])
    return world.arena.view(world.get_component(eid, OrderedPath).points).copy()


class TestNearestNeighborOrder:
    """Tests for nearest_neighbor_order."""

    def test_unit_square(self) -> None:
        """Test the square corners are walked around the edge."""
        coords = normalize_coords([(1, 1), (0, 1), (1, 0), (0, 0)])
        order = nearest_neighbor_order(coords)
        assert coords[order].tolist() == [[0, 0], [1, 0], [1, 1], [0, 1]]

    def test_tie_prefers_raster_order(self) -> None:
        """Test equidistant candidates resolve to the earlier row."""
        # Walk starts at (2, 0); from (2, 2) the three remaining points are all at distance 2
        coords = normalize_coords([(2, 4), (4, 2), (0, 2), (2, 0), (2, 2)])
        order = nearest_neighbor_order(coords)
        assert coords[order][:3].tolist() == [[2, 0], [2, 2], [0, 2]]

    def test_single_point(self) -> None:
        """Test a single point yields a one-element path."""
        assert nearest_neighbor_order(np.array([[3, 4]])).tolist() == [0]

    def test_permutation(self) -> None:
        """Test the order visits every point exactly once."""
        rng = np.random.default_rng(7)
        coords = normalize_coords(rng.integers(0, 40, size=(300, 2)))

        order = nearest_neighbor_order(coords)

        assert sorted(order.tolist()) == list(range(len(coords)))

    def test_fragments_are_stitched(self) -> None:
        """Test two disjoint segments end up in one path."""
        coords = normalize_coords([(0, 0), (1, 0), (2, 0), (10, 5), (11, 5)])
        order = nearest_neighbor_order(coords)
        assert coords[order].tolist() == [[0, 0], [1, 0], [2, 0], [10, 5], [11, 5]]


class TestPathCenter:
    """Tests for path recentering."""

    def test_mask_center(self) -> None:
        """Test mask_center uses half the mask extent."""
        assert path_center(np.array([[0, 0]]), 10, 6, "mask_center") == (5.0, 3.0)

    def test_centroid(self) -> None:
        """Test centroid averages the points."""
        coords = np.array([[0, 0], [4, 0], [4, 2], [0, 2]])
        assert path_center(coords, 5, 3, "centroid") == (2.0, 1.0)

    def test_none(self) -> None:
        """Test none leaves pixel coordinates."""
        assert path_center(np.array([[7, 7]]), 8, 8, "none") == (0.0, 0.0)


class TestSequencePath:
    """Tests for the SequencePath system."""

    def test_components(self) -> None:
        """Test declared inputs and outputs."""
        system = SequencePath()
        assert system.required_components() == [PointSet]
        assert system.produced_components() == [OrderedPath]

    def test_invalid_centering(self) -> None:
        """Test an unknown centering mode is rejected."""
        with pytest.raises(ValueError, match="Unknown centering"):
            SequencePath(centering="middle")  # type: ignore[arg-type]

    def test_recentered_path(self) -> None:
        """Test the path is shifted by the recorded center."""
        world = World(arena_bytes=1 << 16)
        eid = world.spawn_points([(0, 0), (1, 0), (1, 1), (0, 1)])

        SequencePath(centering="mask_center").run(world, [eid])

        path = world.get_component(eid, OrderedPath)
        assert path.center == (1.0, 1.0)
        points = world.arena.view(path.points)
        assert points.tolist() == [[-1.0, -1.0], [0.0, -1.0], [0.0, 0.0], [-1.0, 0.0]]

    def test_deterministic(self) -> None:
        """Test shuffled input produces the identical path."""
        rng = np.random.default_rng(3)
        points = rng.integers(0, 30, size=(120, 2))
        shuffled = points[rng.permutation(len(points))]

        assert np.array_equal(_sequence(points.tolist()), _sequence(shuffled.tolist()))
