"""World: Entity-Component-System manager.

The World is the central ECS registry that manages:
- Entity creation (integer IDs)
- Component storage (type -> entity -> component mapping)
- Component queries (find entities with specific component combinations)
- Arena memory for stage intermediates

Example:
    >>> world = World()
    >>> eid = world.spawn_mask(mask)
    >>> world.query(PointSet)  # entities whose mask has been ingested
    >>> world.clear()  # reset for the next image
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import numpy as np
from pydantic import BaseModel

from epicycle_ecs.core.arena import Arena

logger = logging.getLogger(__name__)

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Central ECS registry managing entities, components, and memory.

    Attributes:
        arena: Memory arena for stage intermediates
        metadata: Per-entity metadata dict (shapes, metrics)

    Example:
        >>> world = World(arena_bytes=16 << 20)
        >>> eid = world.spawn_points([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> world.has_component(eid, PointSet)
        True
    """

    def __init__(self, arena_bytes: int = 64 << 20):
        """Create World with specified arena size.

        Args:
            arena_bytes: Arena size in bytes (default 64 MB)
        """
        self.arena = Arena(size_bytes=arena_bytes)
        self._next_eid = 0
        self._components: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    def new_entity(self) -> int:
        """Create a new entity and return its ID."""
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_image(self, img: np.ndarray) -> int:
        """Ingest a grayscale image in [0, 1] into the world.

        Args:
            img: (H, W) array; integer images are scaled from 0..255

        Returns:
            Entity ID with GrayImage component attached

        Raises:
            ValueError: If the image is not 2-D
        """
        from epicycle_ecs.components.image import GrayImage

        if img.ndim != 2:
            raise ValueError(f"Expected grayscale image with shape (H, W), got {img.shape}")

        if np.issubdtype(img.dtype, np.integer):
            pix = img.astype(np.float64) / 255.0
        else:
            pix = img.astype(np.float64)

        eid = self.new_entity()
        self.add_component(eid, GrayImage(pix=self.arena.copy_tensor(pix)))
        self.metadata[eid]["image_shape"] = img.shape
        return eid

    def spawn_mask(self, mask: np.ndarray) -> int:
        """Ingest a binary edge mask; nonzero entries are foreground.

        Returns:
            Entity ID with EdgeMask component attached

        Raises:
            InvalidInput: If the mask is not 2-D or has no foreground pixels
        """
        from epicycle_ecs.components.image import EdgeMask
        from epicycle_ecs.errors import InvalidInput

        mask = np.asarray(mask)
        if mask.ndim != 2:
            raise InvalidInput(f"Expected mask with shape (H, W), got {mask.shape}")
        if not mask.any():
            raise InvalidInput("Edge mask has no foreground pixels; nothing to trace")

        eid = self.new_entity()
        mask_ref = self.arena.copy_tensor(mask.astype(bool))
        self.add_component(eid, EdgeMask(mask=mask_ref))
        self.metadata[eid]["image_shape"] = mask.shape
        logger.debug("Spawned mask entity %d with shape %s", eid, mask.shape)
        return eid

    def spawn_points(self, points: Any) -> int:
        """Ingest a sequence of (x, y) pixel coordinates.

        Duplicates collapse; input order is irrelevant.

        Returns:
            Entity ID with PointSet component attached

        Raises:
            InvalidInput: If no points are given or coordinates are malformed
        """
        from epicycle_ecs.systems.ingest import point_set_from_coords

        point_set = point_set_from_coords(self.arena, points)
        eid = self.new_entity()
        self.add_component(eid, point_set)
        self.metadata[eid]["image_shape"] = (point_set.height, point_set.width)
        logger.debug("Spawned point entity %d with %d points", eid, point_set.coords.shape[0])
        return eid

    def clear(self) -> None:
        """Reset arena and clear all entities/components for reuse.

        After clear(), all TensorRefs from previous entities are invalidated.
        EpicycleSets hold plain values and stay usable.
        """
        self.arena.reset()
        self._next_eid = 0
        self._components.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach a component to an entity, replacing one of the same type.

        Raises:
            ValueError: If entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        comp_type = type(component)
        if comp_type not in self._components:
            self._components[comp_type] = {}

        self._components[comp_type][eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Retrieve a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if comp_type not in self._components:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in self._components[comp_type]:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        return self._components[comp_type][eid]  # type: ignore

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        """Check if entity has a specific component type."""
        return (
            comp_type in self._components
            and eid in self._components[comp_type]
        )

    def remove_component(self, eid: int, comp_type: type[Component]) -> None:
        """Remove a component from an entity.

        Raises:
            KeyError: If entity does not have the component
        """
        if not self.has_component(eid, comp_type):
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")

        del self._components[comp_type][eid]

    def query(self, *comp_types: type[Component]) -> list[int]:
        """Query entities that have ALL specified component types.

        Returns:
            Sorted list of matching entity IDs; all entities if no types given
        """
        if not comp_types:
            return list(self.metadata.keys())

        result_set = set(self._components.get(comp_types[0], {}).keys())

        for comp_type in comp_types[1:]:
            if comp_type not in self._components:
                return []
            result_set &= set(self._components[comp_type].keys())

        return sorted(result_set)

    def destroy_entity(self, eid: int) -> None:
        """Remove entity and all its components.

        Arena memory is only released by clear().
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")

        for comp_store in self._components.values():
            comp_store.pop(eid, None)

        del self.metadata[eid]

    def pipe(self, entity: int) -> Any:
        """Start a fluent pipeline for the given entity.

        Example:
            >>> epicycles = (
            ...     world.pipe(entity)
            ...     .to(IngestPoints())
            ...     .to(SequencePath())
            ...     .to(SpectralDecompose())
            ...     .to(SelectEpicycles(term_count=100))
            ...     .out(EpicycleSet)
            ... )
        """
        from epicycle_ecs.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        num_entities = len(self.metadata)
        num_comp_types = len(self._components)
        return (
            f"World(entities={num_entities}, component_types={num_comp_types}, "
            f"arena={self.arena})"
        )
