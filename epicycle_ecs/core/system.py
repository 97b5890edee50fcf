"""System base class for ECS transformations.

Systems are the "logic" layer of the ECS architecture. Each stage of the
silhouette-to-epicycles pipeline is a System that reads one component from
an entity and attaches the next one.

Example:
    >>> class MySystem(System):
    ...     def required_components(self):
    ...         return [OrderedPath]
    ...     def produced_components(self):
    ...         return [Spectrum]
    ...     def run(self, world, eids):
    ...         for eid in eids:
    ...             path = world.get_component(eid, OrderedPath)
    ...             # Process...
    ...             world.add_component(eid, Spectrum(...))
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from epicycle_ecs.core.world import World


class System(ABC):
    """Base class for all ECS systems.

    Systems transform components attached to entities. They declare:
    - required_components(): What inputs they need
    - produced_components(): What outputs they create
    - run(): The actual transformation logic
    """

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""
        pass

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output.

        Systems that only record results in ``world.metadata`` return [].
        """
        pass

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities.

        Args:
            world: World instance with entities and components
            eids: List of entity IDs to process
        """
        pass

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components."""
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
