"""Pipeline and scheduling.

Fluent API for composing systems into a pipeline that runs them in order,
checking each system's required components before it runs.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from epicycle_ecs.core.system import System
    from epicycle_ecs.core.world import World

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class Pipe:
    """Fluent pipeline builder.

    Chain systems with ``.to()`` or the ``|`` operator and run them with
    ``.out()`` or ``.execute()``.

    Example:
        >>> world = World()
        >>> entity = world.spawn_mask(mask)
        >>> path = (
        ...     world.pipe(entity)
        ...     | IngestPoints()
        ...     | SequencePath()
        ... ).out(OrderedPath)
    """

    def __init__(self, world: "World", entity: int) -> None:
        self.world: Any = world
        self.entities = [entity]
        self.systems: list[Any] = []

    def to(self, system: "System") -> "Pipe":
        """Add system to pipeline."""
        self.systems.append(system)
        return self

    def __or__(self, system: "System") -> "Pipe":
        """Pipe operator for chaining systems; same as ``.to(system)``."""
        return self.to(system)

    def out(self, component_type: type[T]) -> T:
        """Execute pipeline and return component of specified type.

        Raises:
            RuntimeError: If any system cannot run (missing dependencies)
            KeyError: If entity doesn't have the requested component after execution
        """
        self.execute()
        return self.world.get_component(self.entities[0], component_type)  # type: ignore[no-any-return]

    def execute(self) -> None:
        """Run all systems in order with dependency checking.

        Raises:
            RuntimeError: If any system cannot run on any entity
        """
        start = time.perf_counter()
        logger.info("Pipeline: %d systems queued for entities %s", len(self.systems), self.entities)

        for system in self.systems:
            runnable = [
                eid for eid in self.entities if system.can_run(self.world, eid)
            ]

            if not runnable:
                required = [ct.__name__ for ct in system.required_components()]
                raise RuntimeError(
                    f"System {type(system).__name__} cannot run: "
                    f"entities missing required components {required}. "
                    f"Available entities: {self.entities}"
                )

            t0 = time.perf_counter()
            system.run(self.world, runnable)
            logger.debug("  %r completed in %.1fms", system, (time.perf_counter() - t0) * 1000)

        logger.info(
            "Pipeline complete: %d systems in %.0fms",
            len(self.systems),
            (time.perf_counter() - start) * 1000,
        )
