"""A small entity-component store with deferred commands."""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Tuple, Union


@dataclass(frozen=True, order=True)
class Entity:
    """Handle to an entity; the generation tells reused slots apart."""

    id: int
    generation: int = 0


class World:
    """Entities, each holding at most one component of each type."""

    def __init__(self) -> None:
        self._entities: Dict[Entity, Dict[type, Any]] = {}
        self._free: List[int] = []
        self._generations: Dict[int, int] = {}
        self._next_id = 0

    def _allocate(self) -> Entity:
        if self._free:
            index = self._free.pop()
            generation = self._generations[index] + 1
        else:
            index = self._next_id
            self._next_id += 1
            generation = 0
        self._generations[index] = generation
        return Entity(index, generation)

    def spawn(self, *args: Any) -> Entity:
        """Create an entity holding the given components and return it."""
        components: Dict[type, Any] = {}
        for component in args:
            component_type = type(component)
            if component_type in components:
                raise ValueError(f"duplicate component of type {component_type.__name__}")
            components[component_type] = component
        entity = self._allocate()
        self._entities[entity] = components
        return entity

    def despawn(self, entity: Entity) -> None:
        """Remove ``entity`` and its components; KeyError if it does not exist."""
        if entity not in self._entities:
            raise KeyError(f"no such entity: {entity!r}")
        del self._entities[entity]
        self._free.append(entity.id)

    def get(self, entity: Entity, component_type: type) -> Any:
        """Return the component of ``component_type`` held by ``entity``."""
        try:
            components = self._entities[entity]
        except KeyError:
            raise KeyError(f"no such entity: {entity!r}") from None
        try:
            return components[component_type]
        except KeyError:
            raise KeyError(
                f"entity {entity!r} has no component {component_type.__name__}"
            ) from None

    def query(self, *args: type) -> Iterator[Tuple[Entity, Any]]:
        """Iterate over entities holding every given component type.

        With one type the items are ``(entity, component)``; with several they
        are ``(entity, (component, ...))`` in the order the types were given.
        """
        if not args:
            raise ValueError("query needs at least one component type")
        matches = [
            (entity, tuple(components[t] for t in args))
            for entity, components in self._entities.items()
            if all(t in components for t in args)
        ]
        if len(args) == 1:
            return ((entity, found[0]) for entity, found in matches)
        return iter(matches)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))


class CommandBuffer:
    """Spawns and despawns recorded now and applied to a world later."""

    def __init__(self) -> None:
        self._commands: List[Callable[[World], None]] = []

    def spawn(self, *args: Any) -> None:
        """Record the spawning of an entity with the given components."""
        components = tuple(args)
        self._commands.append(lambda world: world.spawn(*components))

    def despawn(self, entity: Entity) -> None:
        """Record the removal of ``entity``; a missing entity is ignored."""

        def apply(world: World) -> None:
            with suppress(KeyError):
                world.despawn(entity)

        self._commands.append(apply)

    def run_on(self, world: World) -> None:
        """Apply the recorded commands in order, then forget them."""
        commands, self._commands = self._commands, []
        for command in commands:
            command(world)

    def __len__(self) -> int:
        return len(self._commands)


@dataclass(frozen=True)
class WorldId:
    """Identifier of an object, either an :class:`Entity` or a plain index."""

    value: Union[Entity, int]

    def unwrap_hecs(self) -> Entity:
        """Return the entity; TypeError if this id is a plain index."""
        if isinstance(self.value, Entity):
            return self.value
        raise TypeError(f"Expected Entity, got: {self!r}")

    def unwrap_other(self) -> int:
        """Return the plain index; TypeError if this id is an entity."""
        if isinstance(self.value, Entity):
            raise TypeError(f"Expected int, got: {self!r}")
        return self.value