"""Parameters that systems declare to receive resources, the world and events."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Generic, Hashable, Iterator, MutableMapping, Optional, Tuple, TypeVar

from .events import EventQueue
from .world import CommandBuffer, Entity, World

T = TypeVar("T")
E = TypeVar("E")

_log = logging.getLogger(__name__)


class Access(Enum):
    """How a system uses a resource within one phase."""

    READ = "read"
    WRITE = "write"


AccessMap = Dict[Hashable, Access]
ResourceMap = MutableMapping[Hashable, Any]


class AccessConflictError(RuntimeError):
    """Raised when systems in one phase claim a resource in incompatible ways."""


def _type_name(target: Any) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


def _conflict(name: str, *, twice: bool = False) -> AccessConflictError:
    what = "mutably twice" if twice else "mutably and immutably at the same time"
    return AccessConflictError(
        f"conflicting access in system; attempting to access {name} {what}; "
        "consider creating a new phase"
    )


def _claim_read(access: AccessMap, key: Hashable, name: str) -> None:
    if access.setdefault(key, Access.READ) is not Access.READ:
        raise _conflict(name)


def _claim_write(access: AccessMap, key: Hashable, name: str, *, exclusive: bool) -> None:
    previous = access.get(key)
    access[key] = Access.WRITE
    if previous is Access.READ:
        raise _conflict(name)
    if previous is Access.WRITE and exclusive:
        raise _conflict(name, twice=True)


def _lookup(resources: ResourceMap, key: Hashable, what: str, name: str) -> Any:
    _log.debug("Retrieving %s: %s", what, name)
    try:
        return resources[key]
    except KeyError:
        raise KeyError(f"Retrieving {what}: {name}") from None


class Res(Generic[T]):
    """Shared, read-only access to a resource."""

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        """The resource itself."""
        return self._value

    def __repr__(self) -> str:
        return f"Res({self._value!r})"

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any) -> None:
        _claim_read(access, target, _type_name(target))

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any) -> Res[Any]:
        return cls(_lookup(resources, target, "resource", _type_name(target)))


class ResMut(Generic[T]):
    """Exclusive access to a resource; assigning ``value`` replaces it."""

    def __init__(self, resources: ResourceMap, key: Hashable) -> None:
        _lookup(resources, key, "resource", _type_name(key))
        self._resources = resources
        self._key = key

    @property
    def value(self) -> T:
        """The resource itself."""
        return self._resources[self._key]

    @value.setter
    def value(self, new_value: T) -> None:
        self._resources[self._key] = new_value

    def __repr__(self) -> str:
        return f"ResMut({self.value!r})"

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any) -> None:
        _claim_write(access, target, _type_name(target), exclusive=True)

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any) -> ResMut[Any]:
        return cls(resources, target)


class RefWorld:
    """Read access to the shared :class:`World`."""

    def __init__(self, world: World) -> None:
        self.world = world

    def query(self, *component_types: type) -> Iterator[Tuple[Entity, Any]]:
        """Iterate over entities holding every given component type."""
        return self.world.query(*component_types)

    def get(self, entity: Entity, component_type: type) -> Any:
        """Return the component of ``component_type`` held by ``entity``."""
        return self.world.get(entity, component_type)

    def __len__(self) -> int:
        return len(self.world)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.world)

    def __contains__(self, entity: object) -> bool:
        return entity in self.world

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any = None) -> None:
        _claim_read(access, World, _type_name(World))

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any = None) -> RefWorld:
        return cls(_lookup(resources, World, "resource", _type_name(World)))


class MutWorld(RefWorld):
    """Exclusive access to the shared :class:`World`."""

    def spawn(self, *components: Any) -> Entity:
        """Create an entity holding ``components`` and return it."""
        return self.world.spawn(*components)

    def despawn(self, entity: Entity) -> None:
        """Remove ``entity`` from the world."""
        self.world.despawn(entity)

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any = None) -> None:
        _claim_write(access, World, _type_name(World), exclusive=True)


class Commands:
    """Access to the shared :class:`CommandBuffer`; any number may coexist."""

    def __init__(self, command_buffer: CommandBuffer) -> None:
        self.command_buffer = command_buffer

    def spawn(self, *components: Any) -> None:
        """Record an entity to be spawned when the buffer is applied."""
        self.command_buffer.spawn(*components)

    def despawn(self, entity: Entity) -> None:
        """Record an entity to be removed when the buffer is applied."""
        self.command_buffer.despawn(entity)

    def run_on(self, world: World) -> None:
        """Apply the recorded commands to ``world``."""
        self.command_buffer.run_on(world)

    def __len__(self) -> int:
        return len(self.command_buffer)

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any = None) -> None:
        # Recording commands only appends, so several holders may share a phase.
        _claim_write(access, CommandBuffer, _type_name(CommandBuffer), exclusive=False)

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any = None) -> Commands:
        return cls(_lookup(resources, CommandBuffer, "resource", _type_name(CommandBuffer)))


def _fetch_queue(resources: ResourceMap, event_type: Any) -> EventQueue[Any]:
    queue = _lookup(resources, EventQueue[event_type], "event", _type_name(event_type))
    if not isinstance(queue, EventQueue):
        raise TypeError(f"Downcasting event: {_type_name(event_type)}")
    return queue


class EventReader(Generic[E]):
    """Reads the events currently held by one queue."""

    def __init__(self, queue: EventQueue[E]) -> None:
        self._queue = queue

    def read(self) -> Iterator[E]:
        """Iterate over the queued events in the order they were sent."""
        return self._queue.events()

    def __iter__(self) -> Iterator[E]:
        return self.read()

    def __len__(self) -> int:
        return len(self._queue)

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any) -> None:
        _claim_read(access, EventQueue[target], _type_name(target))

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any) -> EventReader[Any]:
        return cls(_fetch_queue(resources, target))


class EventWriter(Generic[E]):
    """Sends events into one queue; several writers may share a phase."""

    def __init__(self, queue: EventQueue[E]) -> None:
        self._queue = queue

    def send(self, event: E) -> None:
        """Append ``event`` to the queue."""
        self._queue.push(event)

    @classmethod
    def _declare_access(cls, access: AccessMap, target: Any) -> None:
        _claim_write(access, EventQueue[target], _type_name(target), exclusive=False)

    @classmethod
    def _fetch(cls, resources: ResourceMap, target: Any) -> EventWriter[Any]:
        return cls(_fetch_queue(resources, target))


def _optional_queue(resources: ResourceMap, event_type: Any) -> Optional[EventQueue[Any]]:
    queue = resources.get(EventQueue[event_type])
    return queue if isinstance(queue, EventQueue) else None