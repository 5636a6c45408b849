"""Event types and the queues that carry them between systems."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Generic, Iterator, Optional, TypeVar

E = TypeVar("E")


class Event:
    """Base class for types sent through event queues."""


@dataclass
class _Pending(Generic[E]):
    event: E
    ticks: int = 0


class EventQueue(Generic[E]):
    """Events sent during a tick, dropped once a tick has passed.

    When ``event_type`` is given, only instances of it may be pushed.
    """

    def __init__(self, event_type: Optional[type] = None) -> None:
        self.event_type = event_type
        self._events: Deque[_Pending[E]] = deque()

    def push(self, event: E) -> None:
        """Append ``event`` to the queue."""
        if self.event_type is not None and not isinstance(event, self.event_type):
            raise TypeError(
                f"expected {self.event_type.__name__}, got {type(event).__name__}"
            )
        self._events.append(_Pending(event))

    def events(self) -> Iterator[E]:
        """Iterate over the queued events in the order they were sent."""
        return iter([pending.event for pending in self._events])

    def increment_and_cleanup(self) -> None:
        """Age every event by one tick and drop those a tick old or more."""
        for pending in self._events:
            pending.ticks += 1
        self._events = deque(pending for pending in self._events if pending.ticks < 1)

    def __iter__(self) -> Iterator[E]:
        return self.events()

    def __len__(self) -> int:
        return len(self._events)

    def __repr__(self) -> str:
        name = self.event_type.__name__ if self.event_type is not None else "Any"
        return f"EventQueue[{name}]({list(self.events())!r})"


def _queue_type_name(queue: EventQueue[Any]) -> str:
    return queue.event_type.__name__ if queue.event_type is not None else "Any"