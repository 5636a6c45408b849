from dataclasses import dataclass

import pytest

from prometheus_engine.scheduler.events import Event, EventQueue


@dataclass
class Event1(Event):
    payload: bool


@dataclass
class Other(Event):
    value: int


def test_push_and_read_in_order():
    queue = EventQueue(Event1)
    first, second = Event1(True), Event1(False)
    queue.push(first)
    queue.push(second)
    assert list(queue.events()) == [first, second]
    assert len(queue) == 2


def test_reading_does_not_consume():
    queue = EventQueue(Event1)
    event = Event1(True)
    queue.push(event)
    assert list(queue.events()) == [event]
    assert list(queue.events()) == [event]
    assert list(queue) == [event]


def test_cleanup_drops_events_after_one_tick():
    queue = EventQueue(Event1)
    queue.push(Event1(True))
    queue.increment_and_cleanup()
    assert list(queue.events()) == []
    assert len(queue) == 0


def test_events_pushed_after_cleanup_survive_until_next():
    queue = EventQueue(Event1)
    queue.push(Event1(True))
    queue.increment_and_cleanup()
    late = Event1(False)
    queue.push(late)
    assert list(queue.events()) == [late]
    queue.increment_and_cleanup()
    assert list(queue.events()) == []


def test_wrong_event_type_rejected():
    queue = EventQueue(Event1)
    with pytest.raises(TypeError):
        queue.push(Other(1))
    assert len(queue) == 0


def test_untyped_queue_accepts_anything():
    queue = EventQueue()
    queue.push(Other(1))
    queue.push(Event1(True))
    assert [type(e) for e in queue.events()] == [Other, Event1]


def test_iterator_is_a_snapshot():
    queue = EventQueue(Event1)
    queue.push(Event1(True))
    iterator = queue.events()
    queue.push(Event1(False))
    assert [e.payload for e in iterator] == [True]