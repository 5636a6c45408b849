# prometheus_engine

Building blocks for a small game engine.

- **Systems from type hints.** `prometheus_engine.scheduler.system.into_system`
  wraps a plain function in a `FunctionSystem`. Each parameter's annotation
  says what the function receives. The choices are `Res[T]`, `ResMut[T]`,
  `RefWorld`, `MutWorld`, `Commands`, `EventReader[E]` and `EventWriter[E]`.
  They are all in `prometheus_engine.scheduler.params`.
- **Access checking.** Every parameter claims read or write access in an access
  map. Conflicting claims raise `AccessConflictError`. The conflicts are:
  - a read and a write of the same resource, world or event queue;
  - two `ResMut` of the same resource;
  - two `MutWorld`.
  
  Any number of `Commands` or `EventWriter` may share the map.
- **An entity world.** `prometheus_engine.scheduler.world` provides three types:
  - `World` holds entities, each with at most one component per type.
  - `CommandBuffer` records spawns and despawns and applies them later with
    `run_on`.
  - `WorldId` holds either an `Entity` or a plain index.
- **Event queues.** An `EventQueue` is in `prometheus_engine.scheduler.events`.
  `increment_and_cleanup` drops every event that has been through one tick.
- **Geometry.** The geometry types are:
  - `Position` (`prometheus_engine.position`): its `<`, `<=`, `>` and `>=` hold
    only when they hold for every component. `partial_cmp` gives the
    lexicographic order.
  - `AABB` (`prometheus_engine.aabb`): middle, 2D split, containment,
    expansion and translation.
  - `BiMap` (`prometheus_engine.bimap`): a map looked up by key or by value.
- **Transforms.** `InstanceRenderComponent` is in `prometheus_engine.transform`
  and is built on numpy. It composes the local transform, then the global one.
  Each of those is scale, then rotation, then translation. `to_raw` packs the
  result into a `RawRenderComponent`, and `to_bytes` gives its 96-byte float32
  layout.
- **Cameras.** `prometheus_engine.camera` has orthographic and perspective
  projections, views and uniforms. `view_projection_uniform` combines a view
  and a projection of the same kind.
- **Camera controllers.** `prometheus_engine.controllers` has `OrthoController`
  and `PerspController`. They turn `KeyCode`/`ElementState` input, mouse motion
  and scrolling into camera movement.

## Installation

```
pip install .
```

## Running systems

The caller keeps two dictionaries and passes them to `FunctionSystem.run`:

- a **resource mapping**, keyed by type;
- an **access map**.

The keys of the resource mapping are:

- a resource's class, for `Res` and `ResMut`;
- `World`, for `RefWorld` and `MutWorld`;
- `CommandBuffer`, for `Commands`;
- `EventQueue[E]`, for `EventReader[E]` and `EventWriter[E]`.

Clear the access map between groups of systems that may touch the same things.

Annotations must be real objects, not strings. Do not use
`from __future__ import annotations` in a module that defines systems.

```python
from prometheus_engine.scheduler.events import EventQueue
from prometheus_engine.scheduler.params import (
    Commands, EventReader, EventWriter, RefWorld, ResMut,
)
from prometheus_engine.scheduler.system import into_system
from prometheus_engine.scheduler.world import CommandBuffer, World


class Counter:
    def __init__(self):
        self.count = 0


class Hit:
    def __init__(self, damage):
        self.damage = damage


def increment(counter: ResMut[Counter], hits: EventWriter[Hit]):
    counter.value.count += 1
    hits.send(Hit(3))


def spawn(commands: Commands):
    commands.spawn(1, True)


def report(hits: EventReader[Hit], world: RefWorld):
    print([hit.damage for hit in hits.read()], len(world))


resources = {
    Counter: Counter(),
    World: World(),
    CommandBuffer: CommandBuffer(),
    EventQueue[Hit]: EventQueue(Hit),
}
accesses = {}

for func in (increment, spawn):
    into_system(func).run(resources, accesses)
accesses.clear()

resources[CommandBuffer].run_on(resources[World])
into_system(report).run(resources, accesses)    # prints [3] 1
accesses.clear()

resources[EventQueue[Hit]].increment_and_cleanup()  # the Hit is dropped
```

`ResMut.value` can also be assigned to. This replaces the resource in the
mapping.

## Querying the world

```python
from prometheus_engine.scheduler.world import World

world = World()
entity = world.spawn(1, "crate")
for found, (number, name) in world.query(int, str):
    ...
world.get(entity, str)   # "crate"
world.despawn(entity)
```

`query` has two forms:

- with one type, it yields `(entity, component)`;
- with several types, it yields `(entity, (component, ...))`.

## Transforms and cameras

```python
import numpy as np
from prometheus_engine.transform import InstanceRenderComponent
from prometheus_engine.camera import (
    OrthoProjection, OrthoView, view_projection_uniform,
)
from prometheus_engine.controllers import ElementState, KeyCode, OrthoController

instance = InstanceRenderComponent()
instance.global_rotate(90.0, (0.0, 1.0, 0.0))         # degrees
instance.model_vertex((1.0, 0.0, 0.0, 1.0))            # about (0, 0, -1, 1)

view = OrthoView(np.zeros(3))
projection = OrthoProjection.new_square(10.0, 0.1, 1000.0)
controller = OrthoController(speed=4.0, sensitivity=1.0)
controller.process_keyboard(KeyCode.KEY_D, ElementState.PRESSED)
controller.update_camera(view, projection, 0.016)

uniform_bytes = view_projection_uniform(view, projection).to_bytes()
```

## What the package does not do

The package does not contain:

- **A scheduler or main loop.** Nothing orders systems by phase or runs them
  each frame, and nothing ages event queues or applies command buffers
  automatically. The caller does all of this, as shown above.
- **Window, input or rendering.** Controllers take `KeyCode`, `ElementState`,
  `LineDelta` and `PixelDelta` values from the caller. Uniforms and instance
  data are produced as bytes, and nothing draws them.
- **Spatial index or plugins.** There is no spatial index over `AABB`s, and no
  plugin or application layer.

## Running the tests

```
pip install ".[test]"
pytest
```