[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "prometheus_engine"
version = "0.1.0"
description = "Building blocks for a small game engine: type-hinted systems, resources, events, an entity world, bounding boxes, transforms and cameras"
requires-python = ">=3.10"
keywords = ["game engine", "ecs", "entity component system", "events", "aabb", "camera", "transform"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Typing :: Typed",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["prometheus_engine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
