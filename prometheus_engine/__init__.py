"""Game-engine building blocks: positions, bounding boxes, transforms, cameras and camera controllers."""

__version__ = "0.1.0"