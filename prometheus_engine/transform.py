"""Per-instance transforms and the packed form sent to the GPU."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np

_log = logging.getLogger(__name__)

FLOAT_PRECISION = np.float32
"""Precision of the packed instance data."""

Vec4 = Tuple[float, float, float, float]


@dataclass(frozen=True)
class RawRenderComponent:
    """Packed instance data: a column-major model matrix, a tint and a highlight."""

    model: Tuple[Vec4, Vec4, Vec4, Vec4]
    tint: Vec4
    highlight: Vec4

    SIZE = 96

    def to_bytes(self) -> bytes:
        """Return the little-endian float32 layout: 16 model values, tint, highlight."""
        values = [value for column in self.model for value in column]
        values.extend(self.tint)
        values.extend(self.highlight)
        return np.asarray(values, dtype="<f4").tobytes()


def _vector(values: Sequence[float], size: int) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.shape != (size,):
        raise ValueError(f"expected {size} components, got {array.shape}")
    return array


def _identity_quaternion() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def _quaternion_from_axis_angle(axis: Sequence[float], degrees: float) -> np.ndarray:
    axis_array = np.asarray(axis, dtype=float)
    norm = float(np.linalg.norm(axis_array))
    if norm == 0.0:
        raise ValueError("rotation axis must not be zero")
    half = math.radians(degrees) / 2.0
    return np.concatenate(([math.cos(half)], axis_array / norm * math.sin(half)))


def _quaternion_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    w1, x1, y1, z1 = a
    w2, x2, y2, z2 = b
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def _rotation_matrix(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = q
    matrix = np.eye(4)
    matrix[:3, :3] = [
        [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
        [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
        [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
    ]
    return matrix


def _translation_matrix(v: Sequence[float]) -> np.ndarray:
    matrix = np.eye(4)
    matrix[:3, 3] = np.asarray(v, dtype=float)
    return matrix


def _scale_matrix(v: Sequence[float]) -> np.ndarray:
    x, y, z = np.asarray(v, dtype=float)
    return np.diag([x, y, z, 1.0])


@dataclass(eq=False)
class InstanceRenderComponent:
    """Placement of one rendered instance.

    The local transform is applied first, then the global one; each is scale,
    then rotation (a ``(w, x, y, z)`` quaternion), then translation.
    """

    visible: bool = True
    local_translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    global_translation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    local_rotation: np.ndarray = field(default_factory=_identity_quaternion)
    global_rotation: np.ndarray = field(default_factory=_identity_quaternion)
    local_scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    global_scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    tint: np.ndarray = field(default_factory=lambda: np.ones(4))
    highlight: np.ndarray = field(default_factory=lambda: np.zeros(4))

    def __post_init__(self) -> None:
        self.local_translation = _vector(self.local_translation, 3)
        self.global_translation = _vector(self.global_translation, 3)
        self.local_rotation = _vector(self.local_rotation, 4)
        self.global_rotation = _vector(self.global_rotation, 4)
        self.local_scale = _vector(self.local_scale, 3)
        self.global_scale = _vector(self.global_scale, 3)
        self.tint = _vector(self.tint, 4)
        self.highlight = _vector(self.highlight, 4)

    def model_matrix(self) -> np.ndarray:
        """Return the 4x4 matrix taking model space to world space."""
        return (
            _translation_matrix(self.global_translation)
            @ _rotation_matrix(self.global_rotation)
            @ _scale_matrix(self.global_scale)
            @ _translation_matrix(self.local_translation)
            @ _rotation_matrix(self.local_rotation)
            @ _scale_matrix(self.local_scale)
        )

    def to_raw(self) -> RawRenderComponent:
        """Pack the transform, tint and highlight at GPU precision."""
        columns = self.model_matrix().T.astype(FLOAT_PRECISION).tolist()
        return RawRenderComponent(
            model=tuple(tuple(column) for column in columns),
            tint=tuple(self.tint.astype(FLOAT_PRECISION).tolist()),
            highlight=tuple(self.highlight.astype(FLOAT_PRECISION).tolist()),
        )

    def local_rotate(self, angle: float, axis: Sequence[float]) -> None:
        """Rotate the local transform by ``angle`` degrees about ``axis``."""
        rotation = _quaternion_from_axis_angle(axis, angle)
        self.local_rotation = _quaternion_product(rotation, np.asarray(self.local_rotation, dtype=float))

    def global_rotate(self, angle: float, axis: Sequence[float]) -> None:
        """Rotate the global transform by ``angle`` degrees about ``axis``."""
        rotation = _quaternion_from_axis_angle(axis, angle)
        self.global_rotation = _quaternion_product(rotation, np.asarray(self.global_rotation, dtype=float))

    def model_vertex(self, vertex: Sequence[float]) -> np.ndarray:
        """Transform a homogeneous vertex; with ``w != 1`` translations do not apply."""
        vector = _vector(vertex, 4)
        if vector[3] != 1.0:
            _log.warning("Vertex taken as direction, translations won't apply")
        return self.model_matrix() @ vector