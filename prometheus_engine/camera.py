"""Camera projections, views and the uniform data they produce."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np

OPENGL_TO_WGPU_MATRIX = np.array(
    [
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 1.0, 0.0, 0.0],
        [0.0, 0.0, 0.5, 0.5],
        [0.0, 0.0, 0.0, 1.0],
    ]
)
"""Maps OpenGL clip depth ``[-1, 1]`` onto the ``[0, 1]`` range used by the renderer."""


def _point(values: Sequence[float]) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.shape != (3,):
        raise ValueError(f"expected 3 components, got {array.shape}")
    return array


def _matrix(values: Sequence[Sequence[float]]) -> np.ndarray:
    array = np.array(values, dtype=float)
    if array.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got {array.shape}")
    return array


def _column_major_bytes(matrix: np.ndarray) -> bytes:
    return np.asarray(matrix, dtype=float).T.astype("<f4").tobytes()


def _ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    if right == left or top == bottom or far == near:
        raise ValueError("orthographic volume must not be empty")
    return np.array(
        [
            [2.0 / (right - left), 0.0, 0.0, -(right + left) / (right - left)],
            [0.0, 2.0 / (top - bottom), 0.0, -(top + bottom) / (top - bottom)],
            [0.0, 0.0, -2.0 / (far - near), -(far + near) / (far - near)],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _perspective(fovy: float, aspect: float, near: float, far: float) -> np.ndarray:
    if not 0.0 < fovy < math.pi:
        raise ValueError(f"field of view must lie between 0 and pi radians, got {fovy}")
    if not aspect > 0.0:
        raise ValueError(f"aspect ratio must be positive, got {aspect}")
    if not near > 0.0 or not far > 0.0:
        raise ValueError("near and far planes must be positive")
    if not far > near:
        raise ValueError("far plane must lie beyond the near plane")
    f = 1.0 / math.tan(fovy / 2.0)
    return np.array(
        [
            [f / aspect, 0.0, 0.0, 0.0],
            [0.0, f, 0.0, 0.0],
            [0.0, 0.0, (far + near) / (near - far), 2.0 * far * near / (near - far)],
            [0.0, 0.0, -1.0, 0.0],
        ]
    )


def _look_to_rh(eye: np.ndarray, direction: np.ndarray, up: np.ndarray) -> np.ndarray:
    f = direction / np.linalg.norm(direction)
    s = np.cross(f, up)
    s = s / np.linalg.norm(s)
    u = np.cross(s, f)
    return np.array(
        [
            [s[0], s[1], s[2], -float(eye @ s)],
            [u[0], u[1], u[2], -float(eye @ u)],
            [-f[0], -f[1], -f[2], float(eye @ f)],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _aspect(width: float, height: float) -> float:
    if height == 0:
        raise ValueError("height must not be zero")
    return width / height


class TransformComposer(ABC):
    """Something that produces a 4x4 transform matrix (acting on column vectors)."""

    OPENGL_TO_WGPU_MATRIX = OPENGL_TO_WGPU_MATRIX

    @abstractmethod
    def compose_transform(self) -> np.ndarray:
        """Return the transform as a 4x4 matrix."""


@dataclass
class OrthoProjection(TransformComposer):
    """An orthographic viewing volume."""

    left: float
    right: float
    bottom: float
    top: float
    near: float
    far: float

    @classmethod
    def new_square(cls, length: float, near: float, far: float) -> OrthoProjection:
        """A square volume ``length`` wide, centred on the origin."""
        return cls.new_rect(length, length, near, far)

    @classmethod
    def new_rect(cls, width: float, height: float, near: float, far: float) -> OrthoProjection:
        """A ``width`` by ``height`` volume centred on the origin."""
        return cls(
            left=-width / 2.0,
            right=width / 2.0,
            bottom=-height / 2.0,
            top=height / 2.0,
            near=near,
            far=far,
        )

    def to_world_space(self, x: float, y: float, width: float, height: float) -> Tuple[float, float]:
        """Map a pixel position in a ``width`` by ``height`` window to world x and y."""
        x_ndc = (2.0 * x / width) - 1.0
        y_ndc = 1.0 - (2.0 * y / height)
        x_world = (self.right - self.left) / 2.0 * x_ndc + (self.right + self.left) / 2.0
        y_world = (self.top - self.bottom) / 2.0 * y_ndc + (self.top + self.bottom) / 2.0
        return x_world, y_world

    def compose_transform(self) -> np.ndarray:
        return self.OPENGL_TO_WGPU_MATRIX @ _ortho(
            self.left, self.right, self.bottom, self.top, self.near, self.far
        )


@dataclass(eq=False)
class OrthoView(TransformComposer):
    """Where an orthographic camera sits."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.position = _point(self.position)

    def compose_transform(self) -> np.ndarray:
        matrix = np.eye(4)
        matrix[:3, 3] = -self.position
        return matrix


@dataclass(eq=False)
class OrthoUniform:
    """Uniform data for an orthographic camera."""

    view_projection: np.ndarray = field(default_factory=lambda: np.zeros((4, 4)))

    def __post_init__(self) -> None:
        self.view_projection = _matrix(self.view_projection)

    def to_bytes(self) -> bytes:
        """Return the matrix as 16 little-endian float32 values, column by column."""
        return _column_major_bytes(self.view_projection)


@dataclass
class PerspProjection(TransformComposer):
    """A perspective viewing frustum; ``fovy`` is the vertical field of view in radians."""

    aspect: float
    fovy: float
    znear: float
    zfar: float

    @classmethod
    def from_size(
        cls, width: float, height: float, fovy: float, znear: float, zfar: float
    ) -> PerspProjection:
        """A frustum whose aspect ratio matches a ``width`` by ``height`` window."""
        return cls(_aspect(width, height), fovy, znear, zfar)

    def resize(self, width: float, height: float) -> None:
        """Match the aspect ratio to a ``width`` by ``height`` window."""
        self.aspect = _aspect(width, height)

    def compose_transform(self) -> np.ndarray:
        return self.OPENGL_TO_WGPU_MATRIX @ _perspective(self.fovy, self.aspect, self.znear, self.zfar)


@dataclass(eq=False)
class PerspView(TransformComposer):
    """Where a perspective camera sits and where it looks; angles in radians."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    yaw: float = 0.0
    pitch: float = 0.0

    def __post_init__(self) -> None:
        self.position = _point(self.position)

    def direction(self) -> np.ndarray:
        """Unit vector the camera looks along."""
        sin_pitch, cos_pitch = math.sin(self.pitch), math.cos(self.pitch)
        sin_yaw, cos_yaw = math.sin(self.yaw), math.cos(self.yaw)
        vector = np.array([cos_pitch * cos_yaw, sin_pitch, cos_pitch * sin_yaw])
        return vector / np.linalg.norm(vector)

    def compose_transform(self) -> np.ndarray:
        return _look_to_rh(self.position, self.direction(), np.array([0.0, 1.0, 0.0]))


@dataclass(eq=False)
class PerspUniform:
    """Uniform data for a perspective camera."""

    view_projection: np.ndarray = field(default_factory=lambda: np.zeros((4, 4)))
    view_position: np.ndarray = field(default_factory=lambda: np.zeros(4))

    def __post_init__(self) -> None:
        self.view_projection = _matrix(self.view_projection)
        position = np.array(self.view_position, dtype=float)
        if position.shape != (4,):
            raise ValueError(f"expected 4 components, got {position.shape}")
        self.view_position = position

    def to_bytes(self) -> bytes:
        """Return the matrix column by column, then the position, as little-endian float32."""
        return _column_major_bytes(self.view_projection) + self.view_position.astype("<f4").tobytes()


def view_projection_uniform(
    view: Union[OrthoView, PerspView],
    projection: Union[OrthoProjection, PerspProjection],
) -> Union[OrthoUniform, PerspUniform]:
    """Combine a view and a projection of the same kind into uniform data."""
    if isinstance(view, OrthoView):
        if not isinstance(projection, OrthoProjection):
            raise TypeError("Need an ortho projection with an ortho view")
        return OrthoUniform(projection.compose_transform() @ view.compose_transform())
    if isinstance(view, PerspView):
        if not isinstance(projection, PerspProjection):
            raise TypeError("Need a persp projection with a persp view")
        return PerspUniform(
            projection.compose_transform() @ view.compose_transform(),
            np.append(view.position, 1.0),
        )
    raise TypeError(f"unsupported view: {view!r}")