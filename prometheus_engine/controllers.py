"""Controllers that move cameras in response to keyboard and mouse input."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Union

import numpy as np

from .camera import OrthoProjection, OrthoView, PerspProjection, PerspView

SAFE_FRAC_PI_2 = math.pi / 2 - 0.0001
"""Largest pitch, in radians, a perspective camera may reach."""


class KeyCode(Enum):
    """Physical keys."""

    KEY_W = auto()
    KEY_A = auto()
    KEY_S = auto()
    KEY_D = auto()
    KEY_Q = auto()
    KEY_E = auto()
    SPACE = auto()
    SHIFT_LEFT = auto()
    ESCAPE = auto()


class ElementState(Enum):
    """Whether a key or button went down or up."""

    PRESSED = auto()
    RELEASED = auto()


@dataclass(frozen=True)
class LineDelta:
    """A scroll measured in lines."""

    x: float
    y: float


@dataclass(frozen=True)
class PixelDelta:
    """A scroll measured in pixels."""

    x: float
    y: float


def _amount(state: ElementState) -> float:
    return 1.0 if state is ElementState.PRESSED else 0.0


class CameraController(ABC):
    """Turns input into camera movement."""

    @abstractmethod
    def update_camera(self, view: object, projection: object, dt: float) -> None:
        """Move the camera for a frame lasting ``dt`` seconds."""


_ORTHO_KEYS: Dict[KeyCode, str] = {
    KeyCode.KEY_W: "up",
    KeyCode.KEY_S: "down",
    KeyCode.KEY_D: "right",
    KeyCode.KEY_A: "left",
    KeyCode.SPACE: "backward",
    KeyCode.SHIFT_LEFT: "forward",
}


@dataclass
class OrthoController(CameraController):
    """Pans with W/A/S/D and zooms with Space (out) and left Shift (in)."""

    speed: float
    sensitivity: float
    up: float = 0.0
    down: float = 0.0
    left: float = 0.0
    right: float = 0.0
    forward: float = 0.0
    backward: float = 0.0

    def process_keyboard(self, key: KeyCode, state: ElementState) -> None:
        """Record a key going down or up; unbound keys are ignored."""
        attribute = _ORTHO_KEYS.get(key)
        if attribute is not None:
            setattr(self, attribute, _amount(state))

    def update_camera(self, view: object, projection: object, dt: float) -> None:
        """Pan and zoom; does nothing unless given an ortho view and projection."""
        if not isinstance(view, OrthoView) or not isinstance(projection, OrthoProjection):
            return
        rate = self.speed * self.sensitivity * dt
        view.position[0] += (self.right - self.left) * rate
        view.position[1] += (self.up - self.down) * rate

        zoom_factor = (self.backward - self.forward) * rate
        if zoom_factor != 0.0:
            scale = 1.0 + zoom_factor
            projection.bottom *= scale
            projection.top *= scale
            projection.left *= scale
            projection.right *= scale


_PERSP_KEYS: Dict[KeyCode, str] = {
    KeyCode.KEY_W: "forward",
    KeyCode.KEY_S: "backward",
    KeyCode.KEY_A: "left",
    KeyCode.KEY_D: "right",
    KeyCode.SPACE: "up",
    KeyCode.SHIFT_LEFT: "down",
}


@dataclass
class PerspController(CameraController):
    """Flies with W/A/S/D, Space and left Shift; looks around while the mouse is held."""

    speed: float
    sensitivity: float
    left: float = 0.0
    right: float = 0.0
    forward: float = 0.0
    backward: float = 0.0
    up: float = 0.0
    down: float = 0.0
    rotate_horizontal: float = 0.0
    rotate_vertical: float = 0.0
    scroll: float = 0.0
    mouse_pressed: bool = False

    def process_keyboard(self, key: KeyCode, state: ElementState) -> None:
        """Record a key going down or up; unbound keys are ignored."""
        attribute = _PERSP_KEYS.get(key)
        if attribute is not None:
            setattr(self, attribute, _amount(state))

    def process_mouse(self, mouse_dx: float, mouse_dy: float) -> None:
        """Record mouse motion, but only while the mouse button is held."""
        if self.mouse_pressed:
            self.rotate_horizontal = float(mouse_dx)
            self.rotate_vertical = float(mouse_dy)

    def process_mouse_button(self, state: ElementState) -> None:
        """Record the left mouse button going down or up."""
        self.mouse_pressed = state is ElementState.PRESSED

    def process_scroll(self, delta: Union[LineDelta, PixelDelta]) -> None:
        """Scrolling up raises the movement speed, scrolling down lowers it."""
        if isinstance(delta, LineDelta):
            self.scroll = -delta.y * 0.5
        elif isinstance(delta, PixelDelta):
            self.scroll = -float(delta.y)
        else:
            raise TypeError(f"unsupported scroll delta: {delta!r}")
        self.speed -= self.scroll
        self.scroll = 0.0

    def update_camera(self, view: object, projection: object, dt: float) -> None:
        """Move and turn; does nothing unless given a persp view and projection."""
        if not isinstance(view, PerspView) or not isinstance(projection, PerspProjection):
            return
        yaw_sin, yaw_cos = math.sin(view.yaw), math.cos(view.yaw)
        forward = np.array([yaw_cos, 0.0, yaw_sin])
        forward /= np.linalg.norm(forward)
        right = np.array([-yaw_sin, 0.0, yaw_cos])
        right /= np.linalg.norm(right)
        view.position += forward * (self.forward - self.backward) * self.speed * dt
        view.position += right * (self.right - self.left) * self.speed * dt
        view.position[1] += (self.up - self.down) * self.speed * dt

        view.yaw += self.rotate_horizontal * self.sensitivity * dt
        view.pitch += -self.rotate_vertical * self.sensitivity * dt

        self.rotate_horizontal = 0.0
        self.rotate_vertical = 0.0

        if view.pitch < -SAFE_FRAC_PI_2:
            view.pitch = -SAFE_FRAC_PI_2
        elif view.pitch > SAFE_FRAC_PI_2:
            view.pitch = SAFE_FRAC_PI_2