import math

import numpy as np
import pytest

from prometheus_engine.camera import OrthoProjection, OrthoView, PerspProjection, PerspView
from prometheus_engine.controllers import (
    SAFE_FRAC_PI_2,
    ElementState,
    KeyCode,
    LineDelta,
    OrthoController,
    PerspController,
    PixelDelta,
)

PRESSED = ElementState.PRESSED
RELEASED = ElementState.RELEASED


def ortho_camera():
    return OrthoView([0.0, 0.0, 0.0]), OrthoProjection.new_square(10.0, 0.1, 1000.0)


def persp_camera(yaw=0.0, pitch=0.0):
    return PerspView([0.0, 0.0, -2.0], yaw, pitch), PerspProjection(4 / 3, 0.8, 0.1, 1000.0)


def test_ortho_pans_right_while_key_held():
    controller = OrthoController(4.0, 1.0)
    view, projection = ortho_camera()
    controller.process_keyboard(KeyCode.KEY_D, PRESSED)
    controller.update_camera(view, projection, 0.5)
    assert view.position[0] == pytest.approx(4.0 * 1.0 * 0.5)
    assert view.position[1] == pytest.approx(0.0)

    controller.process_keyboard(KeyCode.KEY_D, RELEASED)
    before = view.position.copy()
    controller.update_camera(view, projection, 0.5)
    np.testing.assert_array_equal(view.position, before)


def test_ortho_opposite_keys_cancel():
    controller = OrthoController(2.0, 3.0)
    view, projection = ortho_camera()
    controller.process_keyboard(KeyCode.KEY_W, PRESSED)
    controller.process_keyboard(KeyCode.KEY_S, PRESSED)
    controller.update_camera(view, projection, 1.0)
    assert view.position[1] == pytest.approx(0.0)
    controller.process_keyboard(KeyCode.KEY_S, RELEASED)
    controller.update_camera(view, projection, 0.25)
    assert view.position[1] == pytest.approx(2.0 * 3.0 * 0.25)


def test_ortho_space_zooms_out_and_shift_zooms_in():
    controller = OrthoController(1.0, 1.0)
    view, projection = ortho_camera()
    left, top = projection.left, projection.top
    controller.process_keyboard(KeyCode.SPACE, PRESSED)
    controller.update_camera(view, projection, 0.1)
    assert projection.left == pytest.approx(left * (1.0 + 0.1))
    assert projection.top == pytest.approx(top * (1.0 + 0.1))

    controller.process_keyboard(KeyCode.SPACE, RELEASED)
    controller.process_keyboard(KeyCode.SHIFT_LEFT, PRESSED)
    wider = projection.right
    controller.update_camera(view, projection, 0.1)
    assert projection.right < wider
    assert projection.near == 0.1 and projection.far == 1000.0


def test_ortho_zero_speed_is_stationary():
    controller = OrthoController(0.0, 1.0)
    view, projection = ortho_camera()
    original = OrthoProjection.new_square(10.0, 0.1, 1000.0)
    for key in (KeyCode.KEY_D, KeyCode.KEY_W, KeyCode.SPACE):
        controller.process_keyboard(key, PRESSED)
    controller.update_camera(view, projection, 1.0)
    np.testing.assert_array_equal(view.position, [0.0, 0.0, 0.0])
    assert projection == original


def test_ortho_ignores_unbound_keys_and_wrong_camera():
    controller = OrthoController(4.0, 1.0)
    controller.process_keyboard(KeyCode.ESCAPE, PRESSED)
    assert (controller.up, controller.down, controller.left, controller.right) == (0.0, 0.0, 0.0, 0.0)
    controller.process_keyboard(KeyCode.KEY_A, PRESSED)
    view, projection = persp_camera()
    before = view.position.copy()
    controller.update_camera(view, projection, 1.0)
    np.testing.assert_array_equal(view.position, before)


def test_persp_moves_forward_along_yaw():
    controller = PerspController(4.0, 1.0)
    view, projection = persp_camera()
    start = view.position.copy()
    controller.process_keyboard(KeyCode.KEY_W, PRESSED)
    controller.update_camera(view, projection, 0.5)
    np.testing.assert_allclose(view.position - start, [4.0 * 0.5, 0.0, 0.0], atol=1e-12)


def test_persp_forward_follows_turned_yaw():
    controller = PerspController(2.0, 1.0)
    view, projection = persp_camera(yaw=math.pi / 2)
    start = view.position.copy()
    controller.process_keyboard(KeyCode.KEY_W, PRESSED)
    controller.update_camera(view, projection, 1.0)
    np.testing.assert_allclose(view.position - start, [0.0, 0.0, 2.0], atol=1e-12)


def test_persp_strafe_and_vertical():
    controller = PerspController(3.0, 1.0)
    view, projection = persp_camera()
    start = view.position.copy()
    controller.process_keyboard(KeyCode.KEY_D, PRESSED)
    controller.process_keyboard(KeyCode.SPACE, PRESSED)
    controller.update_camera(view, projection, 1.0)
    np.testing.assert_allclose(view.position - start, [0.0, 3.0, 3.0], atol=1e-12)
    controller.process_keyboard(KeyCode.SHIFT_LEFT, PRESSED)
    height = view.position[1]
    controller.update_camera(view, projection, 1.0)
    assert view.position[1] == pytest.approx(height)


def test_persp_mouse_ignored_unless_pressed():
    controller = PerspController(1.0, 1.0)
    controller.process_mouse(5.0, 5.0)
    assert (controller.rotate_horizontal, controller.rotate_vertical) == (0.0, 0.0)
    view, projection = persp_camera()
    controller.update_camera(view, projection, 1.0)
    assert (view.yaw, view.pitch) == (0.0, 0.0)


def test_persp_mouse_turns_camera_and_resets():
    controller = PerspController(1.0, 2.0)
    view, projection = persp_camera()
    controller.process_mouse_button(PRESSED)
    controller.process_mouse(0.3, 0.2)
    controller.update_camera(view, projection, 0.5)
    assert view.yaw == pytest.approx(0.3 * 2.0 * 0.5)
    assert view.pitch == pytest.approx(-0.2 * 2.0 * 0.5)
    assert (controller.rotate_horizontal, controller.rotate_vertical) == (0.0, 0.0)

    controller.process_mouse_button(RELEASED)
    assert controller.mouse_pressed is False


def test_persp_pitch_is_clamped():
    controller = PerspController(1.0, 1.0)
    view, projection = persp_camera()
    controller.process_mouse_button(PRESSED)
    controller.process_mouse(0.0, -100.0)
    controller.update_camera(view, projection, 1.0)
    assert view.pitch == SAFE_FRAC_PI_2
    controller.process_mouse(0.0, 1000.0)
    controller.update_camera(view, projection, 1.0)
    assert view.pitch == -SAFE_FRAC_PI_2
    assert SAFE_FRAC_PI_2 < math.pi / 2


def test_persp_scroll_changes_speed():
    controller = PerspController(4.0, 1.0)
    controller.process_scroll(LineDelta(0.0, 2.0))
    assert controller.speed == pytest.approx(4.0 + 2.0 * 0.5)
    assert controller.scroll == 0.0
    controller.process_scroll(PixelDelta(0.0, -3.0))
    assert controller.speed == pytest.approx(4.0 + 2.0 * 0.5 - 3.0)


def test_persp_scroll_rejects_unknown_delta():
    controller = PerspController(4.0, 1.0)
    with pytest.raises(TypeError):
        controller.process_scroll((0.0, 1.0))


def test_persp_ignores_ortho_camera():
    controller = PerspController(4.0, 1.0)
    controller.process_keyboard(KeyCode.KEY_W, PRESSED)
    view, projection = ortho_camera()
    controller.update_camera(view, projection, 1.0)
    np.testing.assert_array_equal(view.position, [0.0, 0.0, 0.0])