import numpy as np
import pytest

from arcball_camera.camera import ArcballCamera, normalize_mouse, screen_to_arcball
from arcball_camera.transforms import SingularTransformError, look_at, translation_matrix


@pytest.fixture()
def camera():
    """Identity base view, unit speeds, 100x100 screen."""
    return ArcballCamera(np.identity(4, dtype=np.float32), 1.0, 1.0, [100.0, 100.0])


@pytest.fixture()
def orbit_camera():
    base_view = look_at((0.0, 0.0, 6.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    return ArcballCamera(base_view, 0.01, 1.0, [800.0, 600.0])


def test_initial_view_is_base_view(orbit_camera):
    base_view = look_at((0.0, 0.0, 6.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert np.array_equal(orbit_camera.get_view(), base_view)
    np.testing.assert_allclose(orbit_camera.get_inverse_view(), np.linalg.inv(base_view), atol=1e-6)
    np.testing.assert_array_equal(orbit_camera.translation, np.identity(4))
    np.testing.assert_array_equal(orbit_camera.rotation.as_array(), [1.0, 0.0, 0.0, 0.0])


def test_concrete_scenario(camera):
    camera.rotate((50.0, 50.0), (50.0, 50.0))
    np.testing.assert_allclose(camera.get_view(), np.identity(4), atol=1e-6)

    camera.zoom(1.0, 1.0)
    np.testing.assert_allclose(camera.get_view(), translation_matrix(0.0, 0.0, 1.0), atol=1e-6)

    camera.pan((10.0, 0.0), 1.0)
    np.testing.assert_allclose(camera.get_view(), translation_matrix(10.0, 0.0, 1.0), atol=1e-6)


@pytest.mark.parametrize("point", [(50.0, 50.0), (10.0, 80.0), (99.0, 1.0), (-30.0, 250.0)])
def test_rotate_without_motion_is_identity(camera, point):
    camera.rotate((20.0, 30.0), (70.0, 45.0))
    view = camera.get_view()
    rotation = camera.rotation.to_matrix()
    quaternion = camera.rotation.as_array()

    camera.rotate(point, point)

    np.testing.assert_allclose(camera.get_view(), view, atol=1e-5)
    np.testing.assert_allclose(camera.rotation.to_matrix(), rotation, atol=1e-5)
    np.testing.assert_allclose(camera.rotation.as_array(), quaternion, atol=1e-6)


def test_rotation_stays_unit_length(camera):
    rng = np.random.default_rng(1234)
    prev = rng.uniform(-20.0, 120.0, size=2)
    for _ in range(2000):
        cur = rng.uniform(-20.0, 120.0, size=2)
        camera.rotate(prev, cur)
        prev = cur
        assert camera.rotation.norm() == pytest.approx(1.0, abs=1e-5)

    r = camera.get_view()[:3, :3]
    np.testing.assert_allclose(r @ r.T, np.identity(3), atol=1e-4)


def test_drag_right_turns_front_to_the_right(camera):
    camera.rotate((50.0, 50.0), (60.0, 50.0))
    front = camera.get_view()[:3, :3] @ [0.0, 0.0, 1.0]
    assert front[0] > 0.0
    assert front[1] == pytest.approx(0.0, abs=1e-6)


def test_drag_up_turns_front_upward(camera):
    # pixel Y grows downward, so moving toward y=40 is an upward drag
    camera.rotate((50.0, 50.0), (50.0, 40.0))
    front = camera.get_view()[:3, :3] @ [0.0, 0.0, 1.0]
    assert front[1] > 0.0
    assert front[0] == pytest.approx(0.0, abs=1e-6)


def test_rotation_ignores_speeds():
    slow = ArcballCamera(np.identity(4), 0.1, 0.1, [100.0, 100.0])
    fast = ArcballCamera(np.identity(4), 10.0, 10.0, [100.0, 100.0])
    slow.rotate((30.0, 40.0), (60.0, 70.0))
    fast.rotate((30.0, 40.0), (60.0, 70.0))
    np.testing.assert_array_equal(slow.get_view(), fast.get_view())


def test_screen_to_arcball_continuous_at_rim():
    inside = screen_to_arcball([1.0 - 1e-9, 0.0], dtype=np.float64)
    outside = screen_to_arcball([1.0 + 1e-9, 0.0], dtype=np.float64)
    assert inside.w == 0.0 and outside.w == 0.0
    assert inside.z == pytest.approx(0.0, abs=1e-4)
    assert outside.z == 0.0
    assert inside.x == pytest.approx(outside.x, abs=1e-8)


def test_screen_to_arcball_center_and_corner():
    center = screen_to_arcball([0.0, 0.0])
    np.testing.assert_allclose(center.as_array(), [0.0, 0.0, 0.0, 1.0])
    corner = screen_to_arcball([1.0, 1.0])
    np.testing.assert_allclose(corner.as_array(), [0.0, np.sqrt(0.5), np.sqrt(0.5), 0.0], rtol=1e-6)
    assert corner.norm() == pytest.approx(1.0)


def test_normalize_mouse_flips_y_and_clamps():
    inverse_screen = np.array([1.0 / 200.0, 1.0 / 100.0], dtype=np.float32)
    np.testing.assert_allclose(normalize_mouse((0.0, 0.0), inverse_screen), [-1.0, 1.0], rtol=1e-6, atol=1e-6)
    np.testing.assert_allclose(normalize_mouse((200.0, 100.0), inverse_screen), [1.0, -1.0], rtol=1e-6, atol=1e-6)
    np.testing.assert_allclose(normalize_mouse((150.0, 25.0), inverse_screen), [0.5, 0.5], rtol=1e-6, atol=1e-6)
    np.testing.assert_allclose(normalize_mouse((-500.0, 900.0), inverse_screen), [-1.0, -1.0], rtol=1e-6, atol=1e-6)


def test_pan_is_undone_by_opposite_delta(camera):
    before = camera.translation
    camera.pan((7.0, -3.0), 0.5)
    camera.zoom(2.0, 0.25)
    camera.pan((-7.0, 3.0), 0.5)
    np.testing.assert_allclose(camera.translation, before @ translation_matrix(0.0, 0.0, 0.5), atol=1e-6)


def test_pan_and_zoom_apply_in_camera_space(orbit_camera):
    orbit_camera.rotate((400.0, 300.0), (520.0, 240.0))
    view = orbit_camera.get_view()

    orbit_camera.pan((50.0, 20.0), 2.0)
    expected = translation_matrix(1.0, 0.4, 0.0) @ view
    np.testing.assert_allclose(orbit_camera.get_view(), expected, atol=1e-5)

    orbit_camera.zoom(-3.0, 0.5)
    expected = translation_matrix(0.0, 0.0, -1.5) @ expected
    np.testing.assert_allclose(orbit_camera.get_view(), expected, atol=1e-5)


def test_zoom_moves_eye_toward_target(orbit_camera):
    np.testing.assert_allclose(orbit_camera.eye_position(), [0.0, 0.0, 6.0], atol=1e-5)
    orbit_camera.zoom(1.0, 1.0)
    np.testing.assert_allclose(orbit_camera.eye_position(), [0.0, 0.0, 5.0], atol=1e-5)
    # no clamping: zooming through the target is allowed
    orbit_camera.zoom(10.0, 1.0)
    np.testing.assert_allclose(orbit_camera.eye_position(), [0.0, 0.0, -5.0], atol=1e-5)


def test_inverse_view_tracks_view(orbit_camera):
    orbit_camera.rotate((100.0, 100.0), (300.0, 500.0))
    orbit_camera.pan((-40.0, 15.0), 1.0)
    orbit_camera.zoom(2.0, 0.16)
    np.testing.assert_allclose(orbit_camera.get_view() @ orbit_camera.get_inverse_view(), np.identity(4), atol=1e-5)


def test_update_screen_changes_normalization():
    a = ArcballCamera(np.identity(4), 1.0, 1.0, [100.0, 100.0])
    b = ArcballCamera(np.identity(4), 1.0, 1.0, [100.0, 100.0])
    view = b.get_view()
    b.update_screen(200.0, 50.0)
    np.testing.assert_array_equal(b.get_view(), view)
    np.testing.assert_allclose(b.inverse_screen_dimensions, [1.0 / 200.0, 1.0 / 50.0])

    a.rotate((60.0, 20.0), (80.0, 30.0))
    b.rotate((60.0, 20.0), (80.0, 30.0))
    assert not np.allclose(a.get_view(), b.get_view(), atol=1e-4)


def test_reset_returns_to_base_view(orbit_camera):
    orbit_camera.rotate((100.0, 100.0), (300.0, 500.0))
    orbit_camera.pan((-40.0, 15.0), 1.0)
    orbit_camera.zoom(2.0, 0.16)
    orbit_camera.reset()
    np.testing.assert_allclose(orbit_camera.get_view(), orbit_camera.base_view, atol=1e-6)
    np.testing.assert_array_equal(orbit_camera.translation, np.identity(4))


def test_returned_matrices_are_copies(camera):
    view = camera.get_view()
    view[0, 3] = 42.0
    assert camera.get_view()[0, 3] == 0.0
    with pytest.raises(ValueError):
        camera.base_view[0, 3] = 42.0


def test_double_precision():
    camera = ArcballCamera(np.identity(4), 1.0, 1.0, [640.0, 480.0], dtype=np.float64)
    camera.rotate((10.0, 10.0), (600.0, 400.0))
    camera.zoom(1.0, 0.5)
    assert camera.get_view().dtype == np.float64
    assert camera.get_inverse_view().dtype == np.float64
    assert camera.rotation.dtype == np.float64
    assert camera.rotation.norm() == pytest.approx(1.0, abs=1e-12)


def test_singular_base_view_is_rejected():
    with pytest.raises(SingularTransformError):
        ArcballCamera(np.zeros((4, 4)), 1.0, 1.0, [100.0, 100.0])


@pytest.mark.parametrize("screen", [[0.0, 100.0], [100.0, -1.0]])
def test_bad_screen_is_rejected(screen):
    with pytest.raises(ValueError):
        ArcballCamera(np.identity(4), 1.0, 1.0, screen)


def test_bad_resize_is_rejected(camera):
    with pytest.raises(ValueError):
        camera.update_screen(0, 480)
    np.testing.assert_allclose(camera.inverse_screen_dimensions, [0.01, 0.01])


def test_negative_speed_is_rejected():
    with pytest.raises(ValueError):
        ArcballCamera(np.identity(4), -1.0, 1.0, [100.0, 100.0])


def test_small_scale_base_view_is_accepted():
    base_view = np.diag([1e-3, 1e-3, 1e-3, 1.0]).astype(np.float32)
    camera = ArcballCamera(base_view, 1.0, 1.0, [100.0, 100.0])
    assert np.array_equal(camera.get_view(), base_view)
    np.testing.assert_allclose(camera.get_inverse_view(), np.diag([1e3, 1e3, 1e3, 1.0]), rtol=1e-5)
    camera.rotate((20.0, 30.0), (70.0, 45.0))
    np.testing.assert_allclose(camera.get_view() @ camera.get_inverse_view(), np.identity(4), atol=1e-5)


@pytest.mark.parametrize("mutate", [
    lambda camera: camera.zoom(np.inf, 1.0),
    lambda camera: camera.pan((np.nan, 0.0), 1.0),
])
def test_failed_mutation_keeps_previous_state(mutate):
    camera = ArcballCamera(np.identity(4), 1.0, 1.0, [100.0, 100.0], dtype=np.float64)
    camera.rotate((20.0, 30.0), (70.0, 45.0))
    camera.zoom(2.0, 1.0)
    translation = camera.translation
    rotation = camera.rotation.as_array()
    view = camera.get_view()
    inverse_view = camera.get_inverse_view()

    with np.errstate(over="ignore", invalid="ignore"):
        with pytest.raises(SingularTransformError):
            mutate(camera)

    np.testing.assert_array_equal(camera.translation, translation)
    np.testing.assert_array_equal(camera.rotation.as_array(), rotation)
    np.testing.assert_array_equal(camera.get_view(), view)
    np.testing.assert_array_equal(camera.get_inverse_view(), inverse_view)

    # the camera keeps working afterwards
    camera.zoom(-2.0, 1.0)
    np.testing.assert_allclose(camera.get_view() @ camera.get_inverse_view(), np.identity(4), atol=1e-12)
