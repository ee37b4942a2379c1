import logging

import numpy as np

from .quaternion import Quaternion
from .transforms import invert, translation_matrix

logger = logging.getLogger(__name__)


def normalize_mouse(point, inverse_screen):
    """Map a pixel position into ball space, [-1, 1] on both axes with +Y up."""
    x = np.clip(point[0] * 2.0 * inverse_screen[0] - 1.0, -1.0, 1.0)
    y = np.clip(1.0 - 2.0 * point[1] * inverse_screen[1], -1.0, 1.0)
    return np.array([x, y], dtype=inverse_screen.dtype)


def screen_to_arcball(p, dtype=np.float32):
    """Project a ball-space point onto the unit sphere as a pure quaternion.

    Points inside the unit circle lift onto the front of the sphere; points
    outside are pulled onto its rim with zero depth.
    """
    p = np.asarray(p, dtype=dtype)
    dist = float(np.dot(p, p))
    if dist <= 1.0:
        return Quaternion(0.0, p[0], p[1], np.sqrt(1.0 - dist), dtype=dtype)
    unit_p = p / np.sqrt(dist)
    return Quaternion(0.0, unit_p[0], unit_p[1], 0.0, dtype=dtype)


def _check_screen(width, height):
    if not (width > 0 and height > 0):
        raise ValueError(f"Screen dimensions must be positive, got {width}x{height}")


class ArcballCamera:
    """Shoemake arcball camera.

    The view matrix is `translation @ base_view @ R(rotation)`. Rotation comes
    from dragging the pointer across a virtual sphere; pan and zoom accumulate
    as camera-space translations scaled by speed and elapsed time.
    """

    def __init__(self, base_view, motion_speed, zoom_speed, screen, dtype=np.float32):
        self.dtype = np.dtype(dtype)
        if not np.issubdtype(self.dtype, np.floating):
            raise ValueError(f"Camera precision must be a floating dtype, got {self.dtype}")
        if motion_speed < 0 or zoom_speed < 0:
            raise ValueError("Motion and zoom speeds must be non-negative")
        _check_screen(screen[0], screen[1])

        self._base_view = np.array(base_view, dtype=self.dtype)
        if self._base_view.shape != (4, 4):
            raise ValueError(f"Base view must be 4x4, got shape {self._base_view.shape}")
        self._base_view.setflags(write=False)

        self._translation = np.identity(4, dtype=self.dtype)
        self._rotation = Quaternion.identity(self.dtype)
        self._view = self._base_view.copy()
        self._inverse_view = invert(self._view)
        self._motion_speed = float(motion_speed)
        self._zoom_speed = float(zoom_speed)
        self._inverse_screen = np.array([1.0 / screen[0], 1.0 / screen[1]], dtype=self.dtype)

    @property
    def base_view(self):
        return self._base_view

    @property
    def translation(self):
        return self._translation.copy()

    @property
    def rotation(self):
        return self._rotation

    @property
    def view(self):
        return self.get_view()

    @property
    def inverse_view(self):
        return self.get_inverse_view()

    @property
    def motion_speed(self):
        return self._motion_speed

    @property
    def zoom_speed(self):
        return self._zoom_speed

    @property
    def inverse_screen_dimensions(self):
        return self._inverse_screen.copy()

    def get_view(self):
        return self._view.copy()

    def get_inverse_view(self):
        return self._inverse_view.copy()

    def eye_position(self):
        """Camera origin in world space."""
        return self._inverse_view[:3, 3].copy()

    def rotate(self, mouse_prev, mouse_cur):
        """Rotate from the sphere point under `mouse_prev` to the one under `mouse_cur`.

        Both positions are in pixels. The result does not depend on elapsed time.
        """
        m_cur = normalize_mouse(mouse_cur, self._inverse_screen)
        m_prev = normalize_mouse(mouse_prev, self._inverse_screen)
        mouse_cur_ball = screen_to_arcball(m_cur, self.dtype)
        mouse_prev_ball = screen_to_arcball(m_prev, self.dtype)
        rotation = mouse_cur_ball * mouse_prev_ball * self._rotation
        # renormalize every step so drift never accumulates
        self._update_view(self._translation, rotation.normalize().canonical())

    def pan(self, mouse_delta, elapsed):
        """Pan along the camera's local X/Y plane. `mouse_delta` is in pixels."""
        scale = self._motion_speed * elapsed
        motion = translation_matrix(mouse_delta[0] * scale, mouse_delta[1] * scale, 0.0, dtype=self.dtype)
        self._update_view(motion @ self._translation, self._rotation)

    def zoom(self, amount, elapsed):
        """Move along the camera's local Z axis, positive values zoom in."""
        motion = translation_matrix(0.0, 0.0, amount * self._zoom_speed * elapsed, dtype=self.dtype)
        self._update_view(motion @ self._translation, self._rotation)

    def update_screen(self, width, height):
        _check_screen(width, height)
        self._inverse_screen[0] = 1.0 / width
        self._inverse_screen[1] = 1.0 / height
        logger.debug("arcball screen resized to %sx%s", width, height)

    def reset(self):
        self._update_view(np.identity(4, dtype=self.dtype), Quaternion.identity(self.dtype))
        logger.debug("arcball camera reset to base view")

    def _update_view(self, translation, rotation):
        # nothing is committed unless the new view inverts
        view = translation @ self._base_view @ rotation.to_matrix()
        inverse_view = invert(view)
        self._translation = translation
        self._rotation = rotation
        self._view = view
        self._inverse_view = inverse_view
