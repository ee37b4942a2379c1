import numpy as np


class SingularTransformError(RuntimeError):
    """Raised when a view transform cannot be inverted."""


def translation_matrix(x, y, z, dtype=np.float32):
    return np.array([
        [1, 0, 0, x],
        [0, 1, 0, y],
        [0, 0, 1, z],
        [0, 0, 0, 1]
    ], dtype=dtype)


def _normalize(v):
    n = float(np.linalg.norm(v))
    if n <= 1e-12:
        raise ValueError("Cannot build a basis from a zero-length vector")
    return v / n


def look_at(eye, target, up, dtype=np.float32):
    """World-to-camera matrix with the camera at `eye` looking toward `target` down -Z."""
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)

    f = _normalize(target - eye)
    r = _normalize(np.cross(f, up))
    u = np.cross(r, f)

    m = np.identity(4, dtype=np.float64)
    m[0, :3] = r
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(r, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m.astype(dtype)


def perspective_matrix(fov, aspect, near, far, dtype=np.float32):
    f = 1.0 / np.tan(np.radians(fov) / 2.0)
    return np.array([
        [f / aspect, 0, 0, 0],
        [0, f, 0, 0],
        [0, 0, (far + near) / (near - far), (2 * far * near) / (near - far)],
        [0, 0, -1, 0]
    ], dtype=dtype)


def invert(matrix):
    """Inverse of a 4x4 transform.

    Raises SingularTransformError instead of returning a matrix full of
    NaN/inf when `matrix` is degenerate. Singularity is judged by the
    condition number against the precision of the input, not by the
    size of the determinant.
    """
    matrix = np.asarray(matrix)
    if matrix.shape != (4, 4):
        raise ValueError(f"Expected a 4x4 matrix, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise SingularTransformError("Transform contains non-finite values")

    dtype = matrix.dtype if np.issubdtype(matrix.dtype, np.floating) else np.float64
    with np.errstate(divide="ignore", invalid="ignore"):
        cond = np.linalg.cond(matrix.astype(np.float64))
    if not np.isfinite(cond) or cond > 1.0 / np.finfo(dtype).eps:
        raise SingularTransformError(f"Transform is singular (condition number {cond!r})")

    try:
        inverse = np.linalg.inv(matrix)
    except np.linalg.LinAlgError as e:
        raise SingularTransformError(f"Transform inversion failed: {e}") from e

    if not np.all(np.isfinite(inverse)):
        raise SingularTransformError("Transform inverse contains non-finite values")
    return inverse.astype(dtype, copy=False)
