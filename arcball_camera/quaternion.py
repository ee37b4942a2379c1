import numpy as np


class Quaternion:
    """Quaternion stored as [w, x, y, z] in a numpy array of fixed precision."""

    __slots__ = ('_q',)

    def __init__(self, w, x, y, z, dtype=np.float32):
        self._q = np.array([w, x, y, z], dtype=dtype)

    @classmethod
    def identity(cls, dtype=np.float32):
        return cls(1.0, 0.0, 0.0, 0.0, dtype=dtype)

    @classmethod
    def from_array(cls, values, dtype=None):
        values = np.asarray(values)
        if values.shape != (4,):
            raise ValueError(f"Quaternion needs 4 components, got shape {values.shape}")
        if dtype is None:
            dtype = values.dtype
        return cls(values[0], values[1], values[2], values[3], dtype=dtype)

    @classmethod
    def from_axis_angle(cls, axis, angle, dtype=np.float32):
        axis = np.asarray(axis, dtype=np.float64)
        length = np.linalg.norm(axis)
        if length == 0.0:
            raise ValueError("Rotation axis must be non-zero")
        axis = axis / length
        half = 0.5 * angle
        s = np.sin(half)
        return cls(np.cos(half), axis[0] * s, axis[1] * s, axis[2] * s, dtype=dtype)

    @property
    def w(self):
        return self._q[0]

    @property
    def x(self):
        return self._q[1]

    @property
    def y(self):
        return self._q[2]

    @property
    def z(self):
        return self._q[3]

    @property
    def dtype(self):
        return self._q.dtype

    def as_array(self):
        return self._q.copy()

    components = property(as_array)

    def __repr__(self):
        return "Quaternion(w=%.6f, x=%.6f, y=%.6f, z=%.6f)" % tuple(float(c) for c in self._q)

    def __eq__(self, other):
        if not isinstance(other, Quaternion):
            return NotImplemented
        return bool(np.array_equal(self._q, other._q))

    def __neg__(self):
        return Quaternion.from_array(-self._q)

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            w1, x1, y1, z1 = self._q
            w2, x2, y2, z2 = other._q
            # Hamilton product: other is applied first, then self
            return Quaternion(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
                dtype=np.result_type(self._q, other._q),
            )
        if np.isscalar(other):
            return Quaternion.from_array(self._q * other, dtype=self.dtype)
        return NotImplemented

    def __rmul__(self, other):
        if np.isscalar(other):
            return self * other
        return NotImplemented

    def conjugate(self):
        w, x, y, z = self._q
        return Quaternion(w, -x, -y, -z, dtype=self.dtype)

    def dot(self, other):
        return float(np.dot(self._q, other._q))

    def norm(self):
        return float(np.linalg.norm(self._q))

    def normalize(self):
        n = self.norm()
        if n == 0.0 or not np.isfinite(n):
            raise ValueError("Cannot normalize a zero or non-finite quaternion")
        return Quaternion.from_array(self._q / n, dtype=self.dtype)

    def canonical(self):
        """Same rotation with its first non-zero component positive (w >= 0 hemisphere)."""
        nonzero = np.flatnonzero(self._q)
        if nonzero.size and self._q[nonzero[0]] < 0.0:
            return -self
        return Quaternion.from_array(self._q, dtype=self.dtype)

    def to_matrix(self):
        """4x4 rotation matrix for column vectors (translation column left empty)."""
        w, x, y, z = self.normalize()._q
        m = np.identity(4, dtype=self.dtype)
        m[0, 0] = 1 - 2 * (y * y + z * z)
        m[0, 1] = 2 * (x * y - w * z)
        m[0, 2] = 2 * (x * z + w * y)
        m[1, 0] = 2 * (x * y + w * z)
        m[1, 1] = 1 - 2 * (x * x + z * z)
        m[1, 2] = 2 * (y * z - w * x)
        m[2, 0] = 2 * (x * z - w * y)
        m[2, 1] = 2 * (y * z + w * x)
        m[2, 2] = 1 - 2 * (x * x + y * y)
        return m
