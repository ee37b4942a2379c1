from dataclasses import dataclass, field, fields
from typing import Optional, Tuple

import numpy as np

from .transforms import look_at


@dataclass
class ViewerConfig:
    """Tunables for the cube viewer."""
    width: int = 800
    height: int = 600
    eye: Tuple[float, float, float] = (0.0, 0.0, 6.0)
    target: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    up: Tuple[float, float, float] = (0.0, 1.0, 0.0)
    motion_speed: float = 0.01
    zoom_speed: float = 1.0
    # per-scroll-step elapsed time handed to ArcballCamera.zoom
    zoom_elapsed: float = 0.16
    fov: float = 65.0
    near: float = 1.0
    far: float = 200.0
    clear_color: Tuple[float, float, float, float] = (0.1, 0.1, 0.1, 1.0)
    screenshot_path: str = "arcball-screenshot.png"
    dtype: type = field(default=np.float32, repr=False)

    def __post_init__(self):
        self.validate()

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Window size must be positive, got {self.width}x{self.height}")
        if self.motion_speed < 0 or self.zoom_speed < 0:
            raise ValueError("Motion and zoom speeds must be non-negative")
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")
        if self.near <= 0.0 or self.far <= self.near:
            raise ValueError(f"Clip planes need 0 < near < far, got near={self.near} far={self.far}")
        if np.allclose(self.eye, self.target):
            raise ValueError("Eye and target must differ")

    def base_view(self):
        return look_at(self.eye, self.target, self.up, dtype=self.dtype)

    def screen(self):
        return [float(self.width), float(self.height)]

    @classmethod
    def from_args(cls, args, base: Optional['ViewerConfig'] = None) -> 'ViewerConfig':
        """Overlay parsed command-line options that were actually given onto `base`."""
        base = base or cls()
        values = {f.name: getattr(base, f.name) for f in fields(cls)}
        for name in values:
            given = getattr(args, name, None)
            if given is not None:
                values[name] = tuple(given) if isinstance(given, list) else given
        return cls(**values)
