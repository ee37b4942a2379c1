from .quaternion import Quaternion
from .transforms import SingularTransformError, invert, look_at, perspective_matrix, translation_matrix
from .camera import ArcballCamera, normalize_mouse, screen_to_arcball
from .config import ViewerConfig

__version__ = "1.0.0"
