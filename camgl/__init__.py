"""camgl: pinhole camera models <-> rendering pipeline matrices.

Includes camera geometry, matrix conversion in both directions, display
orientation handling and a cached per-surface camera state.
"""

from camgl.config import CamGLConfig, load_camgl_config
from camgl.conversion import (
    compute_camera_model_view_projection_matrix,
    compute_intrinsics,
    compute_model_view_matrix,
    compute_model_view_projection_matrix,
    compute_pinhole_camera,
    compute_projection_matrix,
)
from camgl.geometry import IntrinsicParameters, PinholeCamera, Point3D, Rotation3D
from camgl.orientation import DisplayRotation, Orientation, OrientationReading
from camgl.state import CameraState

__all__ = [
    "CamGLConfig",
    "load_camgl_config",
    "compute_camera_model_view_projection_matrix",
    "compute_intrinsics",
    "compute_model_view_matrix",
    "compute_model_view_projection_matrix",
    "compute_pinhole_camera",
    "compute_projection_matrix",
    "IntrinsicParameters",
    "PinholeCamera",
    "Point3D",
    "Rotation3D",
    "DisplayRotation",
    "Orientation",
    "OrientationReading",
    "CameraState",
]
