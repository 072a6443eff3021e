"""Conversion between pinhole cameras and rendering pipeline matrices."""

from camgl.conversion.camera_to_gl import (
    MATRIX_LENGTH,
    canonical_camera,
    center_from_camera,
    compute_camera_model_view_projection_matrix,
    compute_model_view_matrix,
    compute_model_view_projection_matrix,
    compute_projection_matrix,
    intrinsics_from_camera,
    rotation_from_camera,
)
from camgl.conversion.gl_to_camera import (
    compute_intrinsics,
    compute_pinhole_camera,
    compute_pose_transformation,
)

__all__ = [
    "MATRIX_LENGTH",
    "canonical_camera",
    "center_from_camera",
    "compute_camera_model_view_projection_matrix",
    "compute_model_view_matrix",
    "compute_model_view_projection_matrix",
    "compute_projection_matrix",
    "intrinsics_from_camera",
    "rotation_from_camera",
    "compute_intrinsics",
    "compute_pinhole_camera",
    "compute_pose_transformation",
]
