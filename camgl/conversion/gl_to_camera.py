"""Rendering pipeline matrices -> pinhole camera.

Inverse of ``camera_to_gl``. The projection matrix only constrains the
calibration: near and far planes cannot be recovered from it alone.

From the projection layout (column-major indices)

    p[0] = 2fx/w      p[4] = 2s/w
    p[5] = 2fy/h
    p[8] = 2px/w - 1  p[9] = 2py/h - 1

the calibration follows directly:

    fx = p[0] w/2     fy = p[5] h/2     s = p[4] w/2
    px = (1 + p[8]) w/2                 py = (1 + p[9]) h/2
"""

from __future__ import annotations

import numpy as np

from camgl.conversion.camera_to_gl import (
    check_dimension,
    check_matrix_buffer,
    from_gl_buffer,
)
from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.pinhole_camera import PinholeCamera
from camgl.geometry.transformations import ProjectiveTransformation3D


def compute_intrinsics(projection_matrix, width: int, height: int) -> IntrinsicParameters:
    """Recover the calibration encoded in a projection matrix."""
    p = np.asarray(
        check_matrix_buffer(projection_matrix, "projection_matrix"), dtype=float
    )
    check_dimension("width", width)
    check_dimension("height", height)

    half_width = width / 2.0
    half_height = height / 2.0
    return IntrinsicParameters(
        horizontal_focal_length=float(p[0] * half_width),
        vertical_focal_length=float(p[5] * half_height),
        horizontal_principal_point=float((1.0 + p[8]) * half_width),
        vertical_principal_point=float((1.0 + p[9]) * half_height),
        skewness=float(p[4] * half_width),
    )


def compute_pose_transformation(model_view_matrix) -> ProjectiveTransformation3D:
    """Camera pose ``[R^T, C]`` stored in a model-view matrix."""
    return ProjectiveTransformation3D(
        from_gl_buffer(check_matrix_buffer(model_view_matrix, "model_view_matrix"))
    )


def compute_pinhole_camera(
    projection_matrix,
    model_view_matrix,
    width: int,
    height: int,
) -> PinholeCamera:
    """Rebuild the camera rendered by a projection/model-view pair.

    The canonical camera ``[K | 0]`` (identity rotation, center at the
    origin) is moved by the pose, giving ``[K | 0] @ T^-1 = K R [I | -C]``.
    The result carries no factors; decompose it to read them back.
    """
    check_matrix_buffer(projection_matrix, "projection_matrix")
    check_matrix_buffer(model_view_matrix, "model_view_matrix")

    intrinsics = compute_intrinsics(projection_matrix, width, height)
    canonical = np.zeros((3, 4), dtype=float)
    canonical[:, :3] = intrinsics.matrix()

    pose = compute_pose_transformation(model_view_matrix)
    return pose.transform_camera(PinholeCamera(canonical))
