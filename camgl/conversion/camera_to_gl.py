"""Pinhole camera -> rendering pipeline matrices.

Output matrices are 16 float32 values in column-major order, the layout
``glUniformMatrix4fv`` expects. Element ``i`` of the buffer holds row
``i % 4`` and column ``i // 4`` of the 4x4 matrix.

Projection matrix, for calibration K = [[fx, s, px], [0, fy, py], [0, 0, 1]],
viewport ``w x h`` and clip planes ``n < f``:

    [2fx/w   2s/w    2px/w - 1         0           ]
    [0       2fy/h   2py/h - 1         0           ]
    [0       0       -(f + n)/(f - n)  -2fn/(f - n)]
    [0       0       -1                0           ]

which is the ``glFrustum`` layout with the frustum bounds replaced by the
calibration. Focal lengths are used with their sign as given.

Model-view matrix, for a camera with rotation R and center C:

    [R^T  C]
    [0    1]

i.e. the pose of the camera in the world. Its inverse ``[R, -R C]`` maps
world points into the eye frame and turns the canonical camera ``[K | 0]``
into ``K R [I | -C]`` (see ``gl_to_camera.compute_pinhole_camera``).
"""

from __future__ import annotations

import math
from typing import Optional, Tuple, Union

import numpy as np

from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.pinhole_camera import PinholeCamera
from camgl.geometry.points import Point3D
from camgl.geometry.rotation import Rotation3D

MATRIX_LENGTH = 16

IntrinsicsSource = Union[PinholeCamera, IntrinsicParameters]
RotationSource = Union[PinholeCamera, Rotation3D, np.ndarray]


# =============================================================================
# Column-major buffers
# =============================================================================

def check_matrix_buffer(buffer, name: str = "matrix") -> np.ndarray:
    """Validate a 16-element pipeline matrix buffer."""
    if buffer is None:
        raise ValueError(f"{name} must not be None")
    arr = np.asarray(buffer)
    if arr.shape != (MATRIX_LENGTH,):
        raise ValueError(
            f"{name} must have exactly {MATRIX_LENGTH} elements, got shape {arr.shape}"
        )
    return arr


def check_out_buffer(out) -> np.ndarray:
    """Validate a caller-owned result buffer.

    Results are written in place, so ``out`` has to be the caller's own
    writable float32 array; lists or other dtypes would be copied or
    truncated silently.
    """
    if not isinstance(out, np.ndarray):
        raise ValueError(f"out must be a numpy array, got {type(out).__name__}")
    check_matrix_buffer(out, "out")
    if out.dtype != np.float32:
        raise ValueError(f"out must have dtype float32, got {out.dtype}")
    if not out.flags.writeable:
        raise ValueError("out must be writable")
    return out


def to_gl_buffer(matrix: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """Write a 4x4 matrix as a column-major float32 buffer."""
    flat = np.asarray(matrix, dtype=float).reshape(4, 4).ravel(order="F")
    if out is None:
        return flat.astype(np.float32)
    out = check_out_buffer(out)
    out[:] = flat
    return out


def from_gl_buffer(buffer) -> np.ndarray:
    """Read a column-major 16-element buffer as a 4x4 float64 matrix."""
    arr = check_matrix_buffer(buffer)
    return np.asarray(arr, dtype=float).reshape(4, 4, order="F")


# =============================================================================
# Camera factors
# =============================================================================

def canonical_camera(camera: PinholeCamera) -> PinholeCamera:
    """``camera`` with its factors available, decomposing it when needed."""
    if camera.has_parameters:
        return camera
    return camera.normalize().fix_sign().decompose()


def intrinsics_from_camera(camera: PinholeCamera) -> IntrinsicParameters:
    """Intrinsics of ``camera``, decomposing it when they are not stored."""
    return canonical_camera(camera).intrinsics


def rotation_from_camera(camera: PinholeCamera) -> Rotation3D:
    return canonical_camera(camera).rotation


def center_from_camera(camera: PinholeCamera) -> Point3D:
    return canonical_camera(camera).center


def _resolve_intrinsics(source: IntrinsicsSource) -> IntrinsicParameters:
    if isinstance(source, PinholeCamera):
        return intrinsics_from_camera(source)
    if isinstance(source, IntrinsicParameters):
        return source
    raise ValueError(
        f"Expected a PinholeCamera or IntrinsicParameters, got {type(source).__name__}"
    )


def _resolve_pose(
    source: RotationSource, center: Optional[Point3D]
) -> Tuple[np.ndarray, np.ndarray]:
    """Reduce every accepted pose input to a (3x3 rotation, center) pair."""
    if isinstance(source, PinholeCamera):
        camera = canonical_camera(source)
        return camera.rotation.as_matrix(), camera.center.as_array()

    if center is None:
        raise ValueError("center is required when a rotation is given")
    if isinstance(source, Rotation3D):
        rotation = source.as_matrix()
    elif isinstance(source, np.ndarray):
        if source.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got shape {source.shape}")
        rotation = np.asarray(source, dtype=float)
    else:
        raise ValueError(
            f"Expected a PinholeCamera, Rotation3D or 3x3 array, got {type(source).__name__}"
        )
    return rotation, center.as_array()


# =============================================================================
# Projection
# =============================================================================

# Comparisons are written so that NaN fails them.

def check_dimension(name: str, value: int) -> None:
    """Viewport sizes must be positive and finite."""
    if not (value > 0 and math.isfinite(value)):
        raise ValueError(f"{name} must be positive, got {value}")


def check_planes(near_plane: float, far_plane: float) -> None:
    """Clip planes must satisfy ``0 < near_plane < far_plane < inf``."""
    if not (near_plane > 0.0 and math.isfinite(near_plane)):
        raise ValueError(f"near_plane must be positive and finite, got {near_plane}")
    if not (far_plane > near_plane and math.isfinite(far_plane)):
        raise ValueError(
            f"far_plane must be finite and greater than near_plane, "
            f"got {far_plane} and {near_plane}"
        )


def _check_frustum(width: int, height: int, near_plane: float, far_plane: float) -> None:
    check_dimension("width", width)
    check_dimension("height", height)
    check_planes(near_plane, far_plane)


def _projection_matrix(
    intrinsics: IntrinsicParameters,
    width: int,
    height: int,
    near_plane: float,
    far_plane: float,
) -> np.ndarray:
    fx = intrinsics.horizontal_focal_length
    fy = intrinsics.vertical_focal_length
    px = intrinsics.horizontal_principal_point
    py = intrinsics.vertical_principal_point
    skew = intrinsics.skewness

    n = float(near_plane)
    f = float(far_plane)

    P = np.zeros((4, 4), dtype=float)
    P[0, 0] = 2.0 * fx / width
    P[0, 1] = 2.0 * skew / width
    P[1, 1] = 2.0 * fy / height
    P[0, 2] = 2.0 * (px / width) - 1.0
    P[1, 2] = 2.0 * (py / height) - 1.0
    P[2, 2] = -(f + n) / (f - n)
    P[3, 2] = -1.0
    P[2, 3] = -2.0 * f * n / (f - n)
    return P


def compute_projection_matrix(
    source: IntrinsicsSource,
    width: int,
    height: int,
    near_plane: float,
    far_plane: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Build the pipeline projection matrix from a camera or its intrinsics.

    Args:
        source: ``PinholeCamera`` or ``IntrinsicParameters``.
        width, height: viewport size in pixels (> 0).
        near_plane, far_plane: clip planes, ``0 < near_plane < far_plane``.
        out: optional (16,) buffer written in place.

    Returns:
        (16,) column-major float32 matrix (``out`` when given).

    Raises:
        ValueError: on any precondition violation; ``out`` is left untouched.
    """
    _check_frustum(width, height, near_plane, far_plane)
    if out is not None:
        check_out_buffer(out)
    intrinsics = _resolve_intrinsics(source)
    return to_gl_buffer(
        _projection_matrix(intrinsics, width, height, near_plane, far_plane), out
    )


# =============================================================================
# Model-view
# =============================================================================

def _model_view_matrix(rotation: np.ndarray, center: np.ndarray) -> np.ndarray:
    T = np.eye(4, dtype=float)
    T[:3, :3] = rotation.T
    T[:3, 3] = center
    return T


def compute_model_view_matrix(
    source: RotationSource,
    center: Optional[Point3D] = None,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Build the model-view matrix of a camera pose.

    Args:
        source: ``PinholeCamera``, or a ``Rotation3D`` / 3x3 rotation array
            together with ``center``.
        center: camera center; required unless ``source`` is a camera.
        out: optional (16,) buffer written in place.
    """
    if out is not None:
        check_out_buffer(out)
    rotation, c = _resolve_pose(source, center)
    return to_gl_buffer(_model_view_matrix(rotation, c), out)


# =============================================================================
# Model-view-projection
# =============================================================================

def compute_model_view_projection_matrix(
    projection_matrix,
    model_view_matrix,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """``projection x model_view`` on column-major buffers."""
    projection = from_gl_buffer(check_matrix_buffer(projection_matrix, "projection_matrix"))
    model_view = from_gl_buffer(check_matrix_buffer(model_view_matrix, "model_view_matrix"))
    if out is not None:
        check_out_buffer(out)
    return to_gl_buffer(projection @ model_view, out)


def compute_camera_model_view_projection_matrix(
    source: IntrinsicsSource,
    width: int,
    height: int,
    near_plane: float,
    far_plane: float,
    rotation: Optional[Union[Rotation3D, np.ndarray]] = None,
    center: Optional[Point3D] = None,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Combined matrix straight from a camera, or intrinsics + rotation + center.

    Both operands are computed in float64 and multiplied before the single
    float32 conversion.
    """
    _check_frustum(width, height, near_plane, far_plane)
    if out is not None:
        check_out_buffer(out)

    if isinstance(source, PinholeCamera):
        if rotation is not None or center is not None:
            raise ValueError("rotation and center must not be given together with a camera")
        pose_source: RotationSource = source
    else:
        if rotation is None:
            raise ValueError("rotation is required when intrinsics are given")
        pose_source = rotation

    intrinsics = _resolve_intrinsics(source)
    R, c = _resolve_pose(pose_source, center)
    projection = _projection_matrix(intrinsics, width, height, near_plane, far_plane)
    return to_gl_buffer(projection @ _model_view_matrix(R, c), out)
