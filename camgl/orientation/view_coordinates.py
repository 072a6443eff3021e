"""Sensor-space <-> view-space transforms for points and cameras.

A sensor image is brought into view (display) coordinates by rotating it
about a pivot, normally the principal point, and reversing the vertical
axis:

    T = Tt^-1 * Ty * R * Tt

where ``Tt`` moves the pivot to the origin, ``R`` rotates by the display
orientation and ``Ty = diag(1, -1, 1)``. The inverse transform maps view
coordinates back to sensor coordinates.

Cameras are lifted by left-multiplying their 3x4 matrix with the 3x3
transform, so image pixels change while world geometry stays put.

Orientation sources:

- ``Orientation``: explicit value. UNKNOWN is not an error here; it
  produces no rotation (identity transform, ``None`` rotation).
- ``OrientationReading``: platform-resolved value. UNKNOWN raises
  ``RuntimeError`` since the quantity cannot be defined.
- ``Rotation2D`` (or ``None`` for no rotation): explicit angle.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np

from camgl.conversion.camera_to_gl import intrinsics_from_camera
from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.pinhole_camera import PinholeCamera
from camgl.geometry.points import Point2D
from camgl.geometry.rotation import Rotation2D
from camgl.geometry.transformations import ProjectiveTransformation2D
from camgl.orientation.display_orientation import Orientation, OrientationReading

OrientationSource = Union[Orientation, OrientationReading]
TransformationSource = Union[Orientation, OrientationReading, Rotation2D, None]
PivotSource = Union[Point2D, IntrinsicParameters]


def reverse_y_coordinates_matrix() -> np.ndarray:
    return np.diag([1.0, -1.0, 1.0])


def _resolve_orientation(source: OrientationSource) -> Orientation:
    if isinstance(source, OrientationReading):
        return source.require_orientation()
    if isinstance(source, Orientation):
        return source
    raise ValueError(
        f"Expected an Orientation or OrientationReading, got {type(source).__name__}"
    )


def _resolve_pivot(pivot: PivotSource) -> Point2D:
    if isinstance(pivot, Point2D):
        return pivot
    if isinstance(pivot, IntrinsicParameters):
        return Point2D(pivot.horizontal_principal_point, pivot.vertical_principal_point)
    raise ValueError(
        f"Expected a Point2D or IntrinsicParameters pivot, got {type(pivot).__name__}"
    )


# =============================================================================
# Rotations
# =============================================================================

def to_view_coordinates_rotation(source: OrientationSource) -> Optional[Rotation2D]:
    """Rotation taking sensor coordinates to view coordinates.

    Returns None for an explicit ``Orientation.UNKNOWN``.
    """
    orientation = _resolve_orientation(source)
    if not orientation.is_known:
        return None
    return Rotation2D(orientation.radians)


def from_view_coordinates_rotation(source: OrientationSource) -> Optional[Rotation2D]:
    """Rotation taking view coordinates back to sensor coordinates."""
    orientation = _resolve_orientation(source)
    if not orientation.is_known:
        return None
    return Rotation2D(-orientation.radians)


# =============================================================================
# 2D transformations
# =============================================================================

def _rotation_about_pivot(
    rotation: Optional[Rotation2D], pivot: Point2D
) -> ProjectiveTransformation2D:
    tt = ProjectiveTransformation2D.translation(-pivot.x, -pivot.y)
    inv_tt = ProjectiveTransformation2D.translation(pivot.x, pivot.y)
    ty = ProjectiveTransformation2D(reverse_y_coordinates_matrix())
    r = ProjectiveTransformation2D.from_rotation(rotation)
    return inv_tt.combine(ty).combine(r).combine(tt)


def to_view_coordinates_transformation(
    source: TransformationSource,
    pivot: PivotSource,
) -> ProjectiveTransformation2D:
    """Transform mapping sensor pixels to view pixels.

    Args:
        source: ``Orientation``, ``OrientationReading``, ``Rotation2D`` or
            None (no rotation, vertical reversal only).
        pivot: rotation pivot, or intrinsics whose principal point is used.
    """
    point = _resolve_pivot(pivot)
    if isinstance(source, (Orientation, OrientationReading)):
        orientation = _resolve_orientation(source)
        if not orientation.is_known:
            return ProjectiveTransformation2D.identity()
        return _rotation_about_pivot(Rotation2D(orientation.radians), point)
    if source is None or isinstance(source, Rotation2D):
        return _rotation_about_pivot(source, point)
    raise ValueError(
        f"Expected an Orientation, OrientationReading or Rotation2D, got {type(source).__name__}"
    )


def from_view_coordinates_transformation(
    source: TransformationSource,
    pivot: PivotSource,
) -> ProjectiveTransformation2D:
    """Inverse of ``to_view_coordinates_transformation`` for the same inputs."""
    return to_view_coordinates_transformation(source, pivot).inverse()


# =============================================================================
# Cameras
# =============================================================================

def transform_camera(
    transformation: ProjectiveTransformation2D, camera: PinholeCamera
) -> PinholeCamera:
    """Apply a 2D image transformation to a camera: ``P' = T P``."""
    if camera is None:
        raise ValueError("camera must not be None")
    t = transformation.normalize().as_matrix()
    p = camera.normalize().fix_sign().matrix
    return PinholeCamera(t @ p)


def _default_pivot(camera: PinholeCamera, pivot: Optional[PivotSource]) -> PivotSource:
    if pivot is not None:
        return pivot
    if camera is None:
        raise ValueError("camera must not be None")
    return intrinsics_from_camera(camera)


def to_view_coordinates_camera(
    source: TransformationSource,
    camera: PinholeCamera,
    pivot: Optional[PivotSource] = None,
) -> PinholeCamera:
    """Camera whose image is expressed in view coordinates.

    The pivot defaults to the camera's principal point.
    """
    transformation = to_view_coordinates_transformation(
        source, _default_pivot(camera, pivot)
    )
    return transform_camera(transformation, camera)


def from_view_coordinates_camera(
    source: TransformationSource,
    camera: PinholeCamera,
    pivot: Optional[PivotSource] = None,
) -> PinholeCamera:
    """Camera whose image is expressed back in sensor coordinates."""
    transformation = from_view_coordinates_transformation(
        source, _default_pivot(camera, pivot)
    )
    return transform_camera(transformation, camera)
