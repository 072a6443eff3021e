"""Geometry primitives: points, rotations, transformations and pinhole cameras."""

from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.pinhole_camera import PinholeCamera
from camgl.geometry.points import Point2D, Point3D
from camgl.geometry.rotation import Rotation2D, Rotation3D
from camgl.geometry.transformations import (
    ProjectiveTransformation2D,
    ProjectiveTransformation3D,
)

__all__ = [
    "IntrinsicParameters",
    "PinholeCamera",
    "Point2D",
    "Point3D",
    "Rotation2D",
    "Rotation3D",
    "ProjectiveTransformation2D",
    "ProjectiveTransformation3D",
]
