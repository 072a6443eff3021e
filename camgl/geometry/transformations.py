"""Projective transformations in 2D (3x3) and 3D (4x4) homogeneous form."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import numpy as np

from camgl.geometry.points import Point2D, Point3D
from camgl.geometry.rotation import Rotation2D

if TYPE_CHECKING:
    from camgl.geometry.pinhole_camera import PinholeCamera


class _ProjectiveTransformation:
    HOM_COORDS = 0

    __slots__ = ("_t",)

    def __init__(self, matrix=None):
        n = self.HOM_COORDS
        T = np.eye(n, dtype=float) if matrix is None else np.array(matrix, dtype=float)
        if T.shape != (n, n):
            raise ValueError(
                f"{type(self).__name__} requires a {n}x{n} matrix, got shape {T.shape}"
            )
        T.setflags(write=False)
        self._t = T

    @classmethod
    def identity(cls):
        return cls()

    def as_matrix(self) -> np.ndarray:
        return self._t.copy()

    def normalize(self):
        """Scale to unit Frobenius norm. The sign is left untouched."""
        norm = np.linalg.norm(self._t)
        if norm == 0.0:
            raise ValueError("Cannot normalize a zero transformation")
        return type(self)(self._t / norm)

    def inverse(self):
        if abs(np.linalg.det(self._t)) < np.finfo(float).eps:
            raise ValueError("Transformation is not invertible")
        return type(self)(np.linalg.inv(self._t))

    def combine(self, other):
        """Transformation applying ``other`` first, then ``self``."""
        if type(other) is not type(self):
            raise ValueError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}"
            )
        return type(self)(self._t @ other._t)

    def equals(self, other, threshold: float = 1e-9) -> bool:
        return bool(np.allclose(self._t, other._t, atol=threshold))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._t.tolist()!r})"


class ProjectiveTransformation2D(_ProjectiveTransformation):
    HOM_COORDS = 3

    __slots__ = ()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "ProjectiveTransformation2D":
        T = np.eye(3, dtype=float)
        T[0, 2] = tx
        T[1, 2] = ty
        return cls(T)

    @classmethod
    def from_rotation(cls, rotation: Optional[Rotation2D]) -> "ProjectiveTransformation2D":
        """Rotation about the origin. ``None`` means no rotation."""
        if rotation is None:
            return cls()
        return cls(rotation.homogeneous_matrix())

    def transform_point(self, point: Point2D) -> Point2D:
        return Point2D.from_array(self._t @ point.homogeneous())


class ProjectiveTransformation3D(_ProjectiveTransformation):
    HOM_COORDS = 4

    __slots__ = ()

    def transform_point(self, point: Point3D) -> Point3D:
        return Point3D.from_array(self._t @ point.homogeneous())

    def transform_camera(self, camera: "PinholeCamera") -> "PinholeCamera":
        """Move ``camera`` by this transformation.

        Points are mapped by ``T``, so the camera that sees the mapped scene
        the way ``camera`` sees the unmapped one is ``P' = P @ T^-1``.
        """
        from camgl.geometry.pinhole_camera import PinholeCamera

        return PinholeCamera(camera.matrix @ self.inverse().as_matrix())
