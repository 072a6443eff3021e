"""Pinhole camera model: P = K R [I | -C].

A camera is stored as its 3x4 projective matrix. When it was built from
intrinsics, rotation and center those factors travel with it; a camera built
from a raw matrix has to be decomposed before the factors are available.

Projective scale and handedness make the raw matrix ambiguous: ``P`` and
``-P`` (or ``2P``) are the same camera. The canonical form used throughout
the package is ``camera.normalize().fix_sign()``:

- ``normalize`` scales ``P`` to unit Frobenius norm.
- ``fix_sign`` negates ``P`` when ``det(P[:, :3]) < 0``.

``decompose`` then recovers K with a positive diagonal, a proper rotation and
the camera center (the right null-space of ``P``).
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from scipy.linalg import rq

from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.points import Point2D, Point3D
from camgl.geometry.rotation import Rotation3D

logger = logging.getLogger(__name__)

# Below this |det| the left 3x3 block is treated as singular (camera at infinity).
SINGULARITY_THRESHOLD = 1e-12


class PinholeCamera:
    """Immutable 3x4 projective camera."""

    __slots__ = ("_matrix", "_intrinsics", "_rotation", "_center")

    def __init__(
        self,
        matrix,
        intrinsics: Optional[IntrinsicParameters] = None,
        rotation: Optional[Rotation3D] = None,
        center: Optional[Point3D] = None,
    ):
        P = np.array(matrix, dtype=float)
        if P.shape != (3, 4):
            raise ValueError(f"Camera matrix must be 3x4, got shape {P.shape}")
        P.setflags(write=False)
        self._matrix = P
        self._intrinsics = intrinsics
        self._rotation = rotation
        self._center = center

    @classmethod
    def from_parameters(
        cls,
        intrinsics: IntrinsicParameters,
        rotation: Rotation3D,
        center: Point3D,
    ) -> "PinholeCamera":
        if intrinsics is None or rotation is None or center is None:
            raise ValueError("intrinsics, rotation and center are all required")
        KR = intrinsics.matrix() @ rotation.as_matrix()
        P = np.empty((3, 4), dtype=float)
        P[:, :3] = KR
        P[:, 3] = -KR @ center.as_array()
        return cls(P, intrinsics, rotation, center)

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def intrinsics(self) -> Optional[IntrinsicParameters]:
        return self._intrinsics

    @property
    def rotation(self) -> Optional[Rotation3D]:
        return self._rotation

    @property
    def center(self) -> Optional[Point3D]:
        return self._center

    @property
    def has_parameters(self) -> bool:
        return (
            self._intrinsics is not None
            and self._rotation is not None
            and self._center is not None
        )

    def _with_matrix(self, matrix: np.ndarray) -> "PinholeCamera":
        return PinholeCamera(matrix, self._intrinsics, self._rotation, self._center)

    def normalize(self) -> "PinholeCamera":
        norm = np.linalg.norm(self._matrix)
        if norm == 0.0:
            raise ValueError("Cannot normalize a zero camera matrix")
        return self._with_matrix(self._matrix / norm)

    def fix_sign(self) -> "PinholeCamera":
        if np.linalg.det(self._matrix[:, :3]) < 0.0:
            return self._with_matrix(-self._matrix)
        return self

    def decompose(self) -> "PinholeCamera":
        """Recover intrinsics, rotation and center from the raw matrix."""
        M = self._matrix[:, :3]
        if abs(np.linalg.det(M)) < SINGULARITY_THRESHOLD * np.linalg.norm(M) ** 3:
            raise ValueError("Camera matrix has a singular left 3x3 block")

        K, Q = rq(M)
        signs = np.sign(np.diag(K))
        signs[signs == 0.0] = 1.0
        D = np.diag(signs)
        K = K @ D
        Q = D @ Q
        # det(M) < 0: the same camera with the opposite projective sign.
        if np.linalg.det(Q) < 0.0:
            Q = -Q

        center = -np.linalg.solve(M, self._matrix[:, 3])
        intrinsics = IntrinsicParameters.from_matrix(np.triu(K))
        logger.debug(f"Decomposed camera: {intrinsics}, center={center.tolist()}")
        return PinholeCamera(
            self._matrix, intrinsics, Rotation3D(Q), Point3D.from_array(center)
        )

    def _parameters(self):
        camera = self if self.has_parameters else self.normalize().fix_sign().decompose()
        return camera._intrinsics, camera._rotation, camera._center

    def with_intrinsics(self, intrinsics: IntrinsicParameters) -> "PinholeCamera":
        _, rotation, center = self._parameters()
        return PinholeCamera.from_parameters(intrinsics, rotation, center)

    def with_rotation(self, rotation: Rotation3D) -> "PinholeCamera":
        intrinsics, _, center = self._parameters()
        return PinholeCamera.from_parameters(intrinsics, rotation, center)

    def with_center(self, center: Point3D) -> "PinholeCamera":
        intrinsics, rotation, _ = self._parameters()
        return PinholeCamera.from_parameters(intrinsics, rotation, center)

    def project(self, point: Point3D) -> Point2D:
        return Point2D.from_array(self._matrix @ point.homogeneous())

    def equals(self, other: "PinholeCamera", threshold: float = 1e-9) -> bool:
        """Compare canonical forms (normalized and sign-fixed)."""
        a = self.normalize().fix_sign().matrix
        b = other.normalize().fix_sign().matrix
        return bool(np.allclose(a, b, atol=threshold))

    def __repr__(self) -> str:
        return f"PinholeCamera({self._matrix.tolist()!r})"
