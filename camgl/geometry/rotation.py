"""2D and 3D rotations."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation as _ScipyRotation

# Float32 matrices coming back from a GL buffer are orthonormal only to ~1e-7.
ORTHONORMALITY_THRESHOLD = 1e-5


@dataclass(frozen=True)
class Rotation2D:
    """Planar rotation by ``theta`` radians (counter-clockwise)."""

    theta: float = 0.0

    def matrix(self) -> np.ndarray:
        c, s = math.cos(self.theta), math.sin(self.theta)
        return np.array([[c, -s], [s, c]], dtype=float)

    def homogeneous_matrix(self) -> np.ndarray:
        H = np.eye(3, dtype=float)
        H[:2, :2] = self.matrix()
        return H

    def inverse(self) -> "Rotation2D":
        return Rotation2D(-self.theta)

    def combine(self, other: "Rotation2D") -> "Rotation2D":
        return Rotation2D(self.theta + other.theta)


class Rotation3D:
    """Proper 3D rotation backed by an orthonormal 3x3 matrix."""

    __slots__ = ("_matrix",)

    def __init__(self, matrix=None):
        R = np.eye(3, dtype=float) if matrix is None else np.array(matrix, dtype=float)
        if R.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got shape {R.shape}")
        if not np.allclose(R @ R.T, np.eye(3), atol=ORTHONORMALITY_THRESHOLD):
            raise ValueError("Rotation matrix must be orthonormal")
        if np.linalg.det(R) < 0.0:
            raise ValueError("Rotation matrix must have determinant +1")
        R.setflags(write=False)
        self._matrix = R

    @classmethod
    def identity(cls) -> "Rotation3D":
        return cls()

    @classmethod
    def from_euler(cls, roll: float, pitch: float, yaw: float) -> "Rotation3D":
        """Rotation from roll/pitch/yaw angles in radians (extrinsic x-y-z)."""
        return cls(_ScipyRotation.from_euler("xyz", [roll, pitch, yaw]).as_matrix())

    @classmethod
    def from_quaternion(cls, a: float, b: float, c: float, d: float) -> "Rotation3D":
        """Rotation from a scalar-first quaternion ``a + bi + cj + dk``."""
        return cls(_ScipyRotation.from_quat([b, c, d, a]).as_matrix())

    @classmethod
    def from_axis_angle(cls, axis, angle: float) -> "Rotation3D":
        axis = np.asarray(axis, dtype=float)
        norm = np.linalg.norm(axis)
        if norm == 0.0:
            raise ValueError("Rotation axis must be non-zero")
        return cls(_ScipyRotation.from_rotvec(axis / norm * angle).as_matrix())

    def as_matrix(self) -> np.ndarray:
        return self._matrix.copy()

    def inverse(self) -> "Rotation3D":
        return Rotation3D(self._matrix.T)

    def combine(self, other: "Rotation3D") -> "Rotation3D":
        """Rotation applying ``other`` first, then ``self``."""
        return Rotation3D(self._matrix @ other._matrix)

    def rotation_angle(self) -> float:
        return float(np.linalg.norm(_ScipyRotation.from_matrix(self._matrix).as_rotvec()))

    def equals(self, other: "Rotation3D", threshold: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, other._matrix, atol=threshold))

    def __repr__(self) -> str:
        return f"Rotation3D({self._matrix.tolist()!r})"
