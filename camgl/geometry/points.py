"""Inhomogeneous 2D/3D points."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def homogeneous(self) -> np.ndarray:
        return np.array([self.x, self.y, 1.0], dtype=float)

    @classmethod
    def from_array(cls, values) -> "Point2D":
        """Build from (x, y) or homogeneous (x, y, w)."""
        arr = np.asarray(values, dtype=float).ravel()
        if arr.shape == (3,):
            if arr[2] == 0.0:
                raise ValueError("Point at infinity has no inhomogeneous form")
            arr = arr[:2] / arr[2]
        if arr.shape != (2,):
            raise ValueError(f"Expected 2 or 3 coordinates, got shape {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def homogeneous(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z, 1.0], dtype=float)

    @classmethod
    def origin(cls) -> "Point3D":
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_array(cls, values) -> "Point3D":
        """Build from (x, y, z) or homogeneous (x, y, z, w)."""
        arr = np.asarray(values, dtype=float).ravel()
        if arr.shape == (4,):
            if arr[3] == 0.0:
                raise ValueError("Point at infinity has no inhomogeneous form")
            arr = arr[:3] / arr[3]
        if arr.shape != (3,):
            raise ValueError(f"Expected 3 or 4 coordinates, got shape {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]), z=float(arr[2]))
