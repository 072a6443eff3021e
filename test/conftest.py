"""Shared fixtures and synthetic data factories for camgl tests."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
import pytest

from camgl.geometry import IntrinsicParameters, PinholeCamera, Point3D, Rotation3D


# ---------------------------------------------------------------------------
# Reference device
# ---------------------------------------------------------------------------

WIDTH = 480
HEIGHT = 640

NEAR_PLANE = 0.1
FAR_PLANE = 100.0

MIN_ROTATION_ANGLE_DEGREES = -45.0
MAX_ROTATION_ANGLE_DEGREES = 45.0

MIN_POS = -50.0
MAX_POS = 50.0


def make_projection_matrix() -> np.ndarray:
    """Projection matrix reported by a 480x640 phone, column-major.

    Row-major it reads:

        [2.8693345  0.0        -0.004545755  0.0       ]
        [0.0        1.5806589   0.009158132  0.0       ]
        [0.0        0.0        -1.002002    -0.2002002 ]
        [0.0        0.0        -1.0          0.0       ]
    """
    return np.array(
        [
            2.8693345, 0.0, 0.0, 0.0,
            0.0, 1.5806589, 0.0, 0.0,
            -0.004545755, 0.009158132, -1.002002, -1.0,
            0.0, 0.0, -0.2002002, 0.0,
        ],
        dtype=np.float32,
    )


def make_intrinsics() -> IntrinsicParameters:
    """Calibration encoded in ``make_projection_matrix``."""
    p = make_projection_matrix().astype(np.float64)
    return IntrinsicParameters(
        horizontal_focal_length=float(p[0] * WIDTH / 2.0),
        vertical_focal_length=float(p[5] * HEIGHT / 2.0),
        horizontal_principal_point=float((1.0 + p[8]) * WIDTH / 2.0),
        vertical_principal_point=float((1.0 + p[9]) * HEIGHT / 2.0),
        skewness=0.0,
    )


# ---------------------------------------------------------------------------
# Synthetic data factories
# ---------------------------------------------------------------------------

def make_rotation(rng: np.random.RandomState) -> Rotation3D:
    """Random rotation with roll/pitch/yaw in [-45, 45] degrees."""
    roll, pitch, yaw = (
        math.radians(rng.uniform(MIN_ROTATION_ANGLE_DEGREES, MAX_ROTATION_ANGLE_DEGREES))
        for _ in range(3)
    )
    return Rotation3D.from_euler(roll, pitch, yaw)


def make_center(rng: np.random.RandomState) -> Point3D:
    """Random camera center with coordinates in [-50, 50]."""
    return Point3D(*rng.uniform(MIN_POS, MAX_POS, size=3))


def make_camera(
    rng: np.random.RandomState,
    intrinsics: Optional[IntrinsicParameters] = None,
) -> PinholeCamera:
    """Camera with the reference calibration and a random pose."""
    if intrinsics is None:
        intrinsics = make_intrinsics()
    return PinholeCamera.from_parameters(intrinsics, make_rotation(rng), make_center(rng))


@pytest.fixture
def rng():
    return np.random.RandomState(0)
