"""Pinhole camera intrinsic parameters."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class IntrinsicParameters:
    """Calibration of a pinhole camera, in pixels.

    The calibration matrix follows the usual computer-vision layout:

        K = [[fx, s,  px],
             [0,  fy, py],
             [0,  0,  1 ]]

    ``vertical_focal_length`` is signed. When the image y axis points the
    opposite way from the rendering pipeline the caller bakes the flip into
    a negative value; nothing in this package negates it implicitly.

    Defaults describe the identity calibration.
    """

    horizontal_focal_length: float = 1.0
    vertical_focal_length: float = 1.0
    horizontal_principal_point: float = 0.0
    vertical_principal_point: float = 0.0
    skewness: float = 0.0

    @property
    def aspect_ratio(self) -> float:
        return self.vertical_focal_length / self.horizontal_focal_length

    def matrix(self) -> np.ndarray:
        return np.array(
            [
                [self.horizontal_focal_length, self.skewness, self.horizontal_principal_point],
                [0.0, self.vertical_focal_length, self.vertical_principal_point],
                [0.0, 0.0, 1.0],
            ],
            dtype=float,
        )

    @classmethod
    def from_matrix(cls, matrix) -> "IntrinsicParameters":
        """Build from a 3x3 upper-triangular calibration matrix.

        The matrix is normalized so that ``K[2, 2] == 1``.
        """
        K = np.asarray(matrix, dtype=float)
        if K.shape != (3, 3):
            raise ValueError(f"Calibration matrix must be 3x3, got shape {K.shape}")
        if K[2, 2] == 0.0:
            raise ValueError("Calibration matrix must have a non-zero K[2, 2]")
        if not np.allclose(np.tril(K, -1), 0.0):
            raise ValueError("Calibration matrix must be upper triangular")
        K = K / K[2, 2]
        return cls(
            horizontal_focal_length=float(K[0, 0]),
            vertical_focal_length=float(K[1, 1]),
            horizontal_principal_point=float(K[0, 2]),
            vertical_principal_point=float(K[1, 2]),
            skewness=float(K[0, 1]),
        )
