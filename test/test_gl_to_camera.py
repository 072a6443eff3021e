"""Tests for pipeline matrix -> pinhole camera conversion."""

from __future__ import annotations

import numpy as np
import pytest

from camgl.conversion import (
    MATRIX_LENGTH,
    compute_intrinsics,
    compute_model_view_matrix,
    compute_pinhole_camera,
    compute_pose_transformation,
    compute_projection_matrix,
)
from camgl.geometry import IntrinsicParameters, ProjectiveTransformation3D

from conftest import (
    FAR_PLANE,
    HEIGHT,
    NEAR_PLANE,
    WIDTH,
    make_camera,
    make_center,
    make_projection_matrix,
    make_rotation,
)

ABSOLUTE_ERROR = 1e-4
SMALL_ABSOLUTE_ERROR = 5e-6
LARGE_ABSOLUTE_ERROR = 3e-3


class TestComputeIntrinsics:

    def test_reference_device(self):
        k = compute_intrinsics(make_projection_matrix(), WIDTH, HEIGHT)
        assert k.horizontal_focal_length == pytest.approx(2.8693345 * WIDTH / 2, rel=1e-6)
        assert k.vertical_focal_length == pytest.approx(1.5806589 * HEIGHT / 2, rel=1e-6)
        assert k.horizontal_principal_point == pytest.approx(
            (1.0 - 0.004545755) * WIDTH / 2, rel=1e-6
        )
        assert k.vertical_principal_point == pytest.approx(
            (1.0 + 0.009158132) * HEIGHT / 2, rel=1e-6
        )
        assert k.skewness == 0.0

    def test_recovers_intrinsics(self):
        k1 = IntrinsicParameters(450.0, -520.0, 230.0, 310.0, 1.25)
        p = compute_projection_matrix(k1, WIDTH, HEIGHT, NEAR_PLANE, FAR_PLANE)
        k2 = compute_intrinsics(p, WIDTH, HEIGHT)
        assert k2.horizontal_focal_length == pytest.approx(k1.horizontal_focal_length, abs=ABSOLUTE_ERROR)
        assert k2.vertical_focal_length == pytest.approx(k1.vertical_focal_length, abs=ABSOLUTE_ERROR)
        assert k2.horizontal_principal_point == pytest.approx(k1.horizontal_principal_point, abs=ABSOLUTE_ERROR)
        assert k2.vertical_principal_point == pytest.approx(k1.vertical_principal_point, abs=ABSOLUTE_ERROR)
        assert k2.skewness == pytest.approx(k1.skewness, abs=ABSOLUTE_ERROR)

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError, match="projection_matrix"):
            compute_intrinsics(np.zeros(MATRIX_LENGTH + 1, dtype=np.float32), WIDTH, HEIGHT)

    def test_invalid_viewport_raises(self):
        with pytest.raises(ValueError, match="width"):
            compute_intrinsics(make_projection_matrix(), 0, HEIGHT)
        with pytest.raises(ValueError, match="height"):
            compute_intrinsics(make_projection_matrix(), WIDTH, -1)


class TestComputePoseTransformation:

    def test_reads_pose(self, rng):
        rotation = make_rotation(rng)
        center = make_center(rng)
        expected = np.eye(4)
        expected[:3, :3] = rotation.as_matrix().T
        expected[:3, 3] = center.as_array()

        pose = compute_pose_transformation(compute_model_view_matrix(rotation, center))
        assert isinstance(pose, ProjectiveTransformation3D)
        np.testing.assert_allclose(pose.as_matrix(), expected, atol=ABSOLUTE_ERROR)

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError, match="model_view_matrix"):
            compute_pose_transformation(np.zeros(MATRIX_LENGTH + 1))


class TestComputePinholeCamera:

    def test_round_trip(self, rng):
        for _ in range(10):
            camera = make_camera(rng).normalize().fix_sign()
            p = compute_projection_matrix(camera, WIDTH, HEIGHT, NEAR_PLANE, FAR_PLANE)
            mv = compute_model_view_matrix(camera)

            result = compute_pinhole_camera(p, mv, WIDTH, HEIGHT)
            assert not result.has_parameters
            result = result.normalize().fix_sign().decompose()

            np.testing.assert_allclose(
                result.matrix, camera.matrix, atol=LARGE_ABSOLUTE_ERROR
            )

    def test_matrices_survive_round_trip(self, rng):
        camera = make_camera(rng)
        p1 = compute_projection_matrix(camera, WIDTH, HEIGHT, NEAR_PLANE, FAR_PLANE)
        mv1 = compute_model_view_matrix(camera)

        result = compute_pinhole_camera(p1, mv1, WIDTH, HEIGHT)
        p2 = compute_projection_matrix(result, WIDTH, HEIGHT, NEAR_PLANE, FAR_PLANE)
        mv2 = compute_model_view_matrix(result)

        np.testing.assert_allclose(p2, p1, atol=SMALL_ABSOLUTE_ERROR)
        np.testing.assert_allclose(mv2, mv1, atol=ABSOLUTE_ERROR)

    def test_wrong_lengths_raise(self):
        good = np.zeros(MATRIX_LENGTH, dtype=np.float32)
        bad = np.zeros(MATRIX_LENGTH + 1, dtype=np.float32)
        with pytest.raises(ValueError, match="projection_matrix"):
            compute_pinhole_camera(bad, good, WIDTH, HEIGHT)
        with pytest.raises(ValueError, match="model_view_matrix"):
            compute_pinhole_camera(good, bad, WIDTH, HEIGHT)
