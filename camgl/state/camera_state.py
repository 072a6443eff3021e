"""Cached camera state for a rendering surface.

``CameraState`` owns the viewport size, clip planes, display orientation and
an optional camera / view-camera pair, and serves the pipeline matrices
derived from them. Derived values are cached as ``Optional`` fields: a
setter clears exactly the caches its input feeds, and the next read
recomputes them.

Dependencies between fields:

    camera + width, height, near, far  -> projection_matrix
    camera                             -> model_view_matrix
    projection_matrix + model_view     -> model_view_projection_matrix
    camera + orientation               -> view_camera

The camera and the view camera are the same camera seen in sensor and in
display coordinates. Either one can be set; the other is derived through the
orientation transform, which requires a known orientation.

Not thread-safe: confine an instance to one owner or lock around it.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from camgl.config.camgl_config import CamGLConfig
from camgl.conversion.camera_to_gl import (
    canonical_camera,
    check_dimension,
    check_matrix_buffer,
    check_planes,
    compute_model_view_matrix,
    compute_model_view_projection_matrix,
    compute_projection_matrix,
)
from camgl.geometry.intrinsics import IntrinsicParameters
from camgl.geometry.pinhole_camera import PinholeCamera
from camgl.geometry.points import Point3D
from camgl.geometry.rotation import Rotation3D
from camgl.orientation.display_orientation import (
    DisplayRotation,
    Orientation,
    display_orientation,
)
from camgl.orientation.view_coordinates import (
    from_view_coordinates_camera,
    to_view_coordinates_camera,
)

logger = logging.getLogger(__name__)


def _check_camera(name: str, value) -> None:
    if not isinstance(value, PinholeCamera):
        raise ValueError(f"{name} must be a PinholeCamera, got {type(value).__name__}")


def _default_camera(
    intrinsics: Optional[IntrinsicParameters] = None,
    rotation: Optional[Rotation3D] = None,
    center: Optional[Point3D] = None,
) -> PinholeCamera:
    """Camera built from the given factors, identity defaults for the rest."""
    return PinholeCamera.from_parameters(
        intrinsics if intrinsics is not None else IntrinsicParameters(),
        rotation if rotation is not None else Rotation3D.identity(),
        center if center is not None else Point3D.origin(),
    )


class CameraState:
    """Viewport, clip planes, orientation and camera of one rendering surface.

    Args:
        width: viewport width in pixels (> 0).
        height: viewport height in pixels (> 0).
        config: optional configuration; clip plane defaults, combined matrix
            computation and orientation policy are read from it.

    Raises:
        ValueError: if width or height is not positive, or the configured
            clip planes are invalid.
    """

    def __init__(self, width: int, height: int, config: Optional[CamGLConfig] = None):
        config = config or CamGLConfig()
        check_dimension("width", width)
        check_dimension("height", height)
        check_planes(config.state.near_plane, config.state.far_plane)

        self._config = config
        self._log_level = logging.INFO if config.verbose else logging.DEBUG

        self._width = width
        self._height = height
        self._near_plane = float(config.state.near_plane)
        self._far_plane = float(config.state.far_plane)
        self._orientation = Orientation.UNKNOWN
        self._mvp_enabled = bool(config.state.compute_model_view_projection)

        self._camera: Optional[PinholeCamera] = None
        self._view_camera: Optional[PinholeCamera] = None
        self._projection_matrix: Optional[np.ndarray] = None
        self._model_view_matrix: Optional[np.ndarray] = None
        self._model_view_projection_matrix: Optional[np.ndarray] = None

    def __repr__(self) -> str:
        return (
            f"CameraState(width={self._width}, height={self._height}, "
            f"near_plane={self._near_plane}, far_plane={self._far_plane}, "
            f"orientation={self._orientation.name}, "
            f"has_camera={self._camera is not None})"
        )

    # =========================================================================
    # Cache invalidation
    # =========================================================================

    def _invalidate_projection(self) -> None:
        # Explicitly set matrices have no camera to be recomputed from.
        if self._camera is None:
            return
        self._projection_matrix = None
        self._model_view_projection_matrix = None

    def _invalidate_camera_matrices(self) -> None:
        self._projection_matrix = None
        self._model_view_matrix = None
        self._model_view_projection_matrix = None

    def _require_known_orientation(self) -> None:
        if not self._orientation.is_known:
            raise RuntimeError(
                "Orientation is unknown: view camera values are not available"
            )

    # =========================================================================
    # Viewport and clip planes
    # =========================================================================

    @property
    def width(self) -> int:
        return self._width

    @width.setter
    def width(self, value: int) -> None:
        check_dimension("width", value)
        if value == self._width:
            return
        self._width = value
        self._invalidate_projection()

    @property
    def height(self) -> int:
        return self._height

    @height.setter
    def height(self, value: int) -> None:
        check_dimension("height", value)
        if value == self._height:
            return
        self._height = value
        self._invalidate_projection()

    @property
    def near_plane(self) -> float:
        return self._near_plane

    @near_plane.setter
    def near_plane(self, value: float) -> None:
        check_planes(value, self._far_plane)
        if value == self._near_plane:
            return
        self._near_plane = float(value)
        self._invalidate_projection()

    @property
    def far_plane(self) -> float:
        return self._far_plane

    @far_plane.setter
    def far_plane(self, value: float) -> None:
        check_planes(self._near_plane, value)
        if value == self._far_plane:
            return
        self._far_plane = float(value)
        self._invalidate_projection()

    def set_near_far_planes(self, near_plane: float, far_plane: float) -> None:
        """Set both clip planes at once (checked together, not one by one)."""
        check_planes(near_plane, far_plane)
        if near_plane == self._near_plane and far_plane == self._far_plane:
            return
        self._near_plane = float(near_plane)
        self._far_plane = float(far_plane)
        self._invalidate_projection()

    def set_viewport_size(self, width: int, height: int) -> None:
        check_dimension("width", width)
        check_dimension("height", height)
        if width == self._width and height == self._height:
            return
        self._width = width
        self._height = height
        self._invalidate_projection()

    # =========================================================================
    # Orientation
    # =========================================================================

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @orientation.setter
    def orientation(self, value: Orientation) -> None:
        if not isinstance(value, Orientation):
            raise ValueError(f"Expected an Orientation, got {type(value).__name__}")
        if value is self._orientation:
            return
        logger.log(
            self._log_level,
            f"Orientation {self._orientation.name} -> {value.name}",
        )
        self._orientation = value
        # The camera and its matrices stay; only the display-space view of it changes.
        self._view_camera = None

    def set_orientation_from_reading(
        self,
        sensor_orientation: Optional[int],
        display_rotation=DisplayRotation.ROTATION_0,
    ) -> Orientation:
        """Resolve platform orientation inputs and store the result.

        A missing sensor orientation stores ``Orientation.UNKNOWN``. Degenerate
        readings follow the configured orientation policy.
        """
        self.orientation = display_orientation(
            sensor_orientation,
            display_rotation,
            strict=self._config.orientation.strict,
        )
        return self._orientation

    # =========================================================================
    # Cameras
    # =========================================================================

    @property
    def camera(self) -> Optional[PinholeCamera]:
        """Camera in sensor coordinates, or None when none was set."""
        return self._camera

    @camera.setter
    def camera(self, value: PinholeCamera) -> None:
        _check_camera("camera", value)
        self._camera = canonical_camera(value)
        self._view_camera = None
        self._invalidate_camera_matrices()
        logger.log(self._log_level, f"Camera set, center={self._camera.center}")

    @property
    def view_camera(self) -> Optional[PinholeCamera]:
        """Camera in display coordinates.

        None when no camera is set or the orientation is unknown.
        """
        if self._view_camera is None and self._camera is not None and self._orientation.is_known:
            self._view_camera = canonical_camera(
                to_view_coordinates_camera(self._orientation, self._camera)
            )
        return self._view_camera

    @view_camera.setter
    def view_camera(self, value: PinholeCamera) -> None:
        self._require_known_orientation()
        _check_camera("view_camera", value)
        view_camera = canonical_camera(value)
        self._camera = canonical_camera(
            from_view_coordinates_camera(self._orientation, view_camera)
        )
        self._view_camera = view_camera
        self._invalidate_camera_matrices()
        logger.log(
            self._log_level,
            f"View camera set with orientation {self._orientation.name}, "
            f"center={self._camera.center}",
        )

    # Sensor-side factors

    @property
    def camera_intrinsic_parameters(self) -> Optional[IntrinsicParameters]:
        return None if self._camera is None else self._camera.intrinsics

    @camera_intrinsic_parameters.setter
    def camera_intrinsic_parameters(self, value: IntrinsicParameters) -> None:
        if value is None:
            raise ValueError("camera_intrinsic_parameters must not be None")
        if self._camera is None:
            self.camera = _default_camera(intrinsics=value)
        else:
            self.camera = self._camera.with_intrinsics(value)

    @property
    def camera_rotation(self) -> Optional[Rotation3D]:
        return None if self._camera is None else self._camera.rotation

    @camera_rotation.setter
    def camera_rotation(self, value: Rotation3D) -> None:
        if value is None:
            raise ValueError("camera_rotation must not be None")
        if self._camera is None:
            self.camera = _default_camera(rotation=value)
        else:
            self.camera = self._camera.with_rotation(value)

    @property
    def camera_center(self) -> Optional[Point3D]:
        return None if self._camera is None else self._camera.center

    @camera_center.setter
    def camera_center(self, value: Point3D) -> None:
        if value is None:
            raise ValueError("camera_center must not be None")
        if self._camera is None:
            self.camera = _default_camera(center=value)
        else:
            self.camera = self._camera.with_center(value)

    # Display-side factors

    def _view_camera_or_none(self) -> Optional[PinholeCamera]:
        self._require_known_orientation()
        return self.view_camera

    @property
    def view_camera_intrinsic_parameters(self) -> Optional[IntrinsicParameters]:
        """Intrinsics of the view camera.

        Raises:
            RuntimeError: if the orientation is unknown.
        """
        view_camera = self._view_camera_or_none()
        return None if view_camera is None else view_camera.intrinsics

    @view_camera_intrinsic_parameters.setter
    def view_camera_intrinsic_parameters(self, value: IntrinsicParameters) -> None:
        self._require_known_orientation()
        if value is None:
            raise ValueError("view_camera_intrinsic_parameters must not be None")
        view_camera = self.view_camera
        if view_camera is None:
            self.view_camera = _default_camera(intrinsics=value)
        else:
            self.view_camera = view_camera.with_intrinsics(value)

    @property
    def view_camera_rotation(self) -> Optional[Rotation3D]:
        view_camera = self._view_camera_or_none()
        return None if view_camera is None else view_camera.rotation

    @view_camera_rotation.setter
    def view_camera_rotation(self, value: Rotation3D) -> None:
        self._require_known_orientation()
        if value is None:
            raise ValueError("view_camera_rotation must not be None")
        view_camera = self.view_camera
        if view_camera is None:
            self.view_camera = _default_camera(rotation=value)
        else:
            self.view_camera = view_camera.with_rotation(value)

    @property
    def view_camera_center(self) -> Optional[Point3D]:
        view_camera = self._view_camera_or_none()
        return None if view_camera is None else view_camera.center

    @view_camera_center.setter
    def view_camera_center(self, value: Point3D) -> None:
        self._require_known_orientation()
        if value is None:
            raise ValueError("view_camera_center must not be None")
        view_camera = self.view_camera
        if view_camera is None:
            self.view_camera = _default_camera(center=value)
        else:
            self.view_camera = view_camera.with_center(value)

    # =========================================================================
    # Pipeline matrices
    # =========================================================================

    @property
    def projection_matrix(self) -> Optional[np.ndarray]:
        """Column-major (16,) float32 projection matrix, or None."""
        if self._projection_matrix is None and self._camera is not None:
            self._projection_matrix = compute_projection_matrix(
                self._camera,
                self._width,
                self._height,
                self._near_plane,
                self._far_plane,
            )
        return self._projection_matrix

    @projection_matrix.setter
    def projection_matrix(self, value) -> None:
        """Store an explicit projection matrix.

        The camera is dropped since it can no longer be derived from the
        matrices; the model-view matrix it produced is kept.
        """
        buffer = check_matrix_buffer(value, "projection_matrix")
        self._model_view_matrix = self.model_view_matrix
        self._drop_cameras()
        self._projection_matrix = np.array(buffer, dtype=np.float32)
        self._model_view_projection_matrix = None

    @property
    def model_view_matrix(self) -> Optional[np.ndarray]:
        """Column-major (16,) float32 model-view matrix, or None."""
        if self._model_view_matrix is None and self._camera is not None:
            self._model_view_matrix = compute_model_view_matrix(self._camera)
        return self._model_view_matrix

    @model_view_matrix.setter
    def model_view_matrix(self, value) -> None:
        buffer = check_matrix_buffer(value, "model_view_matrix")
        self._projection_matrix = self.projection_matrix
        self._drop_cameras()
        self._model_view_matrix = np.array(buffer, dtype=np.float32)
        self._model_view_projection_matrix = None

    def _drop_cameras(self) -> None:
        if self._camera is not None:
            logger.log(self._log_level, "Explicit matrix set, dropping camera")
        self._camera = None
        self._view_camera = None

    @property
    def is_model_view_projection_matrix_computation_enabled(self) -> bool:
        return self._mvp_enabled

    @is_model_view_projection_matrix_computation_enabled.setter
    def is_model_view_projection_matrix_computation_enabled(self, value: bool) -> None:
        self._mvp_enabled = bool(value)
        if not self._mvp_enabled:
            self._model_view_projection_matrix = None

    @property
    def model_view_projection_matrix(self) -> Optional[np.ndarray]:
        """``projection x model_view``, or None when disabled or unavailable."""
        if not self._mvp_enabled:
            return None
        if self._model_view_projection_matrix is None:
            projection = self.projection_matrix
            model_view = self.model_view_matrix
            if projection is not None and model_view is not None:
                self._model_view_projection_matrix = compute_model_view_projection_matrix(
                    projection, model_view
                )
        return self._model_view_projection_matrix

    # =========================================================================
    # Bulk update
    # =========================================================================

    def set_values(
        self,
        near_plane: float,
        far_plane: float,
        width: int,
        height: int,
        camera: PinholeCamera,
    ) -> None:
        """Set clip planes, viewport and camera in one step.

        Every argument is checked before anything is modified.
        """
        check_planes(near_plane, far_plane)
        check_dimension("width", width)
        check_dimension("height", height)
        _check_camera("camera", camera)

        self._near_plane = float(near_plane)
        self._far_plane = float(far_plane)
        self._width = width
        self._height = height
        self.camera = camera
