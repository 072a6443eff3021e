"""Sensor/display orientation resolution and view-coordinate transforms."""

from camgl.orientation.display_orientation import (
    DisplayRotation,
    Orientation,
    OrientationReading,
    display_orientation,
    display_orientation_degrees,
)
from camgl.orientation.view_coordinates import (
    from_view_coordinates_camera,
    from_view_coordinates_rotation,
    from_view_coordinates_transformation,
    reverse_y_coordinates_matrix,
    to_view_coordinates_camera,
    to_view_coordinates_rotation,
    to_view_coordinates_transformation,
    transform_camera,
)

__all__ = [
    "DisplayRotation",
    "Orientation",
    "OrientationReading",
    "display_orientation",
    "display_orientation_degrees",
    "from_view_coordinates_camera",
    "from_view_coordinates_rotation",
    "from_view_coordinates_transformation",
    "reverse_y_coordinates_matrix",
    "to_view_coordinates_camera",
    "to_view_coordinates_rotation",
    "to_view_coordinates_transformation",
    "transform_camera",
]
