"""Sensor-to-display orientation.

The platform reports two values: the fixed sensor orientation (degrees
between the sensor's native pixel layout and the device's natural
orientation) and the current display rotation (one of four discrete states).
The orientation of sensor images relative to the display is their
difference, modulo 360.

Readings are allowed to be momentarily invalid. A result that is not a
multiple of 90 degrees resolves to 0 degrees, unless strict resolution is
requested.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

logger = logging.getLogger(__name__)

ORIENTATION_0_DEGREES = 0
ORIENTATION_90_DEGREES = 90
ORIENTATION_180_DEGREES = 180
ORIENTATION_270_DEGREES = 270

FALLBACK_DEGREES = ORIENTATION_0_DEGREES


class Orientation(Enum):
    """Discrete rotation between sensor space and display space."""

    DEGREES_0 = ORIENTATION_0_DEGREES
    DEGREES_90 = ORIENTATION_90_DEGREES
    DEGREES_180 = ORIENTATION_180_DEGREES
    DEGREES_270 = ORIENTATION_270_DEGREES
    UNKNOWN = None

    @property
    def degrees(self) -> Optional[int]:
        return self.value

    @property
    def radians(self) -> Optional[float]:
        return None if self.value is None else math.radians(self.value)

    @property
    def is_known(self) -> bool:
        return self is not Orientation.UNKNOWN

    @classmethod
    def from_degrees(cls, degrees: Optional[int]) -> "Orientation":
        """Exact bucket lookup; anything else is UNKNOWN."""
        for orientation in cls:
            if orientation.value is not None and orientation.value == degrees:
                return orientation
        return cls.UNKNOWN


class DisplayRotation(IntEnum):
    """Display rotation states as reported by the windowing system."""

    ROTATION_0 = 0
    ROTATION_90 = 1
    ROTATION_180 = 2
    ROTATION_270 = 3

    @property
    def degrees(self) -> int:
        return 90 * int(self)


def display_rotation_degrees(display_rotation) -> int:
    """Degrees of a display rotation state; unrecognized states count as 0."""
    try:
        return DisplayRotation(display_rotation).degrees
    except ValueError:
        logger.warning(f"Unrecognized display rotation {display_rotation!r}, using 0 degrees")
        return 0


def display_orientation_degrees(
    sensor_orientation: Optional[int],
    display_rotation,
    strict: bool = False,
) -> Optional[int]:
    """Orientation of sensor images relative to the display, in degrees.

    Args:
        sensor_orientation: sensor orientation in degrees, or None when the
            platform does not report one.
        display_rotation: a ``DisplayRotation`` state (or its integer code).
        strict: raise instead of falling back when the result is not one of
            0/90/180/270.

    Returns:
        One of 0, 90, 180, 270, or None for a missing sensor orientation
        (the degrees of ``Orientation.UNKNOWN``).
    """
    if sensor_orientation is None:
        return None

    degrees = (int(sensor_orientation) - display_rotation_degrees(display_rotation) + 360) % 360
    if Orientation.from_degrees(degrees).is_known:
        return degrees

    if strict:
        raise ValueError(
            f"Sensor orientation {sensor_orientation} with display rotation "
            f"{display_rotation!r} does not resolve to a multiple of 90 degrees"
        )
    logger.warning(
        f"Degenerate orientation reading (sensor={sensor_orientation}, "
        f"display={display_rotation!r}), falling back to {FALLBACK_DEGREES} degrees"
    )
    return FALLBACK_DEGREES


def display_orientation(
    sensor_orientation: Optional[int],
    display_rotation,
    strict: bool = False,
) -> Orientation:
    """Enumerated form of ``display_orientation_degrees``.

    A missing sensor orientation yields ``Orientation.UNKNOWN``.
    """
    return Orientation.from_degrees(
        display_orientation_degrees(sensor_orientation, display_rotation, strict=strict)
    )


@dataclass(frozen=True)
class OrientationReading:
    """One sample of the platform orientation inputs."""

    sensor_orientation: Optional[int]
    display_rotation: int = DisplayRotation.ROTATION_0
    strict: bool = False

    @property
    def orientation(self) -> Orientation:
        return display_orientation(
            self.sensor_orientation, self.display_rotation, strict=self.strict
        )

    @property
    def degrees(self) -> Optional[int]:
        """Same value as ``self.orientation.degrees``."""
        return display_orientation_degrees(
            self.sensor_orientation, self.display_rotation, strict=self.strict
        )

    def require_orientation(self) -> Orientation:
        orientation = self.orientation
        if not orientation.is_known:
            raise RuntimeError(
                "Orientation is unknown: the platform did not report a sensor orientation"
            )
        return orientation
