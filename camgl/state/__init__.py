"""Cached camera state of a rendering surface."""

from camgl.state.camera_state import CameraState

__all__ = ["CameraState"]
