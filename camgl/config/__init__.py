"""camgl configuration.

Usage:
    from camgl.config import load_camgl_config

    config = load_camgl_config("camgl.yaml")
    state = CameraState(1080, 1920, config=config)
"""

from camgl.config.camgl_config import (
    DEFAULT_FAR_PLANE,
    DEFAULT_NEAR_PLANE,
    CamGLConfig,
    CameraStateConfig,
    OrientationConfig,
    load_camgl_config,
    save_camgl_config,
)

__all__ = [
    "DEFAULT_FAR_PLANE",
    "DEFAULT_NEAR_PLANE",
    "CamGLConfig",
    "CameraStateConfig",
    "OrientationConfig",
    "load_camgl_config",
    "save_camgl_config",
]
