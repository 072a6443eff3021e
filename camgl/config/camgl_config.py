"""camgl configuration dataclasses."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union, get_type_hints

import yaml

from camgl.conversion.camera_to_gl import check_planes

logger = logging.getLogger(__name__)

DEFAULT_NEAR_PLANE = 0.1
DEFAULT_FAR_PLANE = 1000.0


@dataclass
class CameraStateConfig:
    """Defaults applied to a new ``CameraState``."""
    near_plane: float = DEFAULT_NEAR_PLANE
    far_plane: float = DEFAULT_FAR_PLANE
    compute_model_view_projection: bool = False


@dataclass
class OrientationConfig:
    """Orientation resolution policy.

    strict: raise ValueError on readings that do not resolve to a multiple
        of 90 degrees instead of falling back to 0 degrees.
    """
    strict: bool = False


@dataclass
class CamGLConfig:
    state: CameraStateConfig = field(default_factory=CameraStateConfig)
    orientation: OrientationConfig = field(default_factory=OrientationConfig)
    verbose: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Raise ValueError if the clip plane defaults are unusable."""
        check_planes(self.state.near_plane, self.state.far_plane)


# =============================================================================
# YAML Loading / Saving
# =============================================================================

def _build_from_dict(cls, raw: Optional[Dict[str, Any]]):
    """Construct dataclass ``cls`` from a mapping, recursing into sections.

    Missing keys keep their defaults and unknown keys are ignored with a
    warning. A nested section that is not a mapping is rejected.
    """
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise ValueError(f"{cls.__name__} section must be a mapping, got {type(raw).__name__}")

    hints = get_type_hints(cls)
    known = {f.name for f in fields(cls)}
    for key in sorted(set(raw) - known):
        logger.warning(f"Ignoring unknown {cls.__name__} key: {key}")

    kwargs = {}
    for name in known & set(raw):
        ft = hints.get(name)
        if is_dataclass(ft):
            kwargs[name] = _build_from_dict(ft, raw[name])
        else:
            kwargs[name] = raw[name]
    return cls(**kwargs)


def load_camgl_config(path: Union[str, Path]) -> CamGLConfig:
    """Load and validate a CamGLConfig from a YAML file.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
        ValueError: if a section is malformed or the clip planes are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    config = _build_from_dict(CamGLConfig, data)
    config.validate()
    return config


def save_camgl_config(config: CamGLConfig, path: Union[str, Path]) -> None:
    """Validate ``config`` and write it as YAML, creating parent directories."""
    config.validate()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
