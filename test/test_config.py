"""Tests for CamGLConfig and YAML loading/saving."""

from __future__ import annotations

import logging

import pytest
import yaml

from camgl.config import (
    DEFAULT_FAR_PLANE,
    DEFAULT_NEAR_PLANE,
    CamGLConfig,
    CameraStateConfig,
    OrientationConfig,
    load_camgl_config,
    save_camgl_config,
)
from camgl.config.camgl_config import _build_from_dict


class TestDefaultValues:

    def test_state_defaults(self):
        c = CameraStateConfig()
        assert c.near_plane == DEFAULT_NEAR_PLANE == 0.1
        assert c.far_plane == DEFAULT_FAR_PLANE == 1000.0
        assert c.compute_model_view_projection is False

    def test_orientation_defaults(self):
        assert OrientationConfig().strict is False

    def test_global_defaults(self):
        c = CamGLConfig()
        assert isinstance(c.state, CameraStateConfig)
        assert isinstance(c.orientation, OrientationConfig)
        assert c.verbose is False


class TestToDict:

    def test_nested_dict_structure(self):
        d = CamGLConfig().to_dict()
        assert set(d) == {"state", "orientation", "verbose"}
        assert d["state"]["near_plane"] == 0.1
        assert d["orientation"]["strict"] is False

    def test_to_dict_preserves_values(self):
        c = CamGLConfig()
        c.state.far_plane = 50.0
        c.verbose = True
        d = c.to_dict()
        assert d["state"]["far_plane"] == 50.0
        assert d["verbose"] is True


class TestYAMLSaveLoad:

    def test_save_and_load(self, tmp_path):
        original = CamGLConfig()
        original.state.near_plane = 0.5
        original.state.compute_model_view_projection = True
        original.orientation.strict = True
        path = tmp_path / "cfg.yaml"
        save_camgl_config(original, path)
        loaded = load_camgl_config(path)
        assert loaded == original

    def test_load_nonexistent_raises(self):
        with pytest.raises(FileNotFoundError):
            load_camgl_config("/nonexistent/path/camgl.yaml")

    def test_load_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_camgl_config(path) == CamGLConfig()

    def test_nested_override(self, tmp_path):
        path = tmp_path / "nested.yaml"
        path.write_text(yaml.dump({"state": {"far_plane": 20.0}}))
        cfg = load_camgl_config(path)
        assert cfg.state.far_plane == 20.0
        assert cfg.state.near_plane == 0.1  # default preserved
        assert isinstance(cfg.orientation, OrientationConfig)

    def test_load_extra_keys_ignored(self, tmp_path, caplog):
        path = tmp_path / "extra.yaml"
        path.write_text(yaml.dump({"verbose": True, "unknown_field": "hello"}))
        with caplog.at_level(logging.WARNING):
            cfg = load_camgl_config(path)
        assert "unknown_field" in caplog.text
        assert cfg.verbose is True
        assert not hasattr(cfg, "unknown_field")

    def test_save_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / "camgl.yaml"
        save_camgl_config(CamGLConfig(), path)
        assert path.exists()


class TestValidation:

    def test_defaults_are_valid(self):
        CamGLConfig().validate()

    @pytest.mark.parametrize(
        "state",
        [
            {"near_plane": 10.0, "far_plane": 1.0},
            {"near_plane": 0.0},
            {"far_plane": DEFAULT_NEAR_PLANE},
            {"near_plane": float("nan")},
            {"far_plane": float("inf")},
        ],
    )
    def test_load_invalid_planes_raises(self, tmp_path, state):
        path = tmp_path / "planes.yaml"
        path.write_text(yaml.dump({"state": state}))
        with pytest.raises(ValueError, match="plane"):
            load_camgl_config(path)

    def test_load_non_mapping_section_raises(self, tmp_path):
        path = tmp_path / "section.yaml"
        path.write_text(yaml.dump({"state": [1.0, 2.0]}))
        with pytest.raises(ValueError, match="CameraStateConfig"):
            load_camgl_config(path)

    def test_save_invalid_raises(self, tmp_path):
        config = CamGLConfig(state=CameraStateConfig(near_plane=5.0, far_plane=5.0))
        path = tmp_path / "camgl.yaml"
        with pytest.raises(ValueError, match="far_plane"):
            save_camgl_config(config, path)
        assert not path.exists()


class TestBuildFromDict:

    def test_none_input_returns_default(self):
        assert _build_from_dict(CamGLConfig, None) == CamGLConfig()

    def test_subconfig_from_dict(self):
        cfg = _build_from_dict(CameraStateConfig, {"near_plane": 2.0, "far_plane": 3.0})
        assert cfg.near_plane == 2.0
        assert cfg.far_plane == 3.0
