"""
Tests for engine configuration loading and saving.
"""

import json

import pytest
import yaml

from rdf_graphview.config import CONFIG_ENV_VAR, EngineConfig, ViewportConfig
from rdf_graphview.errors import LayoutConfigError
from rdf_graphview.layout import LayoutParams


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.layout == LayoutParams()
        assert config.viewport == ViewportConfig()
        assert config.projection.label_predicates[0] == "label"
        assert config.projection.default_type == "Resource"
        assert config.namespaces == {}

    def test_partial_dict(self):
        config = EngineConfig.from_dict({
            "layout": {"max_iterations": 50},
            "viewport": {"width": 640},
            "projection": {"default_type": "Thing"},
        })
        assert config.layout.max_iterations == 50
        assert config.layout.damping == LayoutParams().damping
        assert config.viewport.width == 640.0
        assert config.viewport.height == 800.0
        assert config.projection.default_type == "Thing"

    def test_yaml_round_trip(self, tmp_path):
        config = EngineConfig.from_dict({
            "layout": {"repulsion_strength": 5000.0},
            "namespaces": {"acme": "http://acme.com/ns/"},
        })
        path = tmp_path / "graphview.yaml"
        config.save(path)
        assert yaml.safe_load(path.read_text())["namespaces"] == {"acme": "http://acme.com/ns/"}
        assert EngineConfig.load(path).to_dict() == config.to_dict()

    def test_json_round_trip(self, tmp_path):
        config = EngineConfig.from_dict({"viewport": {"padding": 20}})
        path = tmp_path / "nested" / "graphview.json"
        config.save(path)
        assert json.loads(path.read_text())["viewport"]["padding"] == 20.0
        assert EngineConfig.load(path).viewport.padding == 20.0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert EngineConfig.load(path).to_dict() == EngineConfig().to_dict()

    def test_invalid_layout_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("layout:\n  damping: 3.0\n")
        with pytest.raises(LayoutConfigError):
            EngineConfig.load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineConfig.load(tmp_path / "nope.yaml")


class TestFromEnv:
    def test_unset_gives_defaults(self):
        assert EngineConfig.from_env({}).to_dict() == EngineConfig().to_dict()

    def test_reads_named_file(self, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text("viewport:\n  width: 1024\n")
        config = EngineConfig.from_env({CONFIG_ENV_VAR: str(path)})
        assert config.viewport.width == 1024.0

    def test_process_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"layout": {"max_iterations": 7}}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert EngineConfig.from_env().layout.max_iterations == 7
