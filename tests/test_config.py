"""
Tests for engine configuration loading and validation.
"""

import pytest
import yaml

from core.config import (
    EngineConfig,
    FloodConfig,
    ScenarioConfig,
    TerrainConfig,
)
from core.exceptions import ConfigurationError
from core.terrain.cache import EvictionPolicy


class TestDefaults:
    """Tests for default configuration values."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.terrain.cache_capacity == 5000
        assert config.terrain.eviction_policy == EvictionPolicy.CLEAR_ALL
        assert config.flood.depth_increment == 0.02
        assert config.flood.max_depth == 3.5
        assert config.economic.fx_inr_per_usd == 84.0
        assert config.scenario.base_year == 2025
        assert config.scenario.max_year == 2040

    def test_eviction_policy_from_string(self):
        assert TerrainConfig(eviction_policy="lru").eviction_policy == EvictionPolicy.LRU

    @pytest.mark.parametrize(
        "factory,kwargs,match",
        [
            (TerrainConfig, {"sample_delta": 0}, "sample_delta"),
            (TerrainConfig, {"cache_capacity": 0}, "cache_capacity"),
            (FloodConfig, {"depth_increment": -0.1}, "depth_increment"),
            (FloodConfig, {"max_depth": 0}, "max_depth"),
            (ScenarioConfig, {"base_year": 2030, "max_year": 2025}, "must not precede"),
        ],
    )
    def test_validation(self, factory, kwargs, match):
        with pytest.raises(ValueError, match=match):
            factory(**kwargs)


class TestFromDict:
    """Tests for EngineConfig.from_dict."""

    def test_partial_override(self):
        config = EngineConfig.from_dict(
            {"flood": {"max_depth": 2.0}, "terrain": {"eviction_policy": "lru"}}
        )
        assert config.flood.max_depth == 2.0
        assert config.flood.depth_increment == 0.02
        assert config.terrain.eviction_policy == EvictionPolicy.LRU

    def test_unknown_section_ignored(self):
        assert EngineConfig.from_dict({"plugins": {"x": 1}}) == EngineConfig()

    def test_unknown_key_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration key"):
            EngineConfig.from_dict({"flood": {"speed": 3}})

    def test_invalid_value_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration value"):
            EngineConfig.from_dict({"terrain": {"eviction_policy": "random"}})

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            EngineConfig.from_dict({"scenario": {"base_year": 2050}})


class TestFromYaml:
    """Tests for YAML loading."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "urbanimpact.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "scenario": {"base_year": 2024, "max_year": 2050},
                    "economic": {"fx_inr_per_usd": 83.5},
                }
            )
        )
        config = EngineConfig.from_yaml(str(path))
        assert config.scenario.base_year == 2024
        assert config.economic.fx_inr_per_usd == 83.5

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert EngineConfig.from_yaml(str(path)) == EngineConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.from_yaml(str(tmp_path / "absent.yaml"))
        assert exc_info.value.path.endswith("absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("flood: [unclosed")
        with pytest.raises(ConfigurationError, match="Failed to read"):
            EngineConfig.from_yaml(str(path))

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            EngineConfig.from_yaml(str(path))


class TestLoad:
    """Tests for EngineConfig.load search order."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("flood:\n  default_zoom: 16\n")
        assert EngineConfig.load(path).flood.default_zoom == 16

    def test_first_default_path(self, tmp_path, monkeypatch):
        first = tmp_path / "first.yaml"
        second = tmp_path / "second.yaml"
        second.write_text("flood:\n  max_depth: 1.5\n")
        monkeypatch.setattr("core.config.DEFAULT_CONFIG_PATHS", [first, second])
        assert EngineConfig.load().flood.max_depth == 1.5

    def test_no_file_is_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr("core.config.DEFAULT_CONFIG_PATHS", [tmp_path / "none.yaml"])
        assert EngineConfig.load() == EngineConfig()


class TestToDict:
    """Tests for EngineConfig.to_dict."""

    def test_serializable(self):
        config = EngineConfig.from_dict({"air_quality": {"api_key": "secret"}})
        data = config.to_dict()
        assert data["terrain"]["eviction_policy"] == "clear_all"
        assert "api_key" not in data["air_quality"]
        # Serialized form round-trips through YAML
        assert yaml.safe_load(yaml.safe_dump(data))["flood"]["max_depth"] == 3.5

    def test_round_trip(self):
        data = EngineConfig().to_dict()
        assert EngineConfig.from_dict(data) == EngineConfig()
