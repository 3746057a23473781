"""
Configuration for the Urban Impact Engine.

Nested dataclasses with module defaults that match the calibrated
constants of each model. A YAML file can override any subset; the
loader merges it over the defaults.
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.exceptions import ConfigurationError
from core.terrain.cache import EvictionPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    Path.cwd() / "urbanimpact.yaml",
    Path.home() / ".urbanimpact" / "config.yaml",
]


@dataclass
class TerrainConfig:
    """
    Terrain sampling settings.

    Attributes:
        sample_delta: Longitude offset (degrees) for the slope sample, ~55 m
        flow_delta: Offset (degrees) for flow-direction sampling
        built_density: Impervious-surface proxy used by the heat metric
        cache_capacity: Maximum elevation cache entries
        eviction_policy: What to do when the cache is full
        cache_metrics: Read terrain metrics through the elevation cache
    """

    sample_delta: float = 0.0005
    flow_delta: float = 0.0006
    built_density: float = 0.6
    cache_capacity: int = 5000
    eviction_policy: EvictionPolicy = EvictionPolicy.CLEAR_ALL
    cache_metrics: bool = True

    def __post_init__(self):
        if isinstance(self.eviction_policy, str):
            self.eviction_policy = EvictionPolicy(self.eviction_policy)
        if self.sample_delta <= 0:
            raise ValueError(f"sample_delta must be positive, got {self.sample_delta}")
        if self.cache_capacity < 1:
            raise ValueError(f"cache_capacity must be >= 1, got {self.cache_capacity}")


@dataclass
class FloodConfig:
    """
    Flood animation settings.

    Attributes:
        depth_increment: Depth multiplier added per tick
        max_depth: Multiplier ceiling and per-cell depth clamp (meters)
        default_zoom: Zoom used when the host does not supply one
        frame_interval_s: Tick cadence for the threaded scheduler
    """

    depth_increment: float = 0.02
    max_depth: float = 3.5
    default_zoom: float = 14.0
    frame_interval_s: float = 1.0 / 60.0

    def __post_init__(self):
        if self.depth_increment <= 0:
            raise ValueError(f"depth_increment must be positive, got {self.depth_increment}")
        if self.max_depth <= 0:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")


@dataclass
class AirQualityConfig:
    """Live air-quality lookup settings."""

    timeout_s: float = 5.0
    api_key: Optional[str] = None


@dataclass
class EconomicConfig:
    """
    Economic loss model settings.

    Attributes:
        weights: Impact-factor weight per factor, must sum to 1.0
        fx_inr_per_usd: Exchange rate used for the INR conversion
        fallback_gdp_per_capita: USD, used when the baseline lacks it
        fallback_population: Used when the baseline lacks it
    """

    weights: Dict[str, float] = field(
        default_factory=lambda: {
            "aqi": 0.15,
            "rain": 0.20,
            "flood": 0.40,
            "traffic": 0.25,
        }
    )
    fx_inr_per_usd: float = 84.0
    fallback_gdp_per_capita: float = 2500.0
    fallback_population: float = 20_000_000

    def __post_init__(self):
        expected = {"aqi", "rain", "flood", "traffic"}
        if set(self.weights) != expected:
            raise ValueError(f"weights must have keys {sorted(expected)}, got {sorted(self.weights)}")
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"weights must sum to 1.0, got {total}")


@dataclass
class DemographicConfig:
    """Population projection rates."""

    base_natural_rate: float = 0.009
    natural_rate_decay: float = 0.0004
    natural_rate_floor: float = 0.002
    base_migration_rate: float = 0.012
    migration_stress_damping: float = 0.6
    stress_loss_cr: float = 3000.0
    base_tfr: float = 1.5
    tfr_decay: float = 0.015
    tfr_floor: float = 1.2

    def __post_init__(self):
        if self.stress_loss_cr <= 0:
            raise ValueError(f"stress_loss_cr must be positive, got {self.stress_loss_cr}")
        if not 0.0 <= self.migration_stress_damping <= 1.0:
            raise ValueError(
                f"migration_stress_damping must be in [0, 1], got {self.migration_stress_damping}"
            )


@dataclass
class ScenarioConfig:
    """
    Year range and the risk trajectory between baseline and worst case.

    Projected factors move linearly from the base_* values to the
    worst_* values as the time factor goes from 0 to 1.
    """

    base_year: int = 2025
    max_year: int = 2040
    base_aqi: float = 90.0
    base_traffic: float = 0.35
    base_flood_risk: float = 0.25
    base_rainfall_mm: float = 0.0
    base_rain_probability_pct: float = 0.0
    worst_aqi: float = 400.0
    worst_traffic: float = 1.0
    worst_flood_risk: float = 1.0

    def __post_init__(self):
        if self.max_year < self.base_year:
            raise ValueError(
                f"max_year ({self.max_year}) must not precede base_year ({self.base_year})"
            )


@dataclass
class EngineConfig:
    """Top-level configuration combining all component settings."""

    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    flood: FloodConfig = field(default_factory=FloodConfig)
    air_quality: AirQualityConfig = field(default_factory=AirQualityConfig)
    economic: EconomicConfig = field(default_factory=EconomicConfig)
    demographic: DemographicConfig = field(default_factory=DemographicConfig)
    scenario: ScenarioConfig = field(default_factory=ScenarioConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "EngineConfig":
        """
        Create configuration from dictionary.

        Unknown sections are ignored; unknown keys or invalid values
        inside a section raise ConfigurationError.

        Args:
            config_dict: Configuration dictionary

        Returns:
            EngineConfig instance
        """
        try:
            return cls(
                terrain=TerrainConfig(**config_dict.get("terrain", {})),
                flood=FloodConfig(**config_dict.get("flood", {})),
                air_quality=AirQualityConfig(**config_dict.get("air_quality", {})),
                economic=EconomicConfig(**config_dict.get("economic", {})),
                demographic=DemographicConfig(**config_dict.get("demographic", {})),
                scenario=ScenarioConfig(**config_dict.get("scenario", {})),
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration key: {e}") from e
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "EngineConfig":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            EngineConfig instance
        """
        path = Path(yaml_path).expanduser()
        try:
            with open(path) as f:
                config_dict = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read configuration: {e}", str(path)) from e

        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration root must be a mapping", str(path))

        logger.debug(f"Loaded configuration from {path}")
        return cls.from_dict(config_dict)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "EngineConfig":
        """
        Load from an explicit path, else the first default location found,
        else built-in defaults.
        """
        if path is not None:
            return cls.from_yaml(str(path))
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                return cls.from_yaml(str(candidate))
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["terrain"]["eviction_policy"] = self.terrain.eviction_policy.value
        data["air_quality"].pop("api_key", None)
        return data
