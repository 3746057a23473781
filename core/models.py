"""
Data model for the Urban Impact Engine.

Value types exchanged between the terrain, air-quality, flood, economic
and demographic components. Everything here is derived per query and
never persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """A WGS84 coordinate in decimal degrees."""

    lat: float
    lng: float

    def offset(self, dlat: float = 0.0, dlng: float = 0.0) -> "GeoPoint":
        """Return a new point shifted by the given deltas (degrees)."""
        return GeoPoint(lat=self.lat + dlat, lng=self.lng + dlng)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class TerrainSample:
    """
    Terrain metrics derived for a single point.

    Attributes:
        elevation: Elevation in meters (0 when the source is unavailable)
        slope: Unitless gradient between the point and its sample neighbour
        drainage: How quickly the terrain sheds water (0-1)
        heat: Heat-retention proxy (>= 0, unbounded above)
    """

    elevation: float = 0.0
    slope: float = 0.0
    drainage: float = 0.0
    heat: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "elevation": self.elevation,
            "slope": self.slope,
            "drainage": self.drainage,
            "heat": self.heat,
        }


@dataclass(frozen=True)
class FloodCell:
    """
    One square of the flood grid.

    Attributes:
        polygon: Four corner points, counter-clockwise from south-west
        depth: Water depth in meters, clamped to [0, max_depth]
    """

    polygon: Tuple[GeoPoint, GeoPoint, GeoPoint, GeoPoint]
    depth: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "polygon": [p.to_dict() for p in self.polygon],
            "depth": self.depth,
        }


@dataclass(frozen=True)
class FloodGridState:
    """
    Snapshot of an active flood simulation run.

    Attributes:
        center: Grid center
        radius: Half-width of the grid in degrees
        step: Cell size in degrees
        zoom: Map zoom the grid parameters were derived from
        rainfall_mm: Rainfall the run was started with
        depth_multiplier: Tick-advanced rainfall scale (0 to max_depth)
        cells: Flooded cells at the current multiplier
    """

    center: GeoPoint
    radius: float
    step: float
    zoom: float
    rainfall_mm: float
    depth_multiplier: float = 0.0
    cells: Tuple[FloodCell, ...] = ()

    @property
    def effective_rainfall_mm(self) -> float:
        return self.rainfall_mm * self.depth_multiplier


@dataclass(frozen=True)
class AQIReading:
    """
    Pollutant concentrations and the derived index.

    Concentrations are in micrograms per cubic meter.
    """

    pm25: float
    pm10: float
    no2: float
    o3: float
    aqi: int
    timestamp: datetime
    co: float = 0.0
    category: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pm25": self.pm25,
            "pm10": self.pm10,
            "no2": self.no2,
            "o3": self.o3,
            "co": self.co,
            "aqi": self.aqi,
            "category": self.category,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ImpactFactors:
    """
    Risk factors driving the economic model.

    Attributes:
        aqi: Air quality index (0-500)
        rainfall_mm: Rainfall in millimeters
        flood_risk: Flood risk (0-1)
        traffic_congestion: Traffic congestion (0-1)
    """

    aqi: float = 0.0
    rainfall_mm: float = 0.0
    flood_risk: float = 0.0
    traffic_congestion: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "aqi": self.aqi,
            "rainfall_mm": self.rainfall_mm,
            "flood_risk": self.flood_risk,
            "traffic_congestion": self.traffic_congestion,
        }


@dataclass(frozen=True)
class LiveReadings:
    """
    Current observations for a location. Every field is optional; a
    missing field means the projected baseline is used instead.
    """

    aqi: Optional[float] = None
    rainfall_mm: Optional[float] = None
    rain_probability_pct: Optional[float] = None
    traffic_congestion: Optional[float] = None
    flood_risk: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "aqi": self.aqi,
            "rainfall_mm": self.rainfall_mm,
            "rain_probability_pct": self.rain_probability_pct,
            "traffic_congestion": self.traffic_congestion,
            "flood_risk": self.flood_risk,
        }


@dataclass(frozen=True)
class MacroEconomicBaseline:
    """
    Regional macro-economic indicators. Every field is independently
    optional; consumers substitute their own fallback constants.
    """

    gdp_per_capita: Optional[float] = None
    population: Optional[float] = None
    urban_pct: Optional[float] = None
    poverty_rate: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "gdp_per_capita": self.gdp_per_capita,
            "population": self.population,
            "urban_pct": self.urban_pct,
            "poverty_rate": self.poverty_rate,
        }


@dataclass(frozen=True)
class LossEstimate:
    """Output of the economic loss computation."""

    economic_loss_cr: float
    impact_factor: float
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class EconomicImpactResult:
    """
    Economic impact for a scenario.

    Attributes:
        people_affected: Estimated affected people (>= 100)
        economic_loss_cr: Daily loss in INR crore (>= 0)
        breakdown: Weighted contribution of each factor to the impact factor
        impact_factor: Weighted blend of the normalized losses (0-1)
        risk_level: Low / Moderate / Severe
    """

    people_affected: int
    economic_loss_cr: float
    breakdown: Dict[str, float] = field(default_factory=dict)
    impact_factor: float = 0.0
    risk_level: str = "Low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "people_affected": self.people_affected,
            "economic_loss_cr": self.economic_loss_cr,
            "breakdown": dict(self.breakdown),
            "impact_factor": self.impact_factor,
            "risk_level": self.risk_level,
        }


@dataclass(frozen=True)
class DemographicState:
    """Projected population and rates for a target year."""

    year: int
    population: int
    growth_rate_pct: float
    tfr: float
    migration_share_pct: float
    absolute_growth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "population": self.population,
            "growth_rate_pct": round(self.growth_rate_pct, 2),
            "tfr": round(self.tfr, 2),
            "migration_share_pct": round(self.migration_share_pct, 1),
            "absolute_growth": self.absolute_growth,
        }


@dataclass(frozen=True)
class ImpactScenario:
    """
    Complete result of one (location, year) evaluation.

    Created fresh per query and never updated; a newer query produces a
    new scenario and the old one is dropped.
    """

    location: GeoPoint
    year: int
    base_year: int
    factors: ImpactFactors
    economic_result: EconomicImpactResult
    demographic_state: DemographicState
    time_factor: float = 0.0
    terrain: Optional[TerrainSample] = None
    session_token: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.to_dict(),
            "year": self.year,
            "base_year": self.base_year,
            "time_factor": round(self.time_factor, 4),
            "factors": self.factors.to_dict(),
            "economic_result": self.economic_result.to_dict(),
            "demographic_state": self.demographic_state.to_dict(),
            "terrain": self.terrain.to_dict() if self.terrain else None,
            "session_token": self.session_token,
        }


CellList = List[FloodCell]
