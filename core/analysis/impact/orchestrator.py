"""
Impact Orchestrator

Composes the terrain, economic and demographic models into one
ImpactScenario per (location, year) query.

Risk factors follow a linear trajectory from configured baselines to
worst-case bounds as the time factor runs from 0 (base year) to 1 (max
year). For the base year itself, live readings override the projection.
Economic loss is computed first and feeds the demographic projection;
nothing flows back the other way within one evaluation.
"""

import logging
import math
from typing import Callable, Optional, Tuple, Union

from core.air_quality.aqi import AQI_MAX
from core.analysis.impact.demographic import DemographicProjector
from core.analysis.impact.economic import EconomicImpactModel, classify_risk
from core.analysis.impact.session import SessionTokens
from core.config import EngineConfig
from core.models import (
    EconomicImpactResult,
    GeoPoint,
    ImpactFactors,
    ImpactScenario,
    LiveReadings,
    MacroEconomicBaseline,
)
from core.terrain.metrics import TerrainMetricsProvider

logger = logging.getLogger(__name__)

BaselineSource = Union[
    MacroEconomicBaseline,
    Callable[[Optional[GeoPoint]], Optional[MacroEconomicBaseline]],
]

# Rainfall contribution to projected flood risk
RAIN_FLOOD_WEIGHT = 0.4
RAIN_PROBABILITY_FLOOD_WEIGHT = 0.2
RAIN_SATURATION_MM = 20.0


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def time_factor(year: int, base_year: int, max_year: int) -> float:
    """Progress from base_year to max_year, clamped to [0, 1]."""
    span = max_year - base_year
    if span <= 0:
        return 0.0
    return _clamp((year - base_year) / span, 0.0, 1.0)


class ImpactOrchestrator:
    """
    Evaluates impact scenarios.

    evaluate() reads no mutable instance state apart from the terrain
    elevation cache, so concurrent calls for different queries are safe.

    Args:
        config: Engine configuration. Uses defaults if None.
        terrain: Optional terrain provider; adds a terrain sample to results
        macro_baseline: A fixed baseline or a callable returning one per location
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        terrain: Optional[TerrainMetricsProvider] = None,
        macro_baseline: Optional[BaselineSource] = None,
    ):
        self.config = config or EngineConfig()
        self.terrain = terrain
        self.macro_baseline = macro_baseline
        self.economic_model = EconomicImpactModel(self.config.economic)
        self.demographic_projector = DemographicProjector(
            self.config.demographic,
            fallback_population=int(self.config.economic.fallback_population),
        )

    def resolve_baseline(self, location: Optional[GeoPoint]) -> MacroEconomicBaseline:
        """Macro baseline for a location; empty when unavailable."""
        source = self.macro_baseline
        if source is None:
            return MacroEconomicBaseline()
        if isinstance(source, MacroEconomicBaseline):
            return source
        try:
            baseline = source(location)
        except Exception as e:
            logger.warning(f"Macro baseline lookup failed, using fallbacks: {e}")
            return MacroEconomicBaseline()
        return baseline or MacroEconomicBaseline()

    def project_factors(
        self,
        year: int,
        base_year: int,
        max_year: int,
        live_readings: Optional[LiveReadings] = None,
    ) -> Tuple[ImpactFactors, float]:
        """
        Risk factors for a year.

        Returns:
            (factors, time_factor)
        """
        sc = self.config.scenario
        tf = time_factor(year, base_year, max_year)

        aqi = _lerp(sc.base_aqi, sc.worst_aqi, tf)
        traffic = _lerp(sc.base_traffic, sc.worst_traffic, tf)
        rainfall = sc.base_rainfall_mm
        rain_probability = sc.base_rain_probability_pct
        flood_risk = None

        # Live readings describe the present; future years stay on the trajectory
        if live_readings is not None and year == base_year:
            if _finite(live_readings.aqi):
                aqi = live_readings.aqi
            if _finite(live_readings.traffic_congestion):
                traffic = live_readings.traffic_congestion
            if _finite(live_readings.rainfall_mm):
                rainfall = live_readings.rainfall_mm
            if _finite(live_readings.rain_probability_pct):
                rain_probability = live_readings.rain_probability_pct
            if _finite(live_readings.flood_risk):
                flood_risk = live_readings.flood_risk

        rainfall = max(0.0, rainfall)
        if flood_risk is None:
            flood_risk = (
                _lerp(sc.base_flood_risk, sc.worst_flood_risk, tf)
                + RAIN_FLOOD_WEIGHT * min(rainfall / RAIN_SATURATION_MM, 1.0)
                + RAIN_PROBABILITY_FLOOD_WEIGHT * _clamp(rain_probability, 0.0, 100.0) / 100
            )

        factors = ImpactFactors(
            aqi=_clamp(aqi, 0.0, AQI_MAX),
            rainfall_mm=rainfall,
            flood_risk=_clamp(flood_risk, 0.0, 1.0),
            traffic_congestion=_clamp(traffic, 0.0, 1.0),
        )
        return factors, tf

    def evaluate(
        self,
        location: Optional[GeoPoint],
        year: int,
        base_year: Optional[int] = None,
        max_year: Optional[int] = None,
        live_readings: Optional[LiveReadings] = None,
        base_population: Optional[float] = None,
        session_token: Optional[int] = None,
    ) -> ImpactScenario:
        """
        Evaluate one (location, year) scenario.

        Args:
            location: Point of interest
            year: Year to evaluate
            base_year: Year of the baseline; config default if None
            max_year: Horizon year; config default if None
            live_readings: Current observations, applied to the base year only
            base_population: Local population in base_year; baseline or
                fallback population if None
            session_token: Token the caller issued for this query

        Returns:
            A new ImpactScenario
        """
        base_year = self.config.scenario.base_year if base_year is None else base_year
        max_year = self.config.scenario.max_year if max_year is None else max_year
        year = base_year if year is None else year

        factors, tf = self.project_factors(year, base_year, max_year, live_readings)
        baseline = self.resolve_baseline(location)

        loss = self.economic_model.compute_loss(factors, baseline)

        if base_population is None and _finite(baseline.population) and baseline.population > 0:
            base_population = baseline.population
        demographic_state = self.demographic_projector.project(
            base_year, year, base_population, loss.economic_loss_cr
        )

        people_affected = self.economic_model.compute_people_affected(
            factors, demographic_state.population
        )
        economic_result = EconomicImpactResult(
            people_affected=people_affected,
            economic_loss_cr=loss.economic_loss_cr,
            breakdown=loss.breakdown,
            impact_factor=loss.impact_factor,
            risk_level=classify_risk(factors.aqi, loss.economic_loss_cr, loss.impact_factor),
        )

        terrain = None
        if self.terrain is not None and location is not None:
            terrain = self.terrain.get_terrain_metrics(location)

        logger.debug(
            f"Evaluated year={year} tf={tf:.3f} loss={loss.economic_loss_cr}Cr "
            f"people={people_affected} population={demographic_state.population}"
        )
        return ImpactScenario(
            location=location,
            year=year,
            base_year=base_year,
            factors=factors,
            economic_result=economic_result,
            demographic_state=demographic_state,
            time_factor=tf,
            terrain=terrain,
            session_token=session_token,
        )


class ImpactSession:
    """
    Last-writer-wins wrapper around an orchestrator.

    submit() stamps each evaluation with a fresh token; publish() only
    forwards a scenario whose token is still the latest.
    """

    def __init__(
        self,
        orchestrator: ImpactOrchestrator,
        tokens: Optional[SessionTokens] = None,
    ):
        self.orchestrator = orchestrator
        self.tokens = tokens or SessionTokens()

    def begin(self) -> int:
        return self.tokens.issue()

    def submit(self, location: Optional[GeoPoint], year: int, **kwargs) -> ImpactScenario:
        token = self.begin()
        return self.orchestrator.evaluate(location, year, session_token=token, **kwargs)

    def publish(
        self,
        scenario: ImpactScenario,
        sink: Callable[[ImpactScenario], None],
    ) -> bool:
        return self.tokens.apply_if_current(scenario.session_token, sink, scenario)
