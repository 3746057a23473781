"""
Tests for the impact orchestrator and session tokens.
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.analysis.impact import (
    ImpactOrchestrator,
    ImpactSession,
    SessionTokens,
    time_factor,
)
from core.config import EngineConfig, ScenarioConfig
from core.data.providers.elevation import ConstantElevationSource
from core.models import GeoPoint, LiveReadings, MacroEconomicBaseline
from core.terrain.metrics import TerrainMetricsProvider


@pytest.fixture
def orchestrator():
    return ImpactOrchestrator()


class TestTimeFactor:
    """Tests for time_factor."""

    def test_range(self):
        assert time_factor(2025, 2025, 2040) == 0.0
        assert time_factor(2040, 2025, 2040) == 1.0
        assert time_factor(2030, 2025, 2040) == pytest.approx(1 / 3)

    def test_clamped(self):
        assert time_factor(2010, 2025, 2040) == 0.0
        assert time_factor(2060, 2025, 2040) == 1.0

    def test_zero_span(self):
        assert time_factor(2030, 2025, 2025) == 0.0


class TestEvaluate:
    """Tests for ImpactOrchestrator.evaluate."""

    def test_base_year_reference_values(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2025)
        assert scenario.factors.aqi == 90
        assert scenario.factors.rainfall_mm == 0
        assert scenario.factors.flood_risk == pytest.approx(0.25)
        assert scenario.factors.traffic_congestion == pytest.approx(0.35)
        assert scenario.economic_result.economic_loss_cr == 233.01
        assert scenario.economic_result.people_affected == 1_010_430
        assert scenario.economic_result.risk_level == "Low"
        assert scenario.demographic_state.population == 20_000_000
        assert scenario.time_factor == 0.0

    def test_future_year_projection(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2030)
        assert scenario.time_factor == pytest.approx(1 / 3)
        assert scenario.factors.aqi == pytest.approx(90 + 310 / 3)
        assert scenario.factors.flood_risk == pytest.approx(0.5)
        assert scenario.economic_result.risk_level == "Moderate"
        assert scenario.demographic_state.population > 20_000_000

    def test_horizon_is_worst_case(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2040)
        assert scenario.factors.aqi == 400
        assert scenario.factors.flood_risk == 1.0
        assert scenario.factors.traffic_congestion == 1.0
        assert scenario.economic_result.risk_level == "Severe"

    def test_loss_grows_over_time(self, orchestrator, delhi):
        losses = [
            orchestrator.evaluate(delhi, y).economic_result.economic_loss_cr
            for y in range(2025, 2041)
        ]
        assert all(b >= a for a, b in zip(losses, losses[1:]))

    def test_live_readings_apply_in_base_year(self, orchestrator, delhi):
        live = LiveReadings(aqi=180, traffic_congestion=0.8)
        scenario = orchestrator.evaluate(delhi, 2025, live_readings=live)
        assert scenario.factors.aqi == 180
        assert scenario.factors.traffic_congestion == 0.8

    def test_live_readings_ignored_for_future(self, orchestrator, delhi):
        live = LiveReadings(aqi=480, traffic_congestion=0.0, flood_risk=0.0)
        with_live = orchestrator.evaluate(delhi, 2032, live_readings=live)
        without = orchestrator.evaluate(delhi, 2032)
        assert with_live.factors == without.factors

    def test_live_rainfall_raises_flood_risk(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2025, live_readings=LiveReadings(rainfall_mm=10))
        assert scenario.factors.flood_risk == pytest.approx(0.45)
        assert scenario.factors.rainfall_mm == 10

    def test_rain_probability_raises_flood_risk(self, orchestrator, delhi):
        live = LiveReadings(rain_probability_pct=50)
        scenario = orchestrator.evaluate(delhi, 2025, live_readings=live)
        assert scenario.factors.flood_risk == pytest.approx(0.35)

    def test_live_flood_risk_used_directly(self, orchestrator, delhi):
        live = LiveReadings(rainfall_mm=40, flood_risk=0.1)
        scenario = orchestrator.evaluate(delhi, 2025, live_readings=live)
        assert scenario.factors.flood_risk == pytest.approx(0.1)

    def test_non_finite_live_values_ignored(self, orchestrator, delhi):
        live = LiveReadings(aqi=float("nan"), traffic_congestion=float("inf"))
        scenario = orchestrator.evaluate(delhi, 2025, live_readings=live)
        assert scenario.factors.aqi == 90
        assert scenario.factors.traffic_congestion == pytest.approx(0.35)

    def test_factors_clamped(self, orchestrator, delhi):
        live = LiveReadings(aqi=900, traffic_congestion=4.0, flood_risk=-1, rainfall_mm=-5)
        factors = orchestrator.evaluate(delhi, 2025, live_readings=live).factors
        assert factors.aqi == 500
        assert factors.traffic_congestion == 1.0
        assert factors.flood_risk == 0.0
        assert factors.rainfall_mm == 0.0

    def test_collapsed_horizon(self, delhi):
        config = EngineConfig(scenario=ScenarioConfig(base_year=2025, max_year=2025))
        scenario = ImpactOrchestrator(config).evaluate(delhi, 2030)
        assert scenario.time_factor == 0.0
        assert scenario.factors.aqi == 90

    def test_macro_baseline_population(self, delhi):
        baseline = MacroEconomicBaseline(gdp_per_capita=2500, population=1_000_000)
        scenario = ImpactOrchestrator(macro_baseline=baseline).evaluate(delhi, 2026)
        assert scenario.demographic_state.population > 1_000_000
        assert scenario.demographic_state.population < 1_030_000

    def test_explicit_population_wins(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2025, base_population=3_000_000)
        assert scenario.demographic_state.population == 3_000_000

    @pytest.mark.parametrize("population", [float("nan"), float("inf"), 0.4])
    def test_unusable_explicit_population_falls_back(self, orchestrator, delhi, population):
        scenario = orchestrator.evaluate(delhi, 2025, base_population=population)
        assert scenario.demographic_state.population == 20_000_000
        assert scenario.economic_result.people_affected == 1_010_430

    @pytest.mark.parametrize("population", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_baseline_population_falls_back(self, delhi, population):
        baseline = MacroEconomicBaseline(population=population)
        scenario = ImpactOrchestrator(macro_baseline=baseline).evaluate(delhi, 2025)
        assert scenario.demographic_state.population == 20_000_000
        assert scenario.economic_result.economic_loss_cr == 233.01

    def test_failing_baseline_source_falls_back(self, delhi):
        def broken(location):
            raise ConnectionError("indicator service down")

        scenario = ImpactOrchestrator(macro_baseline=broken).evaluate(delhi, 2025)
        assert scenario.economic_result.economic_loss_cr == 233.01

    def test_callable_baseline_receives_location(self, delhi):
        seen = []

        def source(location):
            seen.append(location)
            return MacroEconomicBaseline(gdp_per_capita=5000)

        scenario = ImpactOrchestrator(macro_baseline=source).evaluate(delhi, 2025)
        assert seen == [delhi]
        assert scenario.economic_result.economic_loss_cr == pytest.approx(466.03, abs=0.01)

    def test_terrain_sample_attached(self, delhi):
        terrain = TerrainMetricsProvider(ConstantElevationSource(215.0))
        scenario = ImpactOrchestrator(terrain=terrain).evaluate(delhi, 2025)
        assert scenario.terrain is not None
        assert scenario.terrain.elevation == 215.0
        assert scenario.terrain.drainage == 1.0

    def test_no_terrain_by_default(self, orchestrator, delhi):
        assert orchestrator.evaluate(delhi, 2025).terrain is None

    def test_scenario_is_immutable(self, orchestrator, delhi):
        scenario = orchestrator.evaluate(delhi, 2025)
        with pytest.raises(dataclasses.FrozenInstanceError):
            scenario.year = 2030

    def test_to_dict(self, orchestrator, delhi):
        data = orchestrator.evaluate(delhi, 2025, session_token=7).to_dict()
        assert data["location"] == {"lat": 28.6139, "lng": 77.2090}
        assert data["economic_result"]["economic_loss_cr"] == 233.01
        assert data["session_token"] == 7
        assert data["terrain"] is None

    def test_concurrent_evaluations_independent(self, orchestrator, delhi):
        years = list(range(2025, 2041)) * 4
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda y: orchestrator.evaluate(delhi, y), years))

        expected = {y: orchestrator.evaluate(delhi, y) for y in range(2025, 2041)}
        for year, scenario in zip(years, results):
            assert scenario == expected[year]


class TestSession:
    """Tests for SessionTokens and ImpactSession."""

    def test_tokens_increase(self):
        tokens = SessionTokens()
        first, second = tokens.issue(), tokens.issue()
        assert second > first
        assert tokens.is_current(second)
        assert not tokens.is_current(first)
        assert not tokens.is_current(None)

    def test_apply_if_current(self):
        tokens = SessionTokens()
        applied = []
        stale = tokens.issue()
        current = tokens.issue()
        assert not tokens.apply_if_current(stale, applied.append, "stale")
        assert tokens.apply_if_current(current, applied.append, "current")
        assert applied == ["current"]

    def test_latest_result_wins(self, orchestrator, delhi):
        session = ImpactSession(orchestrator)
        published = []

        older = session.submit(delhi, 2030)
        newer = session.submit(delhi, 2035)

        # The older evaluation finishes last and must not overwrite
        assert session.publish(newer, published.append)
        assert not session.publish(older, published.append)
        assert published == [newer]

    def test_session_token_stamped(self, orchestrator, delhi):
        session = ImpactSession(orchestrator)
        scenario = session.submit(delhi, 2025)
        assert scenario.session_token == session.tokens.latest

    def test_concurrent_submissions_publish_once(self, orchestrator, delhi):
        session = ImpactSession(orchestrator)
        with ThreadPoolExecutor(max_workers=4) as pool:
            scenarios = list(pool.map(lambda y: session.submit(delhi, y), range(2025, 2033)))

        published = []
        for scenario in scenarios:
            session.publish(scenario, published.append)
        assert len(published) == 1
        assert published[0].session_token == session.tokens.latest
