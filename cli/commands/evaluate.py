"""
Evaluate Command - Economic and demographic impact for a location and year.

Usage:
    urbanimpact evaluate --lat 28.61 --lng 77.21 --year 2032
    urbanimpact evaluate --lat 28.61 --lng 77.21 --year 2025 --aqi 180 --rainfall 12 --json
"""

import json
import logging
from typing import Optional

import click

from core.analysis.impact.orchestrator import ImpactOrchestrator
from core.exceptions import ConfigurationError
from core.models import GeoPoint, LiveReadings, MacroEconomicBaseline

logger = logging.getLogger("urbanimpact.evaluate")


@click.command("evaluate")
@click.option("--lat", type=float, required=True, help="Latitude (decimal degrees).")
@click.option("--lng", type=float, required=True, help="Longitude (decimal degrees).")
@click.option("--year", type=int, required=True, help="Year to evaluate.")
@click.option("--base-year", type=int, default=None, help="Baseline year (default from config).")
@click.option("--max-year", type=int, default=None, help="Horizon year (default from config).")
@click.option("--aqi", type=float, default=None, help="Live AQI for the base year.")
@click.option("--rainfall", type=float, default=None, help="Live rainfall (mm) for the base year.")
@click.option(
    "--rain-probability",
    type=float,
    default=None,
    help="Live precipitation probability (%) for the base year.",
)
@click.option("--traffic", type=float, default=None, help="Live congestion (0-1) for the base year.")
@click.option("--flood-risk", type=float, default=None, help="Live flood risk (0-1) for the base year.")
@click.option("--population", type=int, default=None, help="Local population in the base year.")
@click.option("--gdp-per-capita", type=float, default=None, help="GDP per capita (USD).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the scenario as JSON.")
@click.pass_obj
def evaluate(
    ctx,
    lat: float,
    lng: float,
    year: int,
    base_year: Optional[int],
    max_year: Optional[int],
    aqi: Optional[float],
    rainfall: Optional[float],
    rain_probability: Optional[float],
    traffic: Optional[float],
    flood_risk: Optional[float],
    population: Optional[int],
    gdp_per_capita: Optional[float],
    as_json: bool,
):
    """
    Evaluate the impact scenario for a location and year.
    """
    try:
        config = ctx.config
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    orchestrator = ImpactOrchestrator(
        config=config,
        macro_baseline=MacroEconomicBaseline(gdp_per_capita=gdp_per_capita),
    )
    live = LiveReadings(
        aqi=aqi,
        rainfall_mm=rainfall,
        rain_probability_pct=rain_probability,
        traffic_congestion=traffic,
        flood_risk=flood_risk,
    )
    scenario = orchestrator.evaluate(
        GeoPoint(lat=lat, lng=lng),
        year,
        base_year=base_year,
        max_year=max_year,
        live_readings=live,
        base_population=population,
    )

    if as_json:
        click.echo(json.dumps(scenario.to_dict(), indent=2))
        return

    factors = scenario.factors
    econ = scenario.economic_result
    demo = scenario.demographic_state

    click.echo(f"\n=== Impact Scenario: ({lat:.4f}, {lng:.4f}) in {scenario.year} ===")
    click.echo(f"  Time factor: {scenario.time_factor:.2f} (base year {scenario.base_year})")
    click.echo("\n--- Factors ---")
    click.echo(f"  AQI: {factors.aqi:.0f}")
    click.echo(f"  Rainfall: {factors.rainfall_mm:.1f} mm")
    click.echo(f"  Flood risk: {factors.flood_risk:.2f}")
    click.echo(f"  Traffic congestion: {factors.traffic_congestion:.2f}")
    click.echo("\n--- Economic Impact ---")
    click.echo(f"  Economic loss: Rs {econ.economic_loss_cr:,.2f} Cr/day")
    click.echo(f"  People affected: {econ.people_affected:,}")
    click.echo(f"  Risk level: {econ.risk_level}")
    click.echo("\n--- Demographics ---")
    click.echo(f"  Population: {demo.population:,} ({demo.absolute_growth:+,})")
    click.echo(f"  Growth rate: {demo.growth_rate_pct:.2f}%")
    click.echo(f"  TFR: {demo.tfr:.2f}")
    click.echo(f"  Migration share: {demo.migration_share_pct:.0f}%")
    click.echo()
