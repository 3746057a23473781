"""
AQI Command - Convert a PM2.5 concentration to the US AQI.

Usage:
    urbanimpact aqi 42.5
"""

import click

from core.air_quality.aqi import aqi_category, pm25_to_aqi


@click.command("aqi")
@click.argument("pm25", type=float)
def aqi(pm25: float):
    """
    Convert PM25 (ug/m3) to an AQI value and category.
    """
    value = pm25_to_aqi(pm25)
    click.echo(f"AQI: {value} ({aqi_category(value)})")
