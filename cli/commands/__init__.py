"""
Urban Impact CLI Commands

Commands:
    evaluate - Economic and demographic impact for a location and year
    aqi      - Convert PM2.5 to AQI
    flood    - Run a flood spread animation
"""

from cli.commands import aqi, evaluate, flood

__all__ = ["aqi", "evaluate", "flood"]
