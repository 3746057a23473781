"""
Urban Impact Engine core.

Turns terrain, weather, traffic and air-quality inputs into a flood
extent grid, an economic loss estimate, an affected-population count and
a demographic trajectory.

Packages:
    - terrain: Elevation cache and terrain metrics
    - air_quality: PM2.5 to AQI conversion
    - analysis.flood: Flood spread grid and animation
    - analysis.impact: Economic, demographic and orchestration models
    - data.providers: Fail-soft clients for external data sources
"""

__version__ = "0.1.0"
