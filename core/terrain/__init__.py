"""
Terrain metrics: elevation caching and the slope, drainage and heat
approximations derived from it.

Modules:
    - cache: Rounded-coordinate elevation cache
    - metrics: TerrainMetricsProvider
"""
