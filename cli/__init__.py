"""
Urban Impact CLI Package

Command-line interface for the environmental-economic impact engine.

Usage:
    urbanimpact evaluate --lat 28.61 --lng 77.21 --year 2032
    urbanimpact aqi 42.5
    urbanimpact flood --lat 28.61 --lng 77.21 --rainfall 30
"""

__version__ = "0.1.0"

from cli.main import app

__all__ = ["app", "__version__"]
