"""
Flood spread simulation.

Modules:
    - spread: Adaptive flood grid and the tick-driven FloodSpreadSimulator
    - scheduler: Host-side frame schedulers for the animation
"""

from core.analysis.flood.scheduler import FrameScheduler, ThreadedScheduler
from core.analysis.flood.spread import (
    FloodSpreadSimulator,
    GridParams,
    advance,
    cell_depth,
    zoom_to_grid_params,
)

__all__ = [
    "FloodSpreadSimulator",
    "FrameScheduler",
    "GridParams",
    "ThreadedScheduler",
    "advance",
    "cell_depth",
    "zoom_to_grid_params",
]
