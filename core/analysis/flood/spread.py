"""
Flood Spread Simulator

Builds a square grid of cells around a center point and estimates water
depth per cell from rainfall, elevation and drainage. An animation run
raises a depth multiplier one tick at a time so the flooded area grows
until the multiplier reaches the maximum depth.

Depth model (per cell):
    rain_factor = min(effective_rainfall_mm / 20, 1)
    depth = max(0, 4 * rain_factor - 0.02 * elevation) * max(drainage, 0.1)

Cells with no standing water are left out of the output. Ground below
sea level holds water even when no rain has fallen.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

import numpy as np

from core.config import FloodConfig
from core.models import CellList, FloodCell, FloodGridState, GeoPoint
from core.terrain.metrics import TerrainMetricsProvider

logger = logging.getLogger(__name__)

CellSink = Callable[[CellList], None]

RAIN_SATURATION_MM = 20.0
MIN_DRAINAGE = 0.1


@dataclass(frozen=True)
class GridParams:
    """Grid resolution in degrees."""

    step: float
    radius: float


def zoom_to_grid_params(zoom: float) -> GridParams:
    """
    Grid resolution for a map zoom level.

    Close zooms get a finer step over a smaller area to keep the cell
    count bounded.
    """
    step = 0.002 if zoom > 14 else 0.004
    radius = 0.006 if zoom > 15 else 0.012
    return GridParams(step=step, radius=radius)


def cell_depth(rain_factor: float, elevation: float, drainage: float) -> float:
    """Unclamped water depth (m) for one cell."""
    return max(0.0, rain_factor * 4 - elevation * 0.02) * max(drainage, MIN_DRAINAGE)


def grid_offsets(params: GridParams) -> np.ndarray:
    """Symmetric offsets from -radius to +radius in whole steps."""
    n = int(round(params.radius / params.step))
    return np.arange(-n, n + 1) * params.step


def cell_polygon(lat: float, lng: float, step: float):
    return (
        GeoPoint(lat=lat, lng=lng),
        GeoPoint(lat=lat, lng=lng + step),
        GeoPoint(lat=lat + step, lng=lng + step),
        GeoPoint(lat=lat + step, lng=lng),
    )


def advance(state: FloodGridState, increment: float, max_depth: float) -> FloodGridState:
    """One animation tick: raise the depth multiplier, never past max_depth."""
    multiplier = min(max_depth, state.depth_multiplier + increment)
    return replace(state, depth_multiplier=multiplier)


class FloodSpreadSimulator:
    """
    Tick-driven flood animation over an adaptive grid.

    One run at a time per instance. Starting a run cancels the previous
    one; every tick carries the id of the run that scheduled it and is
    dropped if that run is no longer current.

    Args:
        terrain: Terrain metrics used for per-cell elevation and drainage
        scheduler: Object exposing schedule(callback) and cancel(handle)
        sink: Receives the cell list after every tick and on stop
        config: Animation settings. Uses defaults if None.
    """

    def __init__(
        self,
        terrain: TerrainMetricsProvider,
        scheduler,
        sink: Optional[CellSink] = None,
        config: Optional[FloodConfig] = None,
    ):
        self.terrain = terrain
        self.scheduler = scheduler
        self.sink = sink
        self.config = config or FloodConfig()
        self._lock = threading.RLock()
        self._run_id = 0
        self._handle = None
        self._state: Optional[FloodGridState] = None
        self._cells: List[FloodCell] = []

    @property
    def state(self) -> Optional[FloodGridState]:
        with self._lock:
            return self._state

    @property
    def cells(self) -> List[FloodCell]:
        """The most recently published cell list."""
        with self._lock:
            return list(self._cells)

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._handle is not None

    def build_flood_cells(
        self,
        center: GeoPoint,
        effective_rainfall_mm: float,
        zoom: Optional[float] = None,
    ) -> List[FloodCell]:
        """
        Compute flooded cells around center for the given rainfall.

        Args:
            center: Grid center
            effective_rainfall_mm: Rainfall already scaled by the depth multiplier
            zoom: Map zoom; selects grid step and radius

        Returns:
            Flooded cells ordered by longitude, then latitude
        """
        if center is None:
            return []
        zoom = self.config.default_zoom if zoom is None else zoom
        params = zoom_to_grid_params(zoom)
        rain_factor = min(max(effective_rainfall_mm, 0.0) / RAIN_SATURATION_MM, 1.0)

        offsets = grid_offsets(params)
        cells = []
        for dx in offsets:
            lng = center.lng + float(dx)
            for dy in offsets:
                lat = center.lat + float(dy)
                sample = self.terrain.get_terrain_metrics(GeoPoint(lat=lat, lng=lng))
                depth = cell_depth(rain_factor, sample.elevation, sample.drainage)
                if depth <= 0:
                    continue
                cells.append(
                    FloodCell(
                        polygon=cell_polygon(lat, lng, params.step),
                        depth=min(depth, self.config.max_depth),
                    )
                )
        return cells

    def start_flood_simulation(
        self,
        center: GeoPoint,
        rainfall_mm: float,
        zoom: Optional[float] = None,
    ) -> Optional[int]:
        """
        Begin a new animation run, cancelling any run in flight.

        Returns:
            The run id, or None when there is nothing to animate
        """
        with self._lock:
            self._cancel_pending()
            self._run_id += 1
            run_id = self._run_id

            if center is None or not rainfall_mm or rainfall_mm <= 0:
                self._state = None
                logger.debug("No rainfall, flood simulation not started")
                return None

            zoom = self.config.default_zoom if zoom is None else zoom
            params = zoom_to_grid_params(zoom)
            self._state = FloodGridState(
                center=center,
                radius=params.radius,
                step=params.step,
                zoom=zoom,
                rainfall_mm=rainfall_mm,
                depth_multiplier=0.0,
            )
            self._handle = self.scheduler.schedule(lambda: self._tick(run_id))
            logger.info(
                f"Flood simulation {run_id} started at ({center.lat:.5f}, {center.lng:.5f}), "
                f"rainfall={rainfall_mm}mm, step={params.step}, radius={params.radius}"
            )
            return run_id

    def stop_flood_simulation(self) -> None:
        """Cancel the pending tick and publish an empty cell list."""
        with self._lock:
            self._cancel_pending()
            self._run_id += 1
            self._state = None
            self._publish([])

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def _tick(self, run_id: int) -> None:
        with self._lock:
            if run_id != self._run_id or self._state is None:
                logger.debug(f"Dropping tick from superseded flood run {run_id}")
                return
            state = advance(self._state, self.config.depth_increment, self.config.max_depth)

        cells = self.build_flood_cells(state.center, state.effective_rainfall_mm, state.zoom)

        with self._lock:
            if run_id != self._run_id:
                logger.debug(f"Discarding cells from superseded flood run {run_id}")
                return
            self._state = replace(state, cells=tuple(cells))
            if state.depth_multiplier < self.config.max_depth:
                self._handle = self.scheduler.schedule(lambda: self._tick(run_id))
            else:
                self._handle = None
                logger.info(
                    f"Flood simulation {run_id} reached max depth with {len(cells)} cells"
                )
            self._publish(cells)

    def _publish(self, cells: CellList) -> None:
        self._cells = list(cells)
        if self.sink is None:
            return
        try:
            self.sink(list(cells))
        except Exception:
            # Sink errors never interrupt tick scheduling
            logger.exception("Flood cell sink failed")
