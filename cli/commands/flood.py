"""
Flood Command - Run a flood spread animation to completion.

The animation runs on a host-pumped frame scheduler over a constant
elevation surface, so no terrain service is needed.

Usage:
    urbanimpact flood --lat 28.61 --lng 77.21 --rainfall 30
    urbanimpact flood --lat 28.61 --lng 77.21 --rainfall 30 --zoom 16 --elevation 40
"""

import logging
from typing import List, Optional

import click

from core.analysis.flood.scheduler import FrameScheduler
from core.analysis.flood.spread import FloodSpreadSimulator, zoom_to_grid_params
from core.data.providers.elevation import ConstantElevationSource
from core.exceptions import ConfigurationError
from core.models import FloodCell, GeoPoint
from core.terrain.metrics import TerrainMetricsProvider

logger = logging.getLogger("urbanimpact.flood")


@click.command("flood")
@click.option("--lat", type=float, required=True, help="Latitude of the grid center.")
@click.option("--lng", type=float, required=True, help="Longitude of the grid center.")
@click.option("--rainfall", type=float, required=True, help="Rainfall in mm.")
@click.option("--zoom", type=float, default=None, help="Map zoom level (default from config).")
@click.option("--elevation", type=float, default=0.0, help="Constant terrain elevation (m).")
@click.option("--every", type=int, default=25, help="Print a summary every N ticks (0 = final only).")
@click.pass_obj
def flood(
    ctx,
    lat: float,
    lng: float,
    rainfall: float,
    zoom: Optional[float],
    elevation: float,
    every: int,
):
    """
    Animate rising flood depth around a point and summarize each tick.
    """
    try:
        config = ctx.config
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    terrain = TerrainMetricsProvider(ConstantElevationSource(elevation), config.terrain)
    scheduler = FrameScheduler()
    snapshots: List[List[FloodCell]] = []

    simulator = FloodSpreadSimulator(terrain, scheduler, sink=snapshots.append, config=config.flood)
    zoom = config.flood.default_zoom if zoom is None else zoom
    params = zoom_to_grid_params(zoom)

    click.echo(f"\n=== Flood Simulation: ({lat:.4f}, {lng:.4f}) ===")
    click.echo(f"  Rainfall: {rainfall} mm, zoom {zoom} (step {params.step}, radius {params.radius})")

    run_id = simulator.start_flood_simulation(GeoPoint(lat=lat, lng=lng), rainfall, zoom)
    if run_id is None:
        click.echo("  No rainfall, nothing to simulate.")
        return

    tick = 0
    while scheduler.pending:
        scheduler.run_frame()
        tick += 1
        if every and tick % every == 0 and snapshots:
            _echo_tick(tick, simulator.state.depth_multiplier, snapshots[-1])

    cells = snapshots[-1] if snapshots else []
    click.echo(f"\n  Finished after {tick} ticks")
    _echo_tick(tick, config.flood.max_depth, cells)
    click.echo()


def _echo_tick(tick: int, multiplier: float, cells: List[FloodCell]) -> None:
    max_depth = max((c.depth for c in cells), default=0.0)
    click.echo(
        f"  tick {tick:4d}  multiplier {multiplier:4.2f}  "
        f"cells {len(cells):4d}  max depth {max_depth:.2f} m"
    )
