"""
Pytest configuration and fixtures for urban impact engine tests.

Markers:
    @pytest.mark.flood - Flood spread tests
    @pytest.mark.terrain - Terrain metrics and elevation cache tests
    @pytest.mark.aqi - Air quality conversion tests
    @pytest.mark.economic - Economic impact model tests
    @pytest.mark.demographic - Population projection tests
    @pytest.mark.provider - External data provider tests
    @pytest.mark.cli - Command-line tests
    @pytest.mark.slow - Tests that take longer to run

Usage:
    pytest -m flood              # Run only flood tests
    pytest -m "not slow"         # Skip slow tests
    pytest -m provider           # Run provider tests
"""

import pytest
import sys
from pathlib import Path
from typing import List

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.analysis.flood.scheduler import FrameScheduler
from core.data.providers.elevation import ConstantElevationSource
from core.models import FloodCell, GeoPoint
from core.terrain.metrics import TerrainMetricsProvider


FILE_MARKERS = {
    "flood": "flood",
    "terrain": "terrain",
    "aqi": "aqi",
    "economic": "economic",
    "demographic": "demographic",
    "provider": "provider",
    "cli": "cli",
}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "flood: Flood spread tests")
    config.addinivalue_line("markers", "terrain: Terrain metrics tests")
    config.addinivalue_line("markers", "aqi: Air quality conversion tests")
    config.addinivalue_line("markers", "economic: Economic impact tests")
    config.addinivalue_line("markers", "demographic: Demographic projection tests")
    config.addinivalue_line("markers", "provider: Data provider tests")
    config.addinivalue_line("markers", "cli: Command-line tests")
    config.addinivalue_line("markers", "slow: Slow-running tests")


def pytest_collection_modifyitems(config, items):
    """Auto-apply markers based on test file names and test names."""
    for item in items:
        basename = item.fspath.basename
        for fragment, marker in FILE_MARKERS.items():
            if fragment in basename:
                item.add_marker(getattr(pytest.mark, marker))

        test_name = item.name.lower()
        if "flood" in test_name and not item.get_closest_marker("flood"):
            item.add_marker(pytest.mark.flood)
        if "large" in test_name or "stress" in test_name or "concurrent" in test_name:
            item.add_marker(pytest.mark.slow)


class RecordingSink:
    """Collects every cell list the simulator publishes."""

    def __init__(self):
        self.snapshots: List[List[FloodCell]] = []

    def __call__(self, cells: List[FloodCell]) -> None:
        self.snapshots.append(cells)

    @property
    def last(self) -> List[FloodCell]:
        return self.snapshots[-1] if self.snapshots else []


@pytest.fixture
def delhi():
    """A point in central Delhi."""
    return GeoPoint(lat=28.6139, lng=77.2090)


@pytest.fixture
def flat_terrain():
    """Terrain provider over flat ground at sea level."""
    return TerrainMetricsProvider(ConstantElevationSource(0.0))


@pytest.fixture
def frame_scheduler():
    return FrameScheduler()


@pytest.fixture
def recording_sink():
    return RecordingSink()
