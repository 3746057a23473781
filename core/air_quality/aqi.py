"""
PM2.5 to US AQI conversion (EPA piecewise-linear breakpoints).

Pure functions; the conversion never fails for finite non-negative
input. NaN and negative concentrations are treated as 0.
"""

import math
from typing import List, Tuple

AQI_MAX = 500

# (concentration low, concentration high, index low, index high)
PM25_BREAKPOINTS: List[Tuple[float, float, float, float]] = [
    (0.0, 12.0, 0.0, 50.0),
    (12.0, 35.4, 50.0, 100.0),
    (35.4, 55.4, 100.0, 150.0),
    (55.4, 150.4, 150.0, 200.0),
    (150.4, 250.4, 200.0, 300.0),
    (250.4, 500.4, 300.0, 500.0),
]

AQI_CATEGORIES: List[Tuple[int, str]] = [
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy (Sensitive)"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
]


def pm25_to_aqi(pm25: float) -> int:
    """
    Convert a PM2.5 concentration (ug/m3) to an AQI in [0, 500].

    Interpolates linearly inside the breakpoint band containing pm25;
    concentrations beyond the table cap at 500.
    """
    if pm25 is None or math.isnan(pm25) or pm25 <= 0:
        return 0
    if math.isinf(pm25):
        return AQI_MAX

    if pm25 <= PM25_BREAKPOINTS[0][1]:
        aqi = pm25 / 12 * 50
    else:
        # Past the last band the final segment is extrapolated and capped
        for c_low, c_high, i_low, i_high in PM25_BREAKPOINTS[1:]:
            if pm25 <= c_high:
                break
        aqi = i_low + (pm25 - c_low) / (c_high - c_low) * (i_high - i_low)

    return int(min(AQI_MAX, max(0, round(aqi))))


def aqi_category(aqi: float) -> str:
    """Human-readable AQI band label."""
    for upper, label in AQI_CATEGORIES:
        if aqi <= upper:
            return label
    return "Hazardous"
