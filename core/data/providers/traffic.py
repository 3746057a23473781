"""
Traffic congestion from the TomTom flow-segment API.

congestion = clamp(1 - current_speed / free_flow_speed, 0, 1)
"""

import logging
from typing import Optional

import requests

from core.data.providers.base import fetch_json
from core.exceptions import DataUnavailableError
from core.models import GeoPoint

logger = logging.getLogger(__name__)

TOMTOM_FLOW_URL = (
    "https://api.tomtom.com/traffic/services/4/flowSegmentData/absolute/10/json"
)


def congestion_from_flow(current_speed: float, free_flow_speed: float) -> Optional[float]:
    if not free_flow_speed or free_flow_speed <= 0 or current_speed is None:
        return None
    return min(1.0, max(0.0, 1.0 - current_speed / free_flow_speed))


class TomTomTrafficClient:
    """Congestion in [0, 1], or None without a key or on failure."""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 5.0,
        url: str = TOMTOM_FLOW_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.url = url
        self.session = session

    def __call__(self, point: GeoPoint) -> Optional[float]:
        if not self.api_key:
            return None
        try:
            payload = fetch_json(
                self.url,
                "tomtom-traffic",
                params={"key": self.api_key, "point": f"{point.lat},{point.lng}"},
                timeout=self.timeout,
                session=self.session,
            )
        except DataUnavailableError as e:
            logger.warning(f"Traffic fetch failed: {e}")
            return None

        flow = payload.get("flowSegmentData") if isinstance(payload, dict) else None
        if not flow:
            return None
        return congestion_from_flow(flow.get("currentSpeed"), flow.get("freeFlowSpeed"))
