"""
Shared HTTP helper for the data providers.

Requests are synchronous with an explicit timeout. Any transport error,
non-2xx status or undecodable body becomes a DataUnavailableError, which
each provider catches at its public boundary.
"""

import logging
from typing import Any, Dict, Optional

import requests

from core.exceptions import DataUnavailableError

logger = logging.getLogger(__name__)

USER_AGENT = "UrbanImpactEngine/0.1"


def fetch_json(
    url: str,
    source: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 5.0,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    GET a JSON document.

    Args:
        url: Endpoint URL
        source: Source name used in errors and logs
        params: Query parameters
        timeout: Request timeout in seconds
        session: Optional requests session to reuse connections

    Returns:
        Decoded JSON payload

    Raises:
        DataUnavailableError: On any request or decoding failure
    """
    getter = session.get if session is not None else requests.get
    try:
        response = getter(
            url,
            params=params,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()
    except requests.Timeout as e:
        raise DataUnavailableError(source, f"timed out after {timeout}s") from e
    except requests.RequestException as e:
        raise DataUnavailableError(source, str(e)) from e
    except ValueError as e:
        raise DataUnavailableError(source, f"invalid JSON: {e}") from e
