"""
Session tokens for discarding superseded results.

Each query takes a new token. Before a result is applied to anything
externally visible, its captured token is compared with the latest one
and the result is dropped on mismatch.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class SessionTokens:
    """Monotonically increasing token counter."""

    def __init__(self):
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def issue(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: Optional[int]) -> bool:
        with self._lock:
            return token is not None and token == self._latest

    def apply_if_current(self, token: int, fn: Callable[..., Any], *args, **kwargs) -> bool:
        """
        Call fn only if token is still the latest.

        Returns:
            True if fn ran, False if the result was stale and dropped
        """
        if not self.is_current(token):
            logger.debug(f"Discarding stale result for token {token} (latest {self.latest})")
            return False
        fn(*args, **kwargs)
        return True
