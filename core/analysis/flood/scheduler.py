"""
Frame schedulers for the flood animation.

The simulator only needs schedule(callback) -> handle and cancel(handle);
the host owns the cadence. FrameScheduler is pumped explicitly by the
host loop (and by tests). ThreadedScheduler fires callbacks from a timer
thread at a fixed frame interval.
"""

import itertools
import logging
import threading
from collections import OrderedDict
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler:
    """
    Host-pumped scheduler, the equivalent of an animation-frame queue.

    Callbacks scheduled while a frame runs are deferred to the next frame.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._pending: "OrderedDict[int, FrameCallback]" = OrderedDict()
        self._lock = threading.Lock()
        self.frames_run = 0

    def schedule(self, callback: FrameCallback) -> int:
        with self._lock:
            handle = next(self._ids)
            self._pending[handle] = callback
            return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        with self._lock:
            self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def run_frame(self) -> int:
        """Run the callbacks queued before this call. Returns how many ran."""
        with self._lock:
            batch = list(self._pending.items())
            self._pending.clear()
        ran = 0
        for _, callback in batch:
            callback()
            ran += 1
        if ran:
            self.frames_run += 1
        return ran

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Pump frames until nothing is pending. Returns frames run."""
        frames = 0
        while self.pending and frames < max_frames:
            self.run_frame()
            frames += 1
        if self.pending:
            logger.warning(f"Scheduler still busy after {max_frames} frames")
        return frames


class ThreadedScheduler:
    """
    Fires each scheduled callback once on a timer thread after
    frame_interval_s seconds.
    """

    def __init__(self, frame_interval_s: float = 1.0 / 60.0):
        if frame_interval_s <= 0:
            raise ValueError(f"frame_interval_s must be positive, got {frame_interval_s}")
        self.frame_interval_s = frame_interval_s
        self._ids = itertools.count(1)
        self._timers: Dict[int, threading.Timer] = {}
        self._lock = threading.Lock()

    def schedule(self, callback: FrameCallback) -> int:
        with self._lock:
            handle = next(self._ids)
            timer = threading.Timer(self.frame_interval_s, self._fire, args=(handle, callback))
            timer.daemon = True
            self._timers[handle] = timer
        timer.start()
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is None:
            return
        with self._lock:
            timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def shutdown(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def _fire(self, handle: int, callback: FrameCallback) -> None:
        with self._lock:
            if self._timers.pop(handle, None) is None:
                return
        try:
            callback()
        except Exception:
            logger.exception("Scheduled frame callback failed")
