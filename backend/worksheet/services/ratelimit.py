import threading
import time
from collections import deque
from typing import Callable, Deque, Dict


class RateLimiter:
    """Per-key sliding window limiter held in process memory.

    Each key keeps the instants of its accepted requests inside the trailing
    ``window_sec``. Rejected requests are not recorded. Keys whose window has
    emptied are swept every ``sweep_every`` calls.
    """

    def __init__(self, max_requests: int, window_sec: float,
                 clock: Callable[[], float] = time.monotonic, sweep_every: int = 1000):
        if max_requests < 1:
            raise ValueError('max_requests must be positive')
        self.max_requests = max_requests
        self.window_sec = window_sec
        self.clock = clock
        self.sweep_every = sweep_every
        self._hits: Dict[str, Deque[float]] = {}
        self._calls = 0
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self.clock()
            self._calls += 1
            if self.sweep_every and self._calls % self.sweep_every == 0:
                self._sweep_locked(now)
            hits = self._hits.get(key)
            if hits is None:
                hits = self._hits[key] = deque()
            self._prune(hits, now)
            if len(hits) >= self.max_requests:
                return False
            hits.append(now)
            return True

    def retry_after(self, key: str) -> float:
        """Seconds until ``key`` may be accepted again (0 if it may now)."""
        with self._lock:
            now = self.clock()
            hits = self._hits.get(key)
            if not hits:
                return 0.0
            self._prune(hits, now)
            if len(hits) < self.max_requests:
                return 0.0
            return max(0.0, hits[0] + self.window_sec - now)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def _prune(self, hits, now):
        cutoff = now - self.window_sec
        while hits and hits[0] <= cutoff:
            hits.popleft()

    def _sweep_locked(self, now):
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]
