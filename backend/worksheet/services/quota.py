import logging
import threading
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Optional

from .persistence import SnapshotFile, SnapshotWriter


@dataclass(frozen=True)
class QuotaResult:
    admit: bool
    count: int
    remaining: int
    limit: int
    reset: str

    @property
    def next_reset(self) -> str:
        return (date.fromisoformat(self.reset) + timedelta(days=1)).isoformat()


class QuotaTracker:
    """Daily cap on metered requests.

    Open while ``count < limit``; Exhausted from the request that reaches the
    limit until the calendar day changes, which resets the count to zero.
    """

    def __init__(self, limit: int, snapshot: Optional[SnapshotFile] = None,
                 writer: Optional[SnapshotWriter] = None, today: Callable[[], date] = date.today,
                 restore_count: bool = True, logger=None):
        self.limit = limit
        self.snapshot = snapshot
        self.writer = writer
        self.today = today
        self.restore_count = restore_count
        self.logger = logger or logging.getLogger(__name__)
        self._count = 0
        self._label = today().isoformat()
        self._lock = threading.Lock()

    def load(self) -> None:
        data = self.snapshot.load() if self.snapshot else None
        if not isinstance(data, dict):
            return
        label = data.get('last_reset')
        count = data.get('requests')
        if not self.restore_count:
            self.logger.info('[quota-load] count restore disabled, starting at zero')
            return
        if not isinstance(label, str) or not isinstance(count, int) or isinstance(count, bool) or count < 0:
            self.logger.warning(f"[quota-load] ignoring malformed stats snapshot {data!r}")
            return
        with self._lock:
            if label == self.today().isoformat():
                self._count = count
                self._label = label
        self.logger.info(f"[quota-load] {self._count} requests today (limit {self.limit})")

    def check_and_increment(self) -> QuotaResult:
        with self._lock:
            changed = self._rollover_locked()
            if self._count >= self.limit:
                result = self._result_locked(False)
            else:
                self._count += 1
                changed = True
                result = self._result_locked(True)
            payload = self._payload_locked() if changed else None
            seq = self._reserve() if changed else None
        if payload is not None:
            self._persist(payload, seq)
        return result

    def status(self) -> QuotaResult:
        with self._lock:
            changed = self._rollover_locked()
            result = self._result_locked(self._count < self.limit)
            payload = self._payload_locked() if changed else None
            seq = self._reserve() if changed else None
        if payload is not None:
            self._persist(payload, seq)
        return result

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._label = self.today().isoformat()
            payload = self._payload_locked()
            seq = self._reserve()
        self._persist(payload, seq)

    def _rollover_locked(self) -> bool:
        today = self.today().isoformat()
        if today == self._label:
            return False
        self.logger.info(f"[quota-reset] new day {today}, {self._count} requests on {self._label}")
        self._count = 0
        self._label = today
        return True

    def _result_locked(self, admit):
        return QuotaResult(
            admit=admit,
            count=self._count,
            remaining=max(0, self.limit - self._count),
            limit=self.limit,
            reset=self._label,
        )

    def _payload_locked(self):
        return {'requests': self._count, 'last_reset': self._label, 'limit': self.limit}

    def _reserve(self):
        if self.snapshot is not None and self.writer is not None:
            return self.writer.reserve(self.snapshot)
        return None

    def _persist(self, payload, seq):
        if seq is not None:
            self.writer.submit(self.snapshot, payload, seq)
