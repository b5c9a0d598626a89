import logging
import threading
from typing import List, Optional

from worksheet.models import ScoreEntry
from .persistence import SnapshotFile, SnapshotWriter


class Leaderboard:
    """Bounded high-score list, best first.

    Ties keep submission order: entries are appended and re-sorted with a
    stable sort, then truncated to ``capacity``. Every mutation hands a
    snapshot to the writer after the lock is released.
    """

    def __init__(self, snapshot: Optional[SnapshotFile] = None, writer: Optional[SnapshotWriter] = None,
                 capacity: int = 50, view_size: int = 10, logger=None):
        if capacity < 1:
            raise ValueError('capacity must be positive')
        self.snapshot = snapshot
        self.writer = writer
        self.capacity = capacity
        self.view_size = view_size
        self.logger = logger or logging.getLogger(__name__)
        self._entries: List[ScoreEntry] = []
        self._lock = threading.Lock()

    def load(self) -> int:
        rows = self.snapshot.load() if self.snapshot else None
        entries = []
        if rows is not None and not isinstance(rows, list):
            self.logger.warning(f"[scores-load] expected a list in {self.snapshot.path}, starting empty")
            rows = None
        for row in rows or []:
            entry = ScoreEntry.from_dict(row)
            if entry is None:
                self.logger.warning(f"[scores-load] skipping invalid row {row!r}")
                continue
            entries.append(entry)
        entries.sort(key=lambda e: e.score, reverse=True)
        with self._lock:
            self._entries = entries[:self.capacity]
            count = len(self._entries)
        self.logger.info(f"[scores-load] loaded {count} saved scores")
        return count

    def submit(self, entry: ScoreEntry):
        with self._lock:
            entries = self._entries + [entry]
            # list.sort is stable, so equal scores stay in submission order
            entries.sort(key=lambda e: e.score, reverse=True)
            self._entries = entries[:self.capacity]
            view = [e.to_public_dict() for e in self._entries[:self.view_size]]
            payload = [e.to_dict() for e in self._entries]
            seq = self._reserve()
        self._persist(payload, seq)
        return view

    def top(self, n: Optional[int] = None):
        n = self.view_size if n is None else n
        with self._lock:
            return [e.to_public_dict() for e in self._entries[:max(0, n)]]

    def entries(self) -> List[ScoreEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            seq = self._reserve()
        self._persist([], seq)

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def _reserve(self):
        if self.snapshot is not None and self.writer is not None:
            return self.writer.reserve(self.snapshot)
        return None

    def _persist(self, payload, seq):
        if seq is not None:
            self.writer.submit(self.snapshot, payload, seq)
