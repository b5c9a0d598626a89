"""JSON snapshot files and the fire-and-forget writer that updates them.

Stores hand the writer a fully serialized payload after each mutation. The
writer runs the file write through ``spawn`` (``socketio.start_background_task``
in the running app, inline in tests) and never reports back to the caller.
"""

import json
import logging
import os
import tempfile
import threading
from typing import Any, Callable, Dict, Optional

from worksheet.errors import PersistenceFailure


class SnapshotFile:
    def __init__(self, path, logger=None):
        self.path = path
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> Optional[Any]:
        """Return the parsed snapshot, or None if it is missing or unreadable."""
        if not self.path or not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            self.logger.warning(f"[snapshot-load] path={self.path} unreadable, starting empty: {exc}")
            return None

    def write(self, payload) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.snapshot-', dir=directory)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as fh:
                    json.dump(payload, fh, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise PersistenceFailure(f"could not write {self.path}: {exc}") from exc


def _run_inline(fn, *args):
    fn(*args)


class SnapshotWriter:
    """One-way channel from store mutations to snapshot files."""

    def __init__(self, spawn: Optional[Callable] = None, logger=None):
        self.spawn = spawn or _run_inline
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._file_locks: Dict[str, threading.Lock] = {}
        self._issued: Dict[str, int] = {}
        self._written: Dict[str, int] = {}

    def reserve(self, snapshot: SnapshotFile) -> int:
        """Claim the next write position for ``snapshot``.

        Stores call this while still holding their own lock, so positions
        follow mutation order even when the payloads are submitted later.
        """
        with self._lock:
            seq = self._issued.get(snapshot.path, 0) + 1
            self._issued[snapshot.path] = seq
            return seq

    def submit(self, snapshot: SnapshotFile, payload, seq: Optional[int] = None) -> None:
        if seq is None:
            seq = self.reserve(snapshot)
        with self._lock:
            file_lock = self._file_locks.setdefault(snapshot.path, threading.Lock())
        try:
            self.spawn(self._write, snapshot, payload, seq, file_lock)
        except Exception as exc:
            self.logger.error(f"[snapshot-fail] path={snapshot.path} could not schedule write: {exc}")

    def _write(self, snapshot, payload, seq, file_lock):
        with file_lock:
            # A newer payload already reached disk
            if seq <= self._written.get(snapshot.path, 0):
                return
            try:
                snapshot.write(payload)
            except PersistenceFailure as exc:
                self.logger.error(f"[snapshot-fail] {exc}")
                return
            self._written[snapshot.path] = seq
