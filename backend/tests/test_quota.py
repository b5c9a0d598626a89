import json
import threading
from datetime import date, timedelta

from conftest import HoldFirstWriter
from worksheet.services.persistence import SnapshotFile, SnapshotWriter
from worksheet.services.quota import QuotaTracker


class FakeDay:
    def __init__(self, day=date(2026, 10, 19)):
        self.day = day

    def __call__(self):
        return self.day


def make_tracker(tmp_path, limit=3, day=None, **kwargs):
    day = day or FakeDay()
    tracker = QuotaTracker(
        limit=limit,
        snapshot=SnapshotFile(str(tmp_path / 'stats.json')),
        writer=SnapshotWriter(),
        today=day,
        **kwargs,
    )
    return tracker, day


def test_exhausts_at_limit_without_growing(tmp_path):
    tracker, _ = make_tracker(tmp_path, limit=2)
    assert tracker.check_and_increment().admit
    second = tracker.check_and_increment()
    assert second.admit and second.remaining == 0
    for _ in range(3):
        denied = tracker.check_and_increment()
        assert not denied.admit
        assert denied.count == 2


def test_day_rollover_reopens(tmp_path):
    tracker, day = make_tracker(tmp_path, limit=1)
    tracker.check_and_increment()
    assert not tracker.check_and_increment().admit
    day.day += timedelta(days=1)
    result = tracker.check_and_increment()
    assert result.admit
    assert result.count == 1
    assert result.reset == '2026-10-20'
    assert result.next_reset == '2026-10-21'


def test_snapshot_written_after_each_increment(tmp_path):
    tracker, _ = make_tracker(tmp_path)
    tracker.check_and_increment()
    tracker.check_and_increment()
    with open(tmp_path / 'stats.json') as fh:
        assert json.load(fh) == {'requests': 2, 'last_reset': '2026-10-19', 'limit': 3}


def test_restores_todays_count(tmp_path):
    (tmp_path / 'stats.json').write_text(json.dumps({'requests': 2, 'last_reset': '2026-10-19'}))
    tracker, _ = make_tracker(tmp_path)
    tracker.load()
    assert tracker.status().count == 2


def test_stale_snapshot_starts_fresh(tmp_path):
    (tmp_path / 'stats.json').write_text(json.dumps({'requests': 2, 'last_reset': '2026-10-18'}))
    tracker, _ = make_tracker(tmp_path)
    tracker.load()
    assert tracker.status().count == 0


def test_restore_can_be_disabled(tmp_path):
    (tmp_path / 'stats.json').write_text(json.dumps({'requests': 2, 'last_reset': '2026-10-19'}))
    tracker, _ = make_tracker(tmp_path, restore_count=False)
    tracker.load()
    assert tracker.status().count == 0


def test_corrupt_snapshot_is_not_fatal(tmp_path):
    (tmp_path / 'stats.json').write_text('{not json')
    tracker, _ = make_tracker(tmp_path)
    tracker.load()
    assert tracker.check_and_increment().admit


def test_reset(tmp_path):
    tracker, _ = make_tracker(tmp_path, limit=1)
    tracker.check_and_increment()
    tracker.reset()
    assert tracker.check_and_increment().admit


def test_older_count_never_overwrites_newer(tmp_path):
    writer = HoldFirstWriter()
    tracker = QuotaTracker(limit=5, snapshot=SnapshotFile(str(tmp_path / 'stats.json')),
                           writer=writer, today=FakeDay())

    worker = threading.Thread(target=tracker.check_and_increment)
    worker.start()
    assert writer.first_held.wait(timeout=5)
    tracker.check_and_increment()
    worker.join(timeout=5)

    with open(tmp_path / 'stats.json') as fh:
        assert json.load(fh)['requests'] == 2
