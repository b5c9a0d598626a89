import os
import sys
import threading

import pytest

# Ensure the backend root (containing the `worksheet` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from worksheet import create_app, socketio
from worksheet.config import Config
from worksheet.services.persistence import SnapshotWriter

BROWSER_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
)
FRONTEND_ORIGIN = 'https://math-worksheet-vue.vercel.app'

ALL_CORRECT = {
    'q1': '20', 'q2': '80', 'q3': '60', 'q4': '100', 'q5': '90', 'q6': '450',
    'q7': '50', 'q8': '20', 'q9': '0', 'q10': '200', 'q11': '170', 'q12': '1000',
}


class HoldFirstWriter(SnapshotWriter):
    """Delays the first submitted payload until a second one has been submitted."""

    def __init__(self):
        super().__init__()
        self.first_held = threading.Event()
        self.second_submitted = threading.Event()
        self._calls = 0
        self._calls_lock = threading.Lock()

    def submit(self, snapshot, payload, seq=None):
        with self._calls_lock:
            self._calls += 1
            call = self._calls
        if call == 1:
            self.first_held.set()
            self.second_submitted.wait(timeout=5)
            super().submit(snapshot, payload, seq)
            return
        super().submit(snapshot, payload, seq)
        if call == 2:
            self.second_submitted.set()


def make_config(tmp_path, **overrides):
    attrs = {
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SCORES_FILE': str(tmp_path / 'scores.json'),
        'STATS_FILE': str(tmp_path / 'stats.json'),
    }
    attrs.update(overrides)
    return type('TestConfig', (Config,), attrs)


@pytest.fixture()
def config_overrides():
    return {}


@pytest.fixture()
def flask_app(tmp_path, config_overrides):
    yield create_app(make_config(tmp_path, **config_overrides))


@pytest.fixture()
def client(flask_app):
    test_client = flask_app.test_client()
    test_client.environ_base['HTTP_USER_AGENT'] = BROWSER_UA
    test_client.environ_base['HTTP_ORIGIN'] = FRONTEND_ORIGIN
    return test_client


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, namespace='/ws')
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
