import os
import sys
from decimal import Decimal
from itertools import count

import pytest

# Ensure the backend root (containing the `jumpbet` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from jumpbet import create_app, socketio
from jumpbet.broadcast import Broadcaster
from jumpbet.services.game import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ROUND_INTERVAL_MS = 7000
    STARTING_BALANCE = Decimal('10')
    HISTORY_LIMIT = 10
    LEADERBOARD_SIZE = 10
    CORS_ORIGINS = ['http://localhost:5173']
    SOCKETIO_NAMESPACE = '/ws'
    TIMER_HEARTBEAT_SEC = 0


class RecordingBroadcaster(Broadcaster):
    def __init__(self):
        self.sent = []

    def push(self, handle, event, payload):
        self.sent.append((handle, event, payload))

    def events(self, event, handle=None):
        return [p for h, e, p in self.sent if e == event and (handle is None or h == handle)]

    def clear(self):
        self.sent = []


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class Outcomes:
    """Outcome source the test can steer; defaults to a win."""

    def __init__(self, value=True):
        self.queue = []
        self.value = value

    def __call__(self):
        if self.queue:
            return self.queue.pop(0)
        return self.value


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def fake_clock():
    return FakeClock()


@pytest.fixture()
def outcomes():
    return Outcomes()


@pytest.fixture()
def session(broadcaster, fake_clock, outcomes):
    ids = count(1)
    game = GameSession(
        broadcaster=broadcaster,
        outcome_source=outcomes,
        id_source=lambda: f"{next(ids):032x}",
        time_source=fake_clock,
        wall_clock=lambda: 1700000000.0,
    )
    game.start(run_clock=False)
    broadcaster.clear()
    yield game
    game.shutdown()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        application.extensions['jumpbet'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
