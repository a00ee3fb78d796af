import os
import sys
import pytest

# Ensure the backend root (containing the `debate_clock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from debate_clock import create_app, socketio
from debate_clock.services.clock import GameSession, SettingsStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    TICK_INTERVAL_SEC = 0.1
    TICK_DELTA_SEC = 0.1
    TICK_HEARTBEAT_SEC = 0
    DEFAULT_PLAYER_COUNT = 2
    DEFAULT_INVULNERABILITY_PERIOD = 3
    DEFAULT_JUMP_IN_AMOUNT = 3
    DEFAULT_MAX_TIME = 60


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


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


@pytest.fixture()
def store():
    return SettingsStore()


@pytest.fixture()
def session(store):
    return GameSession(store)


def make_session(**settings):
    """A started session with the given settings."""
    s = GameSession(SettingsStore(settings))
    s.start()
    return s


def tick(session, count, delta=0.1):
    for _ in range(count):
        session.advance_time(delta)
