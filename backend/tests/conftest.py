import os
import random
import sys
import pytest

# Ensure the backend root (containing the `tilematch` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from tilematch import create_app, db, socketio, get_registry
from tilematch.services.games.persistence import MemoryStatsStore
from tilematch.services.games.scheduler import ManualScheduler
from tilematch.services.games.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MATCH_DELAY_MS = 500
    MISMATCH_DELAY_MS = 1500
    TIMER_TICK_SEC = 1
    STATS_BACKEND = 'sql'
    STATS_HISTORY_LIMIT = 100
    RANDOM_SYMBOL_SELECTION = False
    DEFAULT_DIFFICULTY = 'easy'
    DEFAULT_CATEGORY = 'food'
    SESSION_CODE_LENGTH = 4
    SESSION_IDLE_TIMEOUT_SEC = 1800
    SESSION_SWEEP_INTERVAL_SEC = 60
    OWNER_GRACE_SEC = 2
    CORS_ORIGINS = '*'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import tilematch.models  # noqa: F401
        db.create_all()
        yield application
        get_registry(application).close()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def scheduler(flask_app):
    return get_registry(flask_app).scheduler


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
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture()
def memory_store():
    return MemoryStatsStore()


@pytest.fixture()
def game(manual_scheduler, memory_store):
    session = GameSession(
        manual_scheduler,
        code='TEST',
        store=memory_store,
        rng=random.Random(1234),
        match_delay=0.5,
        mismatch_delay=1.5,
        sample_symbols=False,
    )
    yield session
    session.dispose()


def find_pair(state, settled_ok=False):
    """Return ids of two unsettled tiles sharing a pair key."""
    by_key = {}
    for tile in state.board:
        if tile.settled and not settled_ok:
            continue
        by_key.setdefault(tile.pair_key, []).append(tile.id)
    for ids in by_key.values():
        if len(ids) == 2:
            return ids[0], ids[1]
    return None


def find_mismatch(state):
    """Return ids of two unsettled tiles with different pair keys."""
    free = [t for t in state.board if not t.settled]
    first = free[0]
    for other in free[1:]:
        if other.pair_key != first.pair_key:
            return first.id, other.id
    return None
