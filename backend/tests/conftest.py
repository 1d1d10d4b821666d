import os
import sys
import pytest
import fakeredis

# Ensure the backend root (containing the `ladder` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from ladder import create_app
from ladder.services import account_directory, friend_request_ledger, friendship_graph, leaderboard


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    REDIS_URL = 'redis://localhost:6379/15'
    TOKEN_TTL_SEC = 86400
    BCRYPT_LOG_ROUNDS = 4
    LEADERBOARD_DEFAULT_PAGE = 1
    LEADERBOARD_DEFAULT_COUNT = 10
    SIMULATION_MAX_PLAYERS = 6
    CORS_ORIGINS = []


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def redis_client():
    # A private server per test keeps state isolated
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture()
def flask_app(redis_client):
    # No app context is pushed here; each test-client request needs its own `g`
    return create_app(TestConfig, redis_client=redis_client)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def directory(flask_app):
    with flask_app.app_context():
        return account_directory()


@pytest.fixture()
def ledger(flask_app):
    with flask_app.app_context():
        return friend_request_ledger()


@pytest.fixture()
def graph(flask_app):
    with flask_app.app_context():
        return friendship_graph()


@pytest.fixture()
def board(flask_app):
    with flask_app.app_context():
        return leaderboard()


@pytest.fixture()
def register(client):
    """Register an account over HTTP and return (account dict, auth headers)."""

    def _register(username, password='secret', **profile):
        res = client.post('/register', json={'username': username, 'password': password, **profile})
        assert res.status_code == 201, res.get_json()
        result = res.get_json()['result']
        return result['user'], {'Authorization': f"Bearer {result['token']}"}

    return _register
