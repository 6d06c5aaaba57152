import os
import sys
import pytest

# Ensure the backend root (containing the `monster_mayhem` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from monster_mayhem import create_app, registry, socketio, stats
from monster_mayhem.services.games import turns


def make_config(stats_file, **overrides):
    attrs = {
        'TESTING': True,
        'SECRET_KEY': os.environ.get('SECRET_KEY', 'test-secret'),
        'STATS_FILE': str(stats_file),
        'ELIMINATION_LIMIT': 10,
        'SOCKETIO_NAMESPACE': '/',
        'CORS_ORIGINS': [],
    }
    attrs.update(overrides)
    return type('TestConfig', (), attrs)


@pytest.fixture()
def stats_file(tmp_path):
    return tmp_path / 'stats.json'


@pytest.fixture()
def flask_app(stats_file):
    application = create_app(make_config(stats_file))
    with application.app_context():
        yield application
    registry.clear()
    stats.reset()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except RuntimeError:
            pass


@pytest.fixture()
def first_in_ties(monkeypatch):
    """Make turn tie-breaks deterministic: the earliest joiner wins."""
    monkeypatch.setattr(turns.random, 'choice', lambda seq: seq[0])


def events(test_client, name=None):
    received = test_client.get_received()
    if name is None:
        return received
    return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]


def join(test_client, game_id):
    """Join ``game_id`` and return this connection's participant id."""
    test_client.emit('joinGame', game_id)
    joined = events(test_client, 'gameJoined')
    assert joined, 'expected a gameJoined reply'
    return joined[-1]['players'][-1]['id']
