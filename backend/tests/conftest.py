import logging
import os
import sys
import pytest

# Ensure the backend root (containing the `blobverse` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from blobverse import create_app, db, socketio
from blobverse.services.battles import BattleServer


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    DB_AUTO_CREATE = False
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'


class RecordingSocketIO:
    """Stands in for the Socket.IO server when exercising the battle core directly."""

    def __init__(self):
        self.sent = []
        self.tasks = []

    def emit(self, event, *args, to=None, namespace=None):
        self.sent.append({'event': event, 'data': args[0] if args else None, 'to': to})

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def to(self, sid, event=None):
        return [m for m in self.sent if m['to'] == sid and (event is None or m['event'] == event)]

    def broadcasts(self, event):
        return [m for m in self.sent if m['to'] is None and m['event'] == event]


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def battle_server(flask_app):
    return flask_app.extensions['battle_server']


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients; the CONNECTED greeting is flushed."""
    clients = []

    def _connect():
        sio_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        sio_client.get_received()
        clients.append(sio_client)
        return sio_client

    yield _connect
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture()
def emitter():
    return RecordingSocketIO()


@pytest.fixture()
def core(emitter):
    """A BattleServer wired to a recording emitter instead of a live Socket.IO server."""
    server = BattleServer(emitter, logging.getLogger('blobverse.tests'))
    for sid in ('sid-1', 'sid-2', 'sid-3'):
        server.handle_connect(sid)
    return server
