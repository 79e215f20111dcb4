import os
import random
import sys

import pytest

# Ensure the backend root (containing the `sketchguess` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sketchguess.config import Config
from sketchguess.game.service import GameService
from sketchguess.game.store import RoomStore
from sketchguess.game.words import WordBank
from sketchguess.server import create_app


class ManualJob:
    def __init__(self, scheduler, fn, due, interval, name):
        self.scheduler = scheduler
        self.fn = fn
        self.due = due
        self.interval = interval
        self.name = name
        self.cancelled = False
        self.seq = next(scheduler._seq)

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic stand-in for the Socket.IO background scheduler.

    Time only moves when a test calls ``advance``.
    """

    def __init__(self):
        import itertools

        self.now = 0.0
        self.jobs = []
        self._seq = itertools.count()

    def every(self, interval, fn, name='periodic'):
        job = ManualJob(self, fn, self.now + interval, interval, name)
        self.jobs.append(job)
        return job

    def later(self, delay, fn, name='delayed'):
        job = ManualJob(self, fn, self.now + delay, None, name)
        self.jobs.append(job)
        return job

    def active(self, prefix=''):
        return [j for j in self.jobs if not j.cancelled and j.name.startswith(prefix)]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [j for j in self.jobs if not j.cancelled and j.due <= target]
            if not due:
                break
            job = min(due, key=lambda j: (j.due, j.seq))
            self.now = job.due
            if job.interval:
                job.due += job.interval
            else:
                job.cancelled = True
            job.fn()
        self.now = target
        self.jobs = [j for j in self.jobs if not j.cancelled]


class RecordingEmitter:
    def __init__(self):
        self.sent = []

    def emit(self, event, *args, to=None, skip_sid=None):
        self.sent.append({'event': event, 'data': args[0] if args else None, 'to': to, 'skip_sid': skip_sid})

    def events(self, name, to=None):
        return [m for m in self.sent if m['event'] == name and (to is None or m['to'] == to)]

    def last(self, name, to=None):
        found = self.events(name, to=to)
        return found[-1] if found else None

    def clear(self):
        self.sent.clear()


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = 'test-secret'
    SOCKETIO_ASYNC_MODE = 'threading'
    TRUST_PROXY_HEADERS = False


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def service(emitter, scheduler):
    svc = GameService(
        RoomStore(rng=random.Random(1)),
        emitter,
        scheduler,
        WordBank(rng=random.Random(7)),
        rng=random.Random(11),
    )
    yield svc
    svc.store.teardown()


@pytest.fixture()
def two_players(service, emitter):
    """Room AB12 with Alice (creator) and Bob."""
    service.create_room('sid-alice', 'Alice', code='ab12')
    service.join('AB12', 'sid-bob', 'Bob')
    emitter.clear()
    return 'AB12'


@pytest.fixture()
def four_players(service, emitter):
    service.create_room('sid-a', 'Ann', code='ROOM')
    for sid, name in (('sid-b', 'Ben'), ('sid-c', 'Cal'), ('sid-d', 'Dee')):
        service.join('ROOM', sid, name)
    emitter.clear()
    return 'ROOM'


@pytest.fixture()
def flask_app(scheduler):
    application, sio = create_app(TestConfig, scheduler=scheduler)
    application.config['SOCKETIO'] = sio
    yield application
    application.extensions['sketchguess'].store.teardown()


@pytest.fixture()
def socketio(flask_app):
    return flask_app.config['SOCKETIO']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app, socketio):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for c in clients:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass
