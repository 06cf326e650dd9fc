import threading
import time

import pytest
from sqlalchemy.exc import OperationalError

from config import TestingConfig
from seatwatch import create_app
from seatwatch.dispatch.dispatcher import Dispatcher
from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import MailDeliveryError
from seatwatch.extensions import db
from seatwatch.notifications.queue import InMemoryNotificationQueue
from seatwatch.sensors.reader import SensorReader
from seatwatch.sensors.store import InMemorySnapshotStore

OPEN = ['Occupied', 'Occupied', 'Empty', 'Occupied']
FULL = ['Occupied', 'Occupied', 'Occupied', 'Occupied']


class RecordingMailer:
    """Mailer double that records sends and can be told to fail"""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
        self._lock = threading.Lock()

    def send(self, recipient, subject, body):
        if self.fail:
            raise MailDeliveryError(recipient, 'SMTP connection refused')
        with self._lock:
            self.sent.append((recipient, subject, body))

    @property
    def recipients(self):
        return [sent[0] for sent in self.sent]


class SlowSnapshotStore(InMemorySnapshotStore):

    def __init__(self, delay, seats=None):
        super().__init__(seats)
        self.delay = delay

    def latest(self):
        time.sleep(self.delay)
        return super().latest()


class BrokenSnapshotStore(InMemorySnapshotStore):

    def latest(self):
        raise OperationalError('SELECT * FROM seat_snapshots', {}, Exception('connection refused'))


class BrokenPopQueue(InMemoryNotificationQueue):

    def pop_oldest(self):
        raise OperationalError('DELETE FROM pending_notifications', {}, Exception('database is locked'))


class BrokenRequeueQueue(InMemoryNotificationQueue):

    def requeue(self, request):
        raise OperationalError('INSERT INTO pending_notifications', {}, Exception('database is locked'))


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(mailer):
    app = create_app(TestingConfig, mailer=mailer)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
    seatwatch = get_seatwatch(app)
    seatwatch.reader.shutdown()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def seatwatch(app):
    return get_seatwatch(app)


@pytest.fixture
def snapshots():
    return InMemorySnapshotStore()


@pytest.fixture
def queue():
    return InMemoryNotificationQueue()


@pytest.fixture
def reader(snapshots):
    reader = SensorReader(snapshots, timeout=1)
    yield reader
    reader.shutdown()


@pytest.fixture
def dispatcher(reader, queue, mailer):
    return Dispatcher(reader, queue, mailer, seat_count=4)
