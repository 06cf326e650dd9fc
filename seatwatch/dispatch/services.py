"""
Per-application wiring of stores, reader, mailer and dispatcher.

Everything is built once in create_app and kept on app.extensions['seatwatch'];
request handlers, the scheduler and CLI commands look it up through the app.
"""
import logging
from dataclasses import dataclass

from flask import current_app

from seatwatch.dispatch.dispatcher import Dispatcher, requeue_on_failure
from seatwatch.extensions import mail
from seatwatch.notifications.mailer import FlaskMailer
from seatwatch.notifications.queue import InMemoryNotificationQueue, SqlNotificationQueue
from seatwatch.sensors.reader import SensorReader
from seatwatch.sensors.store import InMemorySnapshotStore, SqlSnapshotStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'seatwatch'


@dataclass
class SeatWatch:
    snapshots: object
    queue: object
    reader: SensorReader
    mailer: object
    dispatcher: Dispatcher


def init_seatwatch(app, snapshots=None, queue=None, mailer=None):
    """Build the dispatcher for `app`. Any collaborator can be injected."""
    backend = app.config.get('SEATWATCH_STORAGE', 'sql')
    if backend not in ('sql', 'memory'):
        raise ValueError(f"Unknown SEATWATCH_STORAGE backend: {backend}")

    if snapshots is None:
        snapshots = SqlSnapshotStore(app) if backend == 'sql' else InMemorySnapshotStore()
    if queue is None:
        queue = SqlNotificationQueue(app) if backend == 'sql' else InMemoryNotificationQueue()
    if mailer is None:
        mailer = FlaskMailer(app, mail, timeout=app.config.get('MAIL_TIMEOUT'))

    reader = SensorReader(snapshots, timeout=app.config.get('SENSOR_READ_TIMEOUT', 5))

    on_mail_failure = None
    if app.config.get('REQUEUE_ON_MAIL_FAILURE'):
        on_mail_failure = requeue_on_failure(queue)

    dispatcher = Dispatcher(
        reader,
        queue,
        mailer,
        seat_count=app.config.get('SEAT_COUNT'),
        on_mail_failure=on_mail_failure,
    )

    seatwatch = SeatWatch(snapshots=snapshots, queue=queue, reader=reader, mailer=mailer, dispatcher=dispatcher)
    app.extensions[EXTENSION_KEY] = seatwatch
    logger.info(f"SeatWatch initialised with {backend} storage")
    return seatwatch


def get_seatwatch(app=None) -> SeatWatch:
    app = app or current_app
    return app.extensions[EXTENSION_KEY]
