"""
Pending-notification queues.

`pop_oldest` is the only serialised operation in the system: two concurrent
callers must never receive the same request.
"""
import bisect
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, func, select

from seatwatch.extensions import db
from seatwatch.notifications.models import NotificationRequest, PendingNotification

logger = logging.getLogger(__name__)


class NotificationQueue(ABC):

    @abstractmethod
    def enqueue(self, email: str) -> NotificationRequest:
        ...

    @abstractmethod
    def pop_oldest(self) -> Optional[NotificationRequest]:
        ...

    @abstractmethod
    def requeue(self, request: NotificationRequest) -> NotificationRequest:
        """Put a popped request back, keeping its original enqueue time"""

    @abstractmethod
    def size(self) -> int:
        ...

    def __len__(self):
        return self.size()


class SqlNotificationQueue(NotificationQueue):
    """Queue backed by the `pending_notifications` table.

    The pop is a single DELETE ... RETURNING against the oldest row. On
    PostgreSQL the inner select takes the row with FOR UPDATE SKIP LOCKED so
    concurrent pops move on to the next row instead of waiting; SQLite runs
    the statement under its database write lock.
    """

    def __init__(self, app):
        self.app = app

    def enqueue(self, email):
        with self.app.app_context():
            pending = PendingNotification(email=email, enqueued_at=datetime.utcnow())
            db.session.add(pending)
            db.session.commit()
            logger.info(f"Queued notification request {pending.id} for {email}")
            return pending.to_request()

    def pop_oldest(self):
        oldest_id = (
            select(PendingNotification.id)
            .order_by(PendingNotification.enqueued_at, PendingNotification.id)
            .limit(1)
            .with_for_update(skip_locked=True)
            .scalar_subquery()
        )
        stmt = (
            delete(PendingNotification)
            .where(PendingNotification.id == oldest_id)
            .returning(PendingNotification.id, PendingNotification.email, PendingNotification.enqueued_at)
            .execution_options(synchronize_session=False)
        )
        with self.app.app_context():
            try:
                row = db.session.execute(stmt).first()
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
        if row is None:
            return None
        return NotificationRequest(recipient_email=row.email, enqueued_at=row.enqueued_at, id=row.id)

    def requeue(self, request):
        with self.app.app_context():
            pending = PendingNotification(email=request.recipient_email, enqueued_at=request.enqueued_at)
            db.session.add(pending)
            db.session.commit()
            logger.info(f"Re-queued notification request for {request.recipient_email}")
            return pending.to_request()

    def size(self):
        with self.app.app_context():
            return db.session.scalar(select(func.count(PendingNotification.id)))


class InMemoryNotificationQueue(NotificationQueue):
    """Process-local queue, ordered by (enqueued_at, id)"""

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._items = []  # sorted list of (enqueued_at, id, request)

    def enqueue(self, email):
        with self._lock:
            request = NotificationRequest(recipient_email=email, enqueued_at=datetime.utcnow(), id=next(self._ids))
            bisect.insort(self._items, (request.enqueued_at, request.id, request))
        logger.info(f"Queued notification request {request.id} for {email}")
        return request

    def pop_oldest(self):
        with self._lock:
            if not self._items:
                return None
            return self._items.pop(0)[2]

    def requeue(self, request):
        with self._lock:
            request = NotificationRequest(
                recipient_email=request.recipient_email,
                enqueued_at=request.enqueued_at,
                id=request.id if request.id is not None else next(self._ids),
            )
            bisect.insort(self._items, (request.enqueued_at, request.id, request))
        return request

    def size(self):
        with self._lock:
            return len(self._items)

    def emails(self):
        """Pending emails, oldest first"""
        with self._lock:
            return [item[2].recipient_email for item in self._items]
