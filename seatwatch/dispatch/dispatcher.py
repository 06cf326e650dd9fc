"""
Seat-availability dispatcher.

One trigger reads the latest snapshot, checks it for an open seat and, if one
is found, pops the oldest pending request and emails it. Delivery is
at-most-once: a popped request is consumed even if the email fails, unless an
`on_mail_failure` hook puts it back.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from seatwatch.errors import MailDeliveryError, NoDataError, UnavailableError
from seatwatch.notifications.mailer import SEAT_AVAILABLE_BODY, SEAT_AVAILABLE_SUBJECT
from seatwatch.sensors.detector import has_open_seat

logger = logging.getLogger(__name__)


class DispatchStatus(str, Enum):
    NO_EVENT = 'no_event'
    DISPATCHED = 'dispatched'
    NO_PENDING = 'no_pending'
    SENSOR_UNAVAILABLE = 'sensor_unavailable'


@dataclass(frozen=True)
class DispatchOutcome:
    status: DispatchStatus
    email: Optional[str] = None
    delivered: bool = False
    error: Optional[str] = None

    @classmethod
    def no_event(cls):
        return cls(DispatchStatus.NO_EVENT)

    @classmethod
    def no_pending(cls):
        return cls(DispatchStatus.NO_PENDING)

    @classmethod
    def sensor_unavailable(cls, error):
        return cls(DispatchStatus.SENSOR_UNAVAILABLE, error=str(error))

    @classmethod
    def dispatched(cls, email, delivered=True, error=None):
        return cls(DispatchStatus.DISPATCHED, email=email, delivered=delivered,
                   error=str(error) if error is not None else None)

    def to_dict(self):
        return {
            'status': self.status.value,
            'email': self.email,
            'delivered': self.delivered,
            'error': self.error,
        }


class Dispatcher:
    """Stateless orchestrator of reader, detector, queue and mailer"""

    def __init__(self, reader, queue, mailer, seat_count: Optional[int] = None,
                 on_mail_failure: Optional[Callable] = None):
        self.reader = reader
        self.queue = queue
        self.mailer = mailer
        self.seat_count = seat_count
        self.on_mail_failure = on_mail_failure

    def on_trigger(self, user_context=None) -> DispatchOutcome:
        source = user_context or 'anonymous'

        try:
            snapshot = self.reader.current()
        except (NoDataError, UnavailableError) as e:
            logger.warning(f"Dispatch [{source}]: sensor unavailable: {e}")
            return DispatchOutcome.sensor_unavailable(e)

        if not has_open_seat(snapshot, self.seat_count):
            if self.seat_count is not None and len(snapshot.seats) != self.seat_count:
                logger.warning(
                    f"Dispatch [{source}]: ignoring malformed snapshot with "
                    f"{len(snapshot.seats)} seats (expected {self.seat_count})"
                )
            return DispatchOutcome.no_event()

        request = self.queue.pop_oldest()
        if request is None:
            logger.debug(f"Dispatch [{source}]: open seat but nobody is waiting")
            return DispatchOutcome.no_pending()

        try:
            self.mailer.send(request.recipient_email, SEAT_AVAILABLE_SUBJECT, SEAT_AVAILABLE_BODY)
        except MailDeliveryError as e:
            logger.error(f"Dispatch [{source}]: could not notify {request.recipient_email}: {e}")
            if self.on_mail_failure is not None:
                try:
                    self.on_mail_failure(request, e)
                except Exception as hook_error:
                    logger.error(
                        f"Dispatch [{source}]: mail failure hook failed for "
                        f"{request.recipient_email}: {hook_error}"
                    )
            return DispatchOutcome.dispatched(request.recipient_email, delivered=False, error=e)

        logger.info(f"Dispatch [{source}]: notified {request.recipient_email}")
        return DispatchOutcome.dispatched(request.recipient_email)


def requeue_on_failure(queue):
    """Failure hook that puts the request back at its original queue position"""

    def _hook(request, error):
        queue.requeue(request)
        logger.info(f"Request for {request.recipient_email} re-queued after mail failure")

    return _hook
