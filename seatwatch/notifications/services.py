"""
Registration entry point: validate an email and queue it for the next open seat.
"""
import logging

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import InvalidEmailError, MailDeliveryError
from seatwatch.notifications.mailer import QUEUED_BODY, SEAT_AVAILABLE_SUBJECT

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Return the normalized address or raise InvalidEmailError"""
    if not email or not email.strip():
        raise InvalidEmailError('Email address is required')
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidEmailError(str(e)) from e
    return result.normalized


def request_notification(email: str, app=None):
    """Queue `email` for the next open seat and return the NotificationRequest.

    Duplicate addresses are accepted. The queue confirmation email is best
    effort and never fails the registration.
    """
    app = app or current_app._get_current_object()
    address = normalize_email(email)
    seatwatch = get_seatwatch(app)

    request = seatwatch.queue.enqueue(address)

    if app.config.get('SEND_QUEUE_CONFIRMATION'):
        try:
            seatwatch.mailer.send(address, SEAT_AVAILABLE_SUBJECT, QUEUED_BODY)
        except MailDeliveryError as e:
            logger.warning(f"Queue confirmation not delivered to {address}: {e}")

    return request
