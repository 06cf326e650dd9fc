import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from flask_mail import Message

from seatwatch.errors import MailDeliveryError

logger = logging.getLogger(__name__)

SEAT_AVAILABLE_SUBJECT = 'Seat Availability'
SEAT_AVAILABLE_BODY = 'A seat is available!'
QUEUED_BODY = 'You are in Queue for a seat. You will get another email when the seat is available.'


class FlaskMailer:
    """Send plain-text email through Flask-Mail, bounded by MAIL_TIMEOUT.

    The SMTP conversation runs on a worker thread inside its own app context;
    the caller waits at most `timeout` seconds and gets MailDeliveryError on
    any failure. Sends are never retried.

    A timeout only stops the wait: an SMTP conversation already in progress
    keeps running and the email may still arrive. Combined with the requeue
    hook this can deliver the same notification twice.
    """

    def __init__(self, app, mail, timeout=None, max_workers=4):
        self.app = app
        self.mail = mail
        self.timeout = timeout if timeout is not None else app.config.get('MAIL_TIMEOUT', 30)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='mailer')

    def _send_sync(self, recipient, subject, body):
        with self.app.app_context():
            msg = Message(
                subject=subject,
                recipients=[recipient],
                body=body,
                sender=self.app.config.get('MAIL_DEFAULT_SENDER'),
            )
            self.mail.send(msg)

    def send(self, recipient: str, subject: str, body: str) -> None:
        future = self._executor.submit(self._send_sync, recipient, subject, body)
        try:
            future.result(timeout=self.timeout)
        except FutureTimeoutError:
            future.cancel()
            logger.error(f"Email to {recipient} timed out after {self.timeout}s")
            raise MailDeliveryError(recipient, f"timed out after {self.timeout}s")
        except Exception as e:
            logger.error(f"Email send error to {recipient}: {e}")
            raise MailDeliveryError(recipient, str(e)) from e
        logger.info(f"Email sent to {recipient}: {subject}")

    def shutdown(self):
        self._executor.shutdown(wait=False)
