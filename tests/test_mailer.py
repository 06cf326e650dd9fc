import time

import pytest

from config import TestingConfig
from seatwatch import create_app
from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import MailDeliveryError
from seatwatch.extensions import db, mail
from seatwatch.notifications.mailer import FlaskMailer


class BrokenMail:

    def send(self, message):
        raise OSError('connection refused')


class HangingMail:

    def send(self, message):
        time.sleep(0.5)


@pytest.fixture
def mail_app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.drop_all()
    get_seatwatch(app).mailer.shutdown()


def test_flask_mail_is_default_mailer(mail_app):
    assert isinstance(get_seatwatch(mail_app).mailer, FlaskMailer)


def test_message_is_sent_through_flask_mail(mail_app):
    mailer = get_seatwatch(mail_app).mailer
    with mail_app.app_context():
        with mail.record_messages() as outbox:
            mailer.send('a@x.com', 'Seat Availability', 'A seat is available!')

    assert len(outbox) == 1
    assert outbox[0].recipients == ['a@x.com']
    assert outbox[0].subject == 'Seat Availability'
    assert outbox[0].body == 'A seat is available!'
    assert outbox[0].sender == 'noreply@seatwatch.test'


def test_transport_error_raises_delivery_error(mail_app):
    mailer = FlaskMailer(mail_app, BrokenMail(), timeout=1)
    try:
        with pytest.raises(MailDeliveryError) as exc:
            mailer.send('a@x.com', 'Seat Availability', 'A seat is available!')
        assert exc.value.recipient == 'a@x.com'
    finally:
        mailer.shutdown()


def test_slow_send_times_out(mail_app):
    mailer = FlaskMailer(mail_app, HangingMail(), timeout=0.05)
    try:
        with pytest.raises(MailDeliveryError):
            mailer.send('a@x.com', 'Seat Availability', 'A seat is available!')
    finally:
        mailer.shutdown()
