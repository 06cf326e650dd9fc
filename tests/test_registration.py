import pytest

from seatwatch.errors import InvalidEmailError
from seatwatch.notifications.mailer import QUEUED_BODY
from seatwatch.notifications.services import normalize_email, request_notification


@pytest.mark.parametrize('email', ['', '   ', 'not-an-email', 'a@', '@x.com', 'a b@x.com'])
def test_invalid_addresses_are_rejected(email):
    with pytest.raises(InvalidEmailError):
        normalize_email(email)


def test_address_is_stripped():
    assert normalize_email('  a@x.com ') == 'a@x.com'


def test_request_is_queued(app, seatwatch, mailer):
    with app.app_context():
        pending = request_notification('a@x.com')

    assert pending.recipient_email == 'a@x.com'
    assert seatwatch.queue.size() == 1
    assert mailer.sent == []


def test_invalid_request_is_not_queued(app, seatwatch):
    with app.app_context():
        with pytest.raises(InvalidEmailError):
            request_notification('nope')
    assert seatwatch.queue.size() == 0


def test_queue_confirmation_is_sent(app, mailer):
    app.config['SEND_QUEUE_CONFIRMATION'] = True
    with app.app_context():
        request_notification('a@x.com')

    assert mailer.sent == [('a@x.com', 'Seat Availability', QUEUED_BODY)]


def test_failed_confirmation_still_queues(app, seatwatch, mailer):
    app.config['SEND_QUEUE_CONFIRMATION'] = True
    mailer.fail = True
    with app.app_context():
        request_notification('a@x.com')

    assert seatwatch.queue.size() == 1
