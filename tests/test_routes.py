import pytest

from config import TestingConfig
from seatwatch import create_app
from seatwatch.dispatch.services import get_seatwatch

from .conftest import FULL, OPEN, BrokenPopQueue, BrokenSnapshotStore


@pytest.fixture
def broken_app_factory():
    apps = []

    def _make(**collaborators):
        app = create_app(TestingConfig, **collaborators)
        apps.append(app)
        return app

    yield _make
    for app in apps:
        get_seatwatch(app).reader.shutdown()


def test_seats_without_snapshot(client):
    response = client.get('/api/seats')
    assert response.status_code == 404


def test_record_and_read_seats(client):
    response = client.post('/api/seats', json={'seats': OPEN})
    assert response.status_code == 201

    data = client.get('/api/seats').get_json()
    assert data['seats'] == OPEN
    assert data['open_seats'] == [3]
    assert data['seat_available'] is True


def test_record_rejects_unknown_states(client):
    response = client.post('/api/seats', json={'seats': ['Occupied', 'Gone', 'Empty', 'Empty']})
    assert response.status_code == 400
    assert 'Gone' in response.get_json()['error']


def test_record_rejects_wrong_seat_count(client):
    response = client.post('/api/seats', json={'seats': ['Empty', 'Empty']})
    assert response.status_code == 400


def test_record_requires_seat_list(client):
    assert client.post('/api/seats', json={}).status_code == 400


def test_notify_queues_email(client):
    response = client.post('/notify', data={'email': 'a@x.com'})
    assert response.status_code == 201
    assert response.get_json()['request']['recipient_email'] == 'a@x.com'

    assert client.get('/notify/queue').get_json() == {'pending': 1}


def test_notify_accepts_json(client):
    response = client.post('/notify', json={'email': 'b@x.com'})
    assert response.status_code == 201


def test_notify_rejects_bad_email(client):
    response = client.post('/notify', data={'email': 'not-an-email'})
    assert response.status_code == 400
    assert 'email' in response.get_json()['errors']
    assert client.get('/notify/queue').get_json() == {'pending': 0}


def test_dispatch_endpoint(client, mailer):
    client.post('/api/seats', json={'seats': OPEN})
    client.post('/notify', data={'email': 'a@x.com'})

    outcome = client.post('/api/dispatch').get_json()

    assert outcome['status'] == 'dispatched'
    assert outcome['email'] == 'a@x.com'
    assert mailer.recipients == ['a@x.com']


def test_dispatch_endpoint_full_room(client, mailer):
    client.post('/api/seats', json={'seats': FULL})
    client.post('/notify', data={'email': 'a@x.com'})

    assert client.post('/api/dispatch', json={'source': 'kiosk'}).get_json()['status'] == 'no_event'
    assert client.get('/notify/queue').get_json() == {'pending': 1}


def test_dispatch_endpoint_without_sensor_data(client):
    assert client.post('/api/dispatch').get_json()['status'] == 'sensor_unavailable'


def test_health(client):
    response = client.get('/health/')
    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'healthy'
    assert data['pending_notifications'] == 0
    assert data['scheduler'] == 'stopped'


def test_ready(client):
    assert client.get('/health/ready').status_code == 200


def test_notify_rejects_non_string_email(client):
    response = client.post('/notify', json={'email': 123})
    assert response.status_code == 400
    assert 'email' in response.get_json()['errors']
    assert client.get('/notify/queue').get_json() == {'pending': 0}


def test_notify_rejects_non_object_body(client):
    response = client.post('/notify', json=['a@x.com'])
    assert response.status_code == 400
    assert response.get_json()['error'] == 'Invalid request'


def test_record_rejects_non_object_body(client):
    assert client.post('/api/seats', json=['Empty', 'Empty', 'Empty', 'Empty']).status_code == 400


def test_seats_with_broken_store_is_503(broken_app_factory, mailer):
    app = broken_app_factory(snapshots=BrokenSnapshotStore(), mailer=mailer)

    response = app.test_client().get('/api/seats')

    assert response.status_code == 503
    assert response.is_json


def test_dispatch_with_broken_queue_is_json_500(broken_app_factory, mailer):
    app = broken_app_factory(queue=BrokenPopQueue(), mailer=mailer)
    client = app.test_client()
    client.post('/api/seats', json={'seats': OPEN})

    response = client.post('/api/dispatch')

    assert response.status_code == 500
    assert response.is_json
    assert response.get_json()['status'] == 'error'
    assert mailer.sent == []
