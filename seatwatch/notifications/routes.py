from flask import Blueprint, current_app, jsonify, request

from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import InvalidEmailError
from seatwatch.notifications.forms import NotificationRequestForm
from seatwatch.notifications.services import request_notification

notifications_bp = Blueprint('notifications', __name__, url_prefix='/notify')


def _invalid(errors):
    return jsonify({'error': 'Invalid request', 'errors': errors}), 400


@notifications_bp.route('', methods=['POST'])
def enqueue():
    """Queue the submitted email for the next open seat"""
    # The form only understands a JSON object of strings
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _invalid({'body': ['Request body must be a JSON object']})
        if not isinstance(payload.get('email'), str):
            return _invalid({'email': ['Email must be a string']})

    try:
        form = NotificationRequestForm()
        if not form.validate_on_submit():
            return _invalid(form.errors)

        pending = request_notification(form.email.data)
    except InvalidEmailError as e:
        return _invalid({'email': [str(e)]})
    except Exception as e:
        current_app.logger.error(f'Notification request failed: {str(e)}')
        return jsonify({'error': 'Could not queue the notification request'}), 500

    current_app.logger.info(f"Notification requested for {pending.recipient_email}")
    return jsonify({
        'success': True,
        'message': 'You are in the queue. You will get an email when a seat is available.',
        'request': pending.to_dict()
    }), 201


@notifications_bp.route('/queue')
def queue_size():
    """Number of users waiting for a seat"""
    try:
        return jsonify({'pending': get_seatwatch().queue.size()})
    except Exception as e:
        current_app.logger.error(f'Queue size lookup failed: {str(e)}')
        return jsonify({'error': 'Queue is temporarily unavailable'}), 500
