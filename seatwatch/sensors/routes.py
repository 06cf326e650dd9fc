from flask import Blueprint, current_app, jsonify, request

from seatwatch.dispatch.services import get_seatwatch
from seatwatch.errors import NoDataError, UnavailableError
from seatwatch.sensors.detector import has_open_seat, open_seats
from seatwatch.sensors.models import SeatState

sensors_bp = Blueprint('sensors', __name__, url_prefix='/api/seats')


@sensors_bp.route('', methods=['GET'])
def current_seats():
    """Latest seat snapshot with the open seat numbers"""
    seat_count = current_app.config.get('SEAT_COUNT')
    try:
        snapshot = get_seatwatch().reader.current()
    except NoDataError as e:
        return jsonify({'error': str(e)}), 404
    except UnavailableError as e:
        current_app.logger.error(f'Seat status unavailable: {e}')
        return jsonify({'error': 'Seat status is temporarily unavailable'}), 503

    data = snapshot.to_dict()
    data['open_seats'] = open_seats(snapshot, seat_count)
    data['seat_available'] = has_open_seat(snapshot, seat_count)
    return jsonify(data)


@sensors_bp.route('', methods=['POST'])
def record_seats():
    """Sensor ingestion: store a new snapshot"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    seats = payload.get('seats')
    seat_count = current_app.config.get('SEAT_COUNT')

    if not isinstance(seats, list) or not seats:
        return jsonify({'error': 'seats must be a non-empty list'}), 400

    unknown = [s for s in seats if s not in SeatState.values()]
    if unknown:
        return jsonify({'error': f'Unknown seat states: {unknown}',
                        'allowed': SeatState.values()}), 400

    if seat_count is not None and len(seats) != seat_count:
        return jsonify({'error': f'Expected {seat_count} seats, got {len(seats)}'}), 400

    try:
        snapshot = get_seatwatch().snapshots.record(seats)
    except Exception as e:
        current_app.logger.error(f'Recording seat snapshot failed: {str(e)}')
        return jsonify({'error': 'Could not store the seat snapshot'}), 500

    current_app.logger.info(f'Recorded seat snapshot: {seats}')
    return jsonify(snapshot.to_dict()), 201
