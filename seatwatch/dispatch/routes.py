from flask import Blueprint, current_app, jsonify, request

from seatwatch.dispatch.services import get_seatwatch

dispatch_bp = Blueprint('dispatch', __name__, url_prefix='/api/dispatch')


@dispatch_bp.route('', methods=['POST'])
def trigger():
    """Run one dispatch cycle on demand"""
    payload = request.get_json(silent=True)
    source = payload.get('source') if isinstance(payload, dict) else None
    try:
        outcome = get_seatwatch().dispatcher.on_trigger(source or 'api')
    except Exception as e:
        current_app.logger.error(f'Dispatch failed: {str(e)}')
        return jsonify({'status': 'error', 'error': str(e)}), 500
    return jsonify(outcome.to_dict())
