#routes/events.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import require_auth, require_role

events_bp = Blueprint('events', __name__)

EVENT_EDITORS = ('DOCENTE', 'PRECEPTOR', 'DIRECTIVO', 'ADMIN')


@events_bp.route('/', methods=['GET'])
@events_bp.route('', methods=['GET'])
@require_auth
def list_events():
    """
    Calendar events, optionally restricted to one month (?month=YYYY-MM)
    """
    month = request.args.get('month')
    events = database.get_events()
    if month:
        events = [e for e in events if e['date'].startswith(month)]

    return jsonify({
        "success": True,
        "count": len(events),
        "data": events
    }), 200


@events_bp.route('/', methods=['POST'])
@events_bp.route('', methods=['POST'])
@require_role(*EVENT_EDITORS)
def add_event():
    data = request.get_json(silent=True) or {}
    event = database.add_event(data)
    return jsonify({
        "success": True,
        "message": "Event created successfully",
        "data": event
    }), 201


@events_bp.route('/<event_id>', methods=['DELETE'])
@require_role(*EVENT_EDITORS)
def delete_event(event_id):
    database.delete_event(event_id)
    return jsonify({"success": True, "message": "Event deleted successfully"}), 200
