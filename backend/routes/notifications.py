#routes/notifications.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import get_current_user, require_auth, require_role

notifications_bp = Blueprint('notifications', __name__)

NOTIFICATION_SENDERS = ('DOCENTE', 'PRECEPTOR', 'DIRECTIVO', 'ADMIN')


@notifications_bp.route('/', methods=['GET'])
@notifications_bp.route('', methods=['GET'])
@require_auth
def list_notifications():
    """
    Notifications addressed to the current user or broadcast to everyone,
    newest first
    """
    notifications = database.get_notifications(get_current_user()['id'])
    return jsonify({
        "success": True,
        "count": len(notifications),
        "data": notifications
    }), 200


@notifications_bp.route('/unread-count', methods=['GET'])
@require_auth
def unread_count():
    count = database.get_unread_count(get_current_user()['id'])
    return jsonify({"success": True, "data": {"count": count}}), 200


@notifications_bp.route('/', methods=['POST'])
@notifications_bp.route('', methods=['POST'])
@require_role(*NOTIFICATION_SENDERS)
def add_notification():
    data = request.get_json(silent=True) or {}
    notification = database.add_notification(data)
    return jsonify({
        "success": True,
        "message": "Notification created successfully",
        "data": notification
    }), 201


@notifications_bp.route('/<notification_id>/read', methods=['POST', 'PATCH'])
@require_auth
def mark_as_read(notification_id):
    database.mark_notification_as_read(notification_id)
    return jsonify({"success": True}), 200


@notifications_bp.route('/read-all', methods=['POST', 'PATCH'])
@require_auth
def mark_all_as_read():
    database.mark_all_notifications_as_read(get_current_user()['id'])
    return jsonify({"success": True}), 200


@notifications_bp.route('/<notification_id>', methods=['DELETE'])
@require_auth
def delete_notification(notification_id):
    database.delete_notification(notification_id)
    return jsonify({"success": True, "message": "Notification deleted"}), 200
