#routes/chat.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import get_current_user, require_auth

chat_bp = Blueprint('chat', __name__)


def _flag(name):
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() in ('1', 'true', 'yes')


def _member_group(user_id, group_id):
    for group in database.get_groups(user_id):
        if group['id'] == group_id:
            return group
    return None


# -------------------------------
# CONTACTS & BLOCKING
# -------------------------------
@chat_bp.route('/contacts', methods=['GET'])
@require_auth
def contacts():
    """
    Every other user with unread count, last message and block flag
    """
    data = database.get_contacts(get_current_user()['id'])
    return jsonify({"success": True, "count": len(data), "data": data}), 200


@chat_bp.route('/block/<target_id>', methods=['POST'])
@require_auth
def toggle_block(target_id):
    blocked = database.toggle_block_user(get_current_user()['id'], target_id)
    return jsonify({"success": True, "data": {"blocked": blocked}}), 200


# -------------------------------
# GROUPS
# -------------------------------
@chat_bp.route('/groups', methods=['GET'])
@require_auth
def list_groups():
    groups = database.get_groups(get_current_user()['id'])
    return jsonify({"success": True, "count": len(groups), "data": groups}), 200


@chat_bp.route('/groups', methods=['POST'])
@require_auth
def create_group():
    data = request.get_json(silent=True) or {}
    group = database.create_group(
        data.get('name'),
        data.get('memberIds', []),
        get_current_user()['id']
    )
    return jsonify({
        "success": True,
        "message": "Group created successfully",
        "data": group
    }), 201


@chat_bp.route('/groups/<group_id>/leave', methods=['POST'])
@require_auth
def leave_group(group_id):
    database.leave_group(get_current_user()['id'], group_id)
    return jsonify({"success": True, "message": "Left the group"}), 200


@chat_bp.route('/groups/<group_id>/avatar', methods=['PUT'])
@require_auth
def update_group_avatar(group_id):
    user = get_current_user()
    group = _member_group(user['id'], group_id)
    if not group:
        return jsonify({"success": False, "message": "Group not found"}), 404
    if user['id'] not in group['admins']:
        return jsonify({
            "success": False,
            "message": "Only group admins can change the avatar"
        }), 403

    data = request.get_json(silent=True) or {}
    if not data.get('avatar'):
        return jsonify({"success": False, "message": "avatar is required"}), 400

    database.update_group_avatar(group_id, data['avatar'])
    return jsonify({"success": True, "message": "Avatar updated"}), 200


@chat_bp.route('/groups/<group_id>/messages', methods=['POST'])
@require_auth
def send_group_message(group_id):
    data = request.get_json(silent=True) or {}
    message = database.send_group_message(
        get_current_user()['id'], group_id, data.get('content')
    )
    return jsonify({"success": True, "data": message}), 201


# -------------------------------
# MESSAGES
# -------------------------------
@chat_bp.route('/messages/<other_id>', methods=['GET'])
@require_auth
def get_messages(other_id):
    """
    Conversation with a user, or a group's messages with ?group=true
    """
    user_id = get_current_user()['id']
    is_group = bool(_flag('group'))
    if is_group and not _member_group(user_id, other_id):
        return jsonify({"success": False, "message": "Group not found"}), 404

    messages = database.get_messages(user_id, other_id, is_group)
    return jsonify({"success": True, "count": len(messages), "data": messages}), 200


@chat_bp.route('/messages', methods=['POST'])
@require_auth
def send_message():
    sender_id = get_current_user()['id']
    data = request.get_json(silent=True) or {}
    receiver_id = data.get('receiverId')

    if receiver_id and database.is_user_blocked(sender_id, receiver_id):
        return jsonify({
            "success": False,
            "message": "Unblock this contact to send messages"
        }), 403

    message = database.send_message(sender_id, receiver_id, data.get('content'))
    return jsonify({"success": True, "data": message}), 201


@chat_bp.route('/messages/<sender_id>/read', methods=['POST'])
@require_auth
def mark_read(sender_id):
    database.mark_messages_as_read(get_current_user()['id'], sender_id)
    return jsonify({"success": True}), 200


@chat_bp.route('/messages/<other_id>', methods=['DELETE'])
@require_auth
def clear_chat(other_id):
    user_id = get_current_user()['id']
    is_group = _flag('group')
    if is_group is None:
        is_group = other_id.startswith('g')
    if is_group and not _member_group(user_id, other_id):
        return jsonify({"success": False, "message": "Group not found"}), 404

    database.clear_chat(user_id, other_id, is_group)
    return jsonify({"success": True, "message": "Conversation cleared"}), 200


@chat_bp.route('/unread-count', methods=['GET'])
@require_auth
def unread_count():
    count = database.get_unread_messages_count(get_current_user()['id'])
    return jsonify({"success": True, "data": {"count": count}}), 200
