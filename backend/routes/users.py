#routes/users.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import get_current_user, is_self_or_role, require_auth, require_role

users_bp = Blueprint('users', __name__)


def _admin_count(users):
    return len([u for u in users if u['role'] == 'ADMIN'])


# -------------------------------
# GET ALL USERS
# -------------------------------
@users_bp.route('/', methods=['GET'])
@users_bp.route('', methods=['GET'])
@require_auth
def get_users():
    """
    Get all users, optionally filtered by role or a name/email search
    """
    role = request.args.get('role')
    search = (request.args.get('search') or '').lower()

    users = database.get_users()
    if role:
        users = [u for u in users if u['role'] == role]
    if search:
        users = [
            u for u in users
            if search in u['name'].lower() or search in u['email'].lower()
        ]

    return jsonify({
        "success": True,
        "count": len(users),
        "data": users
    }), 200


# -------------------------------
# GET SINGLE USER
# -------------------------------
@users_bp.route("/<user_id>", methods=["GET"])
@require_auth
def get_user(user_id):
    user = database.get_user_by_id(user_id)
    if not user:
        return jsonify({
            "success": False,
            "message": "User not found"
        }), 404

    return jsonify({"success": True, "data": user}), 200


# -------------------------------
# CREATE USER
# -------------------------------
@users_bp.route("/", methods=["POST"])
@users_bp.route("", methods=["POST"])
@require_role('ADMIN')
def create_user():
    data = request.get_json(silent=True) or {}
    user = database.add_user(data)

    return jsonify({
        "success": True,
        "message": "User created successfully",
        "data": user
    }), 201


# -------------------------------
# UPDATE USER
# -------------------------------
@users_bp.route("/<user_id>", methods=["PUT", "PATCH"])
@require_auth
def update_user(user_id):
    if not is_self_or_role(user_id, 'ADMIN'):
        return jsonify({
            "success": False,
            "message": "You can only edit your own profile"
        }), 403

    data = request.get_json(silent=True) or {}

    # Only an admin may change roles, and the last admin keeps the role
    if 'role' in data:
        current = get_current_user()
        if current['role'] != 'ADMIN':
            return jsonify({
                "success": False,
                "message": "Only an administrator can change roles"
            }), 403
        target = database.get_user_by_id(user_id)
        if (target and target['role'] == 'ADMIN' and data['role'] != 'ADMIN'
                and _admin_count(database.get_users()) <= 1):
            return jsonify({
                "success": False,
                "message": "At least one administrator is required"
            }), 400

    user = database.update_user(user_id, data)
    if not user:
        return jsonify({
            "success": False,
            "message": "User not found"
        }), 404

    return jsonify({
        "success": True,
        "message": "User updated successfully",
        "data": user
    }), 200


# -------------------------------
# DELETE USER
# -------------------------------
@users_bp.route("/<user_id>", methods=["DELETE"])
@require_role('ADMIN')
def delete_user(user_id):
    target = database.get_user_by_id(user_id)
    if not target:
        return jsonify({
            "success": False,
            "message": "User not found"
        }), 404

    if target['role'] == 'ADMIN' and _admin_count(database.get_users()) <= 1:
        return jsonify({
            "success": False,
            "message": "At least one administrator is required"
        }), 400

    database.delete_user(user_id)
    return jsonify({
        "success": True,
        "message": "User deleted successfully"
    }), 200
