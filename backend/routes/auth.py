# routes/auth.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import create_token, get_current_user, require_auth

auth_bp = Blueprint('auth', __name__)


# ================= LOGIN =================
@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Check email and password, return the user and a signed token
    """
    data = request.get_json(silent=True) or {}

    if not data.get('email') or not data.get('password'):
        return jsonify({'success': False, 'error': 'Email and password required'}), 400

    user = database.authenticate_user(data['email'], data['password'])
    if not user:
        return jsonify({'success': False, 'error': 'Invalid credentials'}), 401

    return jsonify({
        'success': True,
        'message': 'Login successful',
        'data': user,
        'token': create_token(user)
    }), 200


# ================= CURRENT USER =================
@auth_bp.route('/me', methods=['GET'])
@require_auth
def me():
    return jsonify({'success': True, 'data': get_current_user()}), 200
