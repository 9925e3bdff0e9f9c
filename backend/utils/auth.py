# utils/auth.py
"""
Request authentication helpers
1. Bearer JWT issued by POST /auth/login
2. Development: X-User-Id header
"""
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, request

from services import database

TOKEN_LIFETIME = timedelta(days=1)


def create_token(user):
    payload = {
        'user_id': str(user['id']),
        'email': user['email'],
        'role': user['role'],
        'exp': datetime.now(timezone.utc) + TOKEN_LIFETIME,
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm='HS256')


def decode_token():
    """Payload of the Authorization bearer token, or None"""
    auth_header = request.headers.get('Authorization')
    if not auth_header or not auth_header.startswith('Bearer '):
        return None

    token = auth_header.split(' ', 1)[1]
    try:
        return jwt.decode(token, current_app.config['SECRET_KEY'], algorithms=['HS256'])
    except jwt.InvalidTokenError:
        return None


def get_current_user():
    """
    Resolve the calling user from the request headers.

    Returns:
        user dict if found, None otherwise
    """
    payload = decode_token()
    if payload:
        user = database.get_user_by_id(payload.get('user_id'))
        if user:
            return user

    user_id = request.headers.get('X-User-Id')
    if user_id:
        return database.get_user_by_id(user_id)

    return None


def _auth_required_response():
    return {
        'success': False,
        'error': 'Authentication required',
        'code': 'AUTH_REQUIRED'
    }, 401


def require_auth(f):
    """Decorator to require an authenticated user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not get_current_user():
            return _auth_required_response()
        return f(*args, **kwargs)
    return decorated_function


def require_role(*allowed_roles):
    """
    Decorator to require specific user role(s).

    Usage:
    @users_bp.route('', methods=['POST'])
    @require_role('ADMIN')
    def create_user():
        ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = get_current_user()
            if not user:
                return _auth_required_response()

            if user['role'] not in allowed_roles:
                return {
                    'success': False,
                    'error': f"Role {user['role']} not allowed. Required: {', '.join(allowed_roles)}",
                    'code': 'PERMISSION_DENIED'
                }, 403

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def is_self_or_role(user_id, *roles):
    user = get_current_user()
    return bool(user) and (user['id'] == user_id or user['role'] in roles)
