#routes/justifications.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import get_current_user, require_auth, require_role

justifications_bp = Blueprint('justifications', __name__)

REVIEWERS = ('PRECEPTOR', 'DIRECTIVO', 'ADMIN')


@justifications_bp.route('/', methods=['GET'])
@justifications_bp.route('', methods=['GET'])
@require_auth
def list_requests():
    """
    Students see their own absence justifications, staff see all of them.
    Filter by ?status=PENDING|APPROVED|REJECTED.
    """
    user = get_current_user()
    status = request.args.get('status')

    reqs = database.get_justification_requests()
    if user['role'] == 'ALUMNO':
        reqs = [r for r in reqs if r['studentId'] == user['id']]
    if status:
        reqs = [r for r in reqs if r['status'] == status]

    return jsonify({"success": True, "count": len(reqs), "data": reqs}), 200


@justifications_bp.route('/', methods=['POST'])
@justifications_bp.route('', methods=['POST'])
@require_role('ALUMNO')
def add_request():
    user = get_current_user()
    data = request.get_json(silent=True) or {}
    data['studentId'] = user['id']
    data.setdefault('studentName', user['name'])

    created = database.add_justification_request(data)
    return jsonify({
        "success": True,
        "message": "Justification submitted",
        "data": created
    }), 201


@justifications_bp.route('/<request_id>/status', methods=['PUT', 'PATCH'])
@require_role(*REVIEWERS)
def update_status(request_id):
    data = request.get_json(silent=True) or {}
    reqs = database.update_justification_status(request_id, data.get('status'))
    return jsonify({"success": True, "data": reqs}), 200
