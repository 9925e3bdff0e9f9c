#routes/careers.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import require_auth, require_role
from utils.helpers import generate_uuid

careers_bp = Blueprint('careers', __name__)


def find_career(career_id):
    for career in database.get_careers():
        if career['id'] == career_id:
            return career
    return None


def _not_found():
    return jsonify({"success": False, "message": "Career not found"}), 404


@careers_bp.route('/', methods=['GET'])
@careers_bp.route('', methods=['GET'])
@require_auth
def list_careers():
    careers = database.get_careers()
    return jsonify({
        "success": True,
        "count": len(careers),
        "data": careers
    }), 200


@careers_bp.route('/', methods=['POST'])
@careers_bp.route('', methods=['POST'])
@careers_bp.route('/<career_id>', methods=['PUT'])
@require_role('ADMIN')
def save_career(career_id=None):
    """
    Create or replace a career.

    With "preserveSubjects": true the stored subject list is kept and only
    the name and years are taken from the request.
    """
    data = request.get_json(silent=True) or {}
    preserve_subjects = bool(data.pop('preserveSubjects', False))

    career = {
        'id': career_id or data.get('id') or generate_uuid(),
        'name': data.get('name'),
        'years': data.get('years') or [],
        'subjects': data.get('subjects') or [],
    }

    if preserve_subjects:
        existing = find_career(career['id'])
        if existing:
            career['subjects'] = existing['subjects']

    saved = database.save_career(career)
    return jsonify({
        "success": True,
        "message": "Career saved successfully",
        "data": saved
    }), 200 if career_id else 201


@careers_bp.route('/<career_id>', methods=['DELETE'])
@require_role('ADMIN')
def delete_career(career_id):
    if not find_career(career_id):
        return _not_found()

    database.delete_career(career_id)
    return jsonify({"success": True, "message": "Career deleted successfully"}), 200


# -------------------------------
# SUBJECTS INSIDE A CAREER
# -------------------------------
@careers_bp.route('/<career_id>/subjects', methods=['POST'])
@require_role('ADMIN')
def add_subject(career_id):
    career = find_career(career_id)
    if not career:
        return _not_found()

    data = request.get_json(silent=True) or {}
    subject = {
        'id': data.get('id') or generate_uuid(),
        'name': data.get('name'),
        'year': data.get('year'),
    }
    career['subjects'] = career['subjects'] + [subject]

    database.save_career(career)
    return jsonify({
        "success": True,
        "message": "Subject added successfully",
        "data": subject
    }), 201


@careers_bp.route('/<career_id>/subjects/<subject_id>', methods=['DELETE'])
@require_role('ADMIN')
def delete_subject(career_id, subject_id):
    career = find_career(career_id)
    if not career:
        return _not_found()

    career['subjects'] = [s for s in career['subjects'] if s['id'] != subject_id]
    saved = database.save_career(career)
    return jsonify({
        "success": True,
        "message": "Subject deleted successfully",
        "data": saved
    }), 200
