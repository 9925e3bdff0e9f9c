#routes/finals.py
from flask import Blueprint, request, jsonify

from services import database
from services.courses import check_exam_eligibility
from utils.auth import get_current_user, require_auth, require_role

finals_bp = Blueprint('finals', __name__)

EXAM_MANAGERS = ('ADMIN', 'DIRECTIVO', 'PRECEPTOR')


@finals_bp.route('/', methods=['GET'])
@finals_bp.route('', methods=['GET'])
@require_auth
def list_finals():
    """
    Final exam sessions as seen by the current user
    (isRegistered and registeredCount filled in)
    """
    finals = database.get_final_exams(get_current_user()['id'])
    return jsonify({"success": True, "count": len(finals), "data": finals}), 200


@finals_bp.route('/', methods=['POST'])
@finals_bp.route('', methods=['POST'])
@require_role(*EXAM_MANAGERS)
def add_final():
    data = request.get_json(silent=True) or {}
    exam = database.add_final_exam(data)
    return jsonify({
        "success": True,
        "message": "Final exam created successfully",
        "data": exam
    }), 201


@finals_bp.route('/<exam_id>', methods=['DELETE'])
@require_role(*EXAM_MANAGERS)
def delete_final(exam_id):
    database.delete_final_exam(exam_id)
    return jsonify({"success": True, "message": "Final exam deleted"}), 200


@finals_bp.route('/<exam_id>/registration', methods=['POST'])
@require_auth
def toggle_registration(exam_id):
    """
    Register for a session, or drop an existing registration.
    Registering requires an approved, not promoted, course.
    """
    user = get_current_user()
    exam = next(
        (f for f in database.get_final_exams(user['id']) if f['id'] == exam_id),
        None
    )
    if not exam:
        return jsonify({"success": False, "message": "Final exam not found"}), 404

    if not exam['isRegistered']:
        courses = database.get_student_courses(user['id'])
        allowed, reason = check_exam_eligibility(courses, exam)
        if not allowed:
            return jsonify({"success": False, "message": reason}), 403

    registered = database.toggle_final_registration(user['id'], exam_id)
    return jsonify({"success": True, "data": {"registered": registered}}), 200
