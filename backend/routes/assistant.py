#routes/assistant.py
from flask import Blueprint, request, jsonify

from services import assistant
from utils.auth import require_auth, require_role

assistant_bp = Blueprint('assistant', __name__)


def _missing(*fields):
    data = request.get_json(silent=True) or {}
    missing = [f for f in fields if not data.get(f)]
    if missing:
        return data, (jsonify({
            "success": False,
            "message": f"{', '.join(missing)} required"
        }), 400)
    return data, None


@assistant_bp.route('/tutor', methods=['POST'])
@require_auth
def tutor():
    data, error = _missing('question', 'subject')
    if error:
        return error
    answer = assistant.generate_tutor_response(data['question'], data['subject'])
    return jsonify({"success": True, "data": {"text": answer}}), 200


@assistant_bp.route('/lesson-plan', methods=['POST'])
@require_role('DOCENTE', 'DIRECTIVO', 'ADMIN')
def lesson_plan():
    data, error = _missing('topic', 'gradeLevel')
    if error:
        return error
    plan = assistant.generate_lesson_plan(data['topic'], data['gradeLevel'])
    return jsonify({"success": True, "data": {"text": plan}}), 200


@assistant_bp.route('/analysis', methods=['POST'])
@require_role('DIRECTIVO', 'ADMIN')
def analysis():
    data, error = _missing('description')
    if error:
        return error
    summary = assistant.analyze_institutional_data(data['description'])
    return jsonify({"success": True, "data": {"text": summary}}), 200
