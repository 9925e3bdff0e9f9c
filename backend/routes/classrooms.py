#routes/classrooms.py
from flask import Blueprint, request, jsonify

from services import database
from utils.auth import require_auth, require_role
from utils.helpers import generate_uuid

classrooms_bp = Blueprint('classrooms', __name__)


@classrooms_bp.route('/', methods=['GET'])
@classrooms_bp.route('', methods=['GET'])
@require_auth
def list_classrooms():
    classrooms = database.get_classrooms()
    return jsonify({
        "success": True,
        "count": len(classrooms),
        "data": classrooms
    }), 200


@classrooms_bp.route('/', methods=['POST'])
@classrooms_bp.route('', methods=['POST'])
@classrooms_bp.route('/<classroom_id>', methods=['PUT'])
@require_role('ADMIN')
def save_classroom(classroom_id=None):
    data = request.get_json(silent=True) or {}
    classroom = {
        'id': classroom_id or data.get('id') or generate_uuid(),
        'name': data.get('name'),
        'capacity': data.get('capacity'),
        'location': data.get('location'),
    }

    saved = database.save_classroom(classroom)
    return jsonify({
        "success": True,
        "message": "Classroom saved successfully",
        "data": saved
    }), 200 if classroom_id else 201


@classrooms_bp.route('/<classroom_id>', methods=['DELETE'])
@require_role('ADMIN')
def delete_classroom(classroom_id):
    database.delete_classroom(classroom_id)
    return jsonify({"success": True, "message": "Classroom deleted successfully"}), 200
