#routes/courses.py
from flask import Blueprint, jsonify

from services import database
from utils.auth import get_current_user, require_auth, require_role

courses_bp = Blueprint('courses', __name__)


@courses_bp.route('/student', methods=['GET'])
@require_auth
def student_courses():
    courses = database.get_student_courses(get_current_user()['id'])
    return jsonify({"success": True, "count": len(courses), "data": courses}), 200


@courses_bp.route('/teacher', methods=['GET'])
@require_auth
def teacher_courses():
    courses = database.get_teacher_courses(get_current_user()['id'])
    return jsonify({"success": True, "count": len(courses), "data": courses}), 200


@courses_bp.route('/<course_id>/toggle-status', methods=['POST'])
@require_role('DOCENTE', 'DIRECTIVO', 'ADMIN')
def toggle_status(course_id):
    """Archive an active course or reactivate an archived one"""
    courses = database.toggle_course_status(course_id)
    return jsonify({"success": True, "data": courses}), 200


@courses_bp.route('/<course_id>/students', methods=['GET'])
@require_auth
def course_students(course_id):
    students = database.get_course_students(course_id)
    return jsonify({"success": True, "count": len(students), "data": students}), 200
