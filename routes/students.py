"""
Student routes for the Student Records API
"""

from flask import Blueprint, request, jsonify, current_app
from models.user import Role
from routes.auth import login_required, current_identity, json_body
from services.student_service import StudentService
from services.store import get_store
from utils.db_helpers import parse_pagination

students_bp = Blueprint('students', __name__)

@students_bp.route('', methods=['GET'])
@login_required()
def list_students():
    """Students list with pagination, search, class filter and sorting"""
    page, per_page = parse_pagination(request.args, current_app.config['STUDENTS_PER_PAGE'])
    result = StudentService(get_store()).list_students(
        current_identity(),
        page=page,
        per_page=per_page,
        search=request.args.get('search', '').strip(),
        class_name=request.args.get('className'),
        sort_by=request.args.get('sortBy', 'createdAt'),
        order=request.args.get('order', 'desc')
    )
    return jsonify(result)

@students_bp.route('', methods=['POST'])
@login_required(Role.ADMIN, Role.TEACHER)
def create_student():
    result = StudentService(get_store()).create_student(current_identity(), json_body())
    return jsonify(result), 201

@students_bp.route('/<int:student_id>', methods=['GET'])
@login_required()
def get_student(student_id):
    return jsonify(StudentService(get_store()).get_student(current_identity(), student_id))

@students_bp.route('/<int:student_id>', methods=['PUT'])
@login_required(Role.ADMIN)
def update_student(student_id):
    result = StudentService(get_store()).update_student(current_identity(), student_id, json_body())
    return jsonify(result)

@students_bp.route('/<int:student_id>', methods=['DELETE'])
@login_required(Role.ADMIN)
def delete_student(student_id):
    return jsonify(StudentService(get_store()).delete_student(current_identity(), student_id))

@students_bp.route('/<int:student_id>/assign-subjects', methods=['PUT'])
@login_required(Role.ADMIN)
def assign_subjects(student_id):
    """Replace the subjects assigned to a student"""
    result = StudentService(get_store()).assign_subjects(current_identity(), student_id, json_body())
    return jsonify(result)
