"""
Attendance routes for the Student Records API
"""

from flask import Blueprint, request, jsonify, current_app
from models.user import Role
from routes.auth import login_required, current_identity, json_body
from services.attendance_service import AttendanceService
from services.store import get_store
from utils.db_helpers import parse_pagination

attendance_bp = Blueprint('attendance', __name__)

@attendance_bp.route('', methods=['POST'])
@login_required(Role.ADMIN, Role.TEACHER)
def mark_attendance():
    result = AttendanceService(get_store()).mark_attendance(current_identity(), json_body())
    return jsonify(result), 201

@attendance_bp.route('/student/<int:student_id>', methods=['GET'])
@login_required()
def student_attendance(student_id):
    """Attendance history for one student"""
    page, per_page = parse_pagination(request.args, current_app.config['ATTENDANCE_PER_PAGE'])
    result = AttendanceService(get_store()).student_attendance(
        current_identity(), student_id, page=page, per_page=per_page
    )
    return jsonify(result)

@attendance_bp.route('/date/<date>', methods=['GET'])
@login_required(Role.ADMIN, Role.TEACHER)
def attendance_by_date(date):
    return jsonify(AttendanceService(get_store()).attendance_by_date(current_identity(), date))

@attendance_bp.route('/summary/<int:student_id>', methods=['GET'])
@login_required()
def attendance_summary(student_id):
    return jsonify(AttendanceService(get_store()).attendance_summary(current_identity(), student_id))
