"""
Mark routes for the Student Records API
"""

from flask import Blueprint, request, jsonify, current_app
from models.user import Role
from routes.auth import login_required, current_identity, json_body
from services.mark_service import MarkService
from services.store import get_store
from utils.db_helpers import parse_pagination

marks_bp = Blueprint('marks', __name__)

@marks_bp.route('', methods=['POST'])
@login_required(Role.ADMIN, Role.TEACHER)
def add_mark():
    result = MarkService(get_store()).add_mark(current_identity(), json_body())
    return jsonify(result), 201

@marks_bp.route('', methods=['GET'])
@login_required()
def list_marks():
    """Marks list; admin and teacher may filter by studentId"""
    page, per_page = parse_pagination(request.args, current_app.config['MARKS_PER_PAGE'])
    result = MarkService(get_store()).list_marks(
        current_identity(),
        page=page,
        per_page=per_page,
        student_id=request.args.get('studentId')
    )
    return jsonify(result)

@marks_bp.route('/average/<int:student_id>', methods=['GET'])
@login_required()
def student_average(student_id):
    return jsonify(MarkService(get_store()).student_average(current_identity(), student_id))
