"""
Subject routes for the Student Records API
"""

from flask import Blueprint, request, jsonify, current_app
from models.user import Role
from routes.auth import login_required, current_identity, json_body
from services.subject_service import SubjectService
from services.store import get_store
from utils.db_helpers import parse_pagination

subjects_bp = Blueprint('subjects', __name__)

@subjects_bp.route('', methods=['GET'])
@login_required()
def list_subjects():
    page, per_page = parse_pagination(request.args, current_app.config['SUBJECTS_PER_PAGE'])
    result = SubjectService(get_store()).list_subjects(current_identity(), page=page, per_page=per_page)
    return jsonify(result)

@subjects_bp.route('', methods=['POST'])
@login_required(Role.ADMIN)
def create_subject():
    result = SubjectService(get_store()).create_subject(current_identity(), json_body())
    return jsonify(result), 201
