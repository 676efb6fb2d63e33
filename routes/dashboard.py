"""
Dashboard and analytics routes for the Student Records API
"""

from flask import Blueprint, jsonify, current_app
from models.user import Role
from routes.auth import login_required, current_identity
from services.dashboard_service import DashboardService
from services.store import get_store

dashboard_bp = Blueprint('dashboard', __name__)

@dashboard_bp.route('/dashboard', methods=['GET'])
@login_required()
def dashboard():
    """Role-dependent dashboard statistics"""
    return jsonify(DashboardService(get_store()).get_dashboard_stats(current_identity()))

@dashboard_bp.route('/analytics', methods=['GET'])
@login_required(Role.ADMIN, Role.TEACHER)
def analytics():
    config = current_app.config
    result = DashboardService(get_store()).get_analytics(
        current_identity(),
        top_limit=config['TOP_PERFORMERS_LIMIT'],
        weak_threshold=config['WEAK_STUDENT_THRESHOLD'],
        attendance_threshold=config['ATTENDANCE_THRESHOLD']
    )
    return jsonify(result)
