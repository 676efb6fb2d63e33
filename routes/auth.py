"""
Authentication routes for the Student Records API
Handles registration, login and the bearer-token guard used by every other route
"""

from functools import wraps
from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from models.user import User
from services.access_policy import Identity
from services.auth_service import AuthService
from services.store import get_store
from utils.errors import AuthenticationError, AuthorizationError, ValidationError
from utils.validators import parse_record_id

auth_bp = Blueprint('auth', __name__)

def json_body():
    """Request JSON as a dict; anything else is a validation error"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

def current_identity():
    """Identity of the authenticated caller"""
    return g.identity

# Authentication decorator
def login_required(*roles):
    """Require a valid bearer token, and one of ``roles`` when given"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()

            user_id = parse_record_id(get_jwt_identity())
            user = get_store().get(User, user_id) if user_id else None
            if user is None:
                raise AuthenticationError("Not authorized, user not found")

            g.current_user = user
            g.identity = Identity(user.id, user.role)

            if roles and user.role not in roles:
                raise AuthorizationError(f"Role {user.role.value} is not allowed to access this resource")

            return f(*args, **kwargs)
        return decorated_function
    return decorator

@auth_bp.route('/register', methods=['POST'])
def register():
    """Self-registration for teachers and students"""
    payload = AuthService(get_store()).register(json_body())
    return jsonify(payload), 201

@auth_bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    email = data.get('email')
    password = data.get('password')
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password are required")

    payload = AuthService(get_store()).login(email, password)
    return jsonify(payload)

@auth_bp.route('/me', methods=['GET'])
@login_required()
def me():
    return jsonify(g.current_user.to_dict())

@auth_bp.route('/change-password', methods=['POST'])
@login_required()
def change_password():
    """Change password for the authenticated user"""
    data = json_body()
    current_password = data.get('currentPassword')
    new_password = data.get('newPassword')
    if not isinstance(current_password, str) or not isinstance(new_password, str):
        raise ValidationError("Current and new password are required")

    result = AuthService(get_store()).change_password(
        current_identity().user_id, current_password, new_password
    )
    return jsonify(result)
