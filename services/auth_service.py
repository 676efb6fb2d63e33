"""
Authentication service for the Student Records API
Handles registration, login, tokens and password changes
"""

from flask import current_app
from flask_jwt_extended import create_access_token
from models.user import User, Role
from utils.errors import (
    ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError
)
from utils.validators import validate_required, validate_name, validate_email, validate_password

SELF_REGISTER_ROLES = (Role.TEACHER, Role.STUDENT)

INVALID_CREDENTIALS = "Invalid credentials"

def normalize_email(email):
    return (email or '').strip().lower()

class AuthService:
    """Authentication service class"""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def issue_token(user):
        """Sign a bearer token carrying {id, role}; sub holds the id as text"""
        return create_access_token(
            identity=str(user.id), additional_claims={'id': user.id, 'role': user.role.value}
        )

    def _auth_payload(self, user):
        payload = user.to_dict()
        payload['token'] = self.issue_token(user)
        return payload

    def register(self, data):
        """Register a teacher or student account"""
        is_valid, message = validate_required(data, ['name', 'email', 'password', 'role'])
        if not is_valid:
            raise ValidationError(message)

        role = Role.parse(data.get('role'))
        if role is Role.ADMIN:
            raise AuthorizationError("Cannot register as admin. Contact system administrator.")
        if role not in SELF_REGISTER_ROLES:
            raise ValidationError("Role must be one of: teacher, student")

        name = str(data['name']).strip()
        email = normalize_email(str(data['email']))
        password = str(data['password'])

        for is_valid, message in (validate_name(name), validate_email(email), validate_password(password)):
            if not is_valid:
                raise ValidationError(message)

        if self.store.find_user_by_email(email):
            raise ConflictError("User already exist")

        user = User(name=name, email=email, role=role)
        user.set_password(password)
        self.store.add(user, conflict_message="User already exist")

        current_app.logger.info(f"User registered: {user.email} as {user.role.value}")
        return self._auth_payload(user)

    def login(self, email, password):
        """Authenticate by email and password.

        An unknown email and a wrong password raise the same error so callers
        cannot probe which accounts exist.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.store.find_user_by_email(normalize_email(email))
        if user is None or not user.check_password(password):
            current_app.logger.info("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        current_app.logger.info(f"User logged in: {user.email}")
        return self._auth_payload(user)

    def get_user(self, user_id):
        user = self.store.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def change_password(self, user_id, current_password, new_password):
        """Change password for an authenticated user"""
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")

        is_valid, message = validate_password(new_password)
        if not is_valid:
            raise ValidationError(message)

        user = self.get_user(user_id)
        if not user.check_password(current_password):
            raise AuthenticationError("Current password is incorrect")

        user.set_password(new_password)
        self.store.commit()

        current_app.logger.info(f"Password changed for {user.email}")
        return {'message': "Password changed successfully"}
