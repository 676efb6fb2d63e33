"""
Error types for the Student Records API
Every error maps to an HTTP status and renders as {"message": ...}
"""

class AppError(Exception):
    """Base class for errors surfaced to API clients"""
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'message': self.message}

class ValidationError(AppError):
    """Missing or malformed required field"""
    status_code = 400
    default_message = 'Invalid request'

class AuthenticationError(AppError):
    """Bad credentials or a missing, expired or invalid token"""
    status_code = 401
    default_message = 'Not authorized'

class AuthorizationError(AppError):
    """Role or ownership check failed"""
    status_code = 403
    default_message = 'Access denied'

class NotFoundError(AppError):
    """Referenced id does not resolve"""
    status_code = 404
    default_message = 'Not found'

class ConflictError(AppError):
    """Uniqueness constraint violated"""
    status_code = 409
    default_message = 'Record already exists'

class UnexpectedError(AppError):
    """Store or infrastructure failure"""
    status_code = 500
