"""
User model for the Student Records API
"""

import enum
from database import db
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash

class Role(str, enum.Enum):
    """Closed set of caller roles"""
    ADMIN = 'admin'
    TEACHER = 'teacher'
    STUDENT = 'student'

    @classmethod
    def parse(cls, value):
        """Return the Role for a raw string, or None if it is not a role"""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

class User(db.Model):
    """Account used to log in to the API"""
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(Role, name='user_role', values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.STUDENT
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    student = db.relationship('Student', backref='user', uselist=False)

    def set_password(self, password):
        """Set password hash"""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check password against hash"""
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Convert user to dictionary, without the password hash"""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role.value if self.role else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.email} ({self.role.value if self.role else "?"})>'
