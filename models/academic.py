"""
Academic structure models for the Student Records API
"""

from database import db
from datetime import datetime

class Subject(db.Model):
    """Subject that students can be assigned to and marked in"""
    __tablename__ = 'subject'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(20), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    marks = db.relationship('Mark', backref='subject', lazy='dynamic')

    def to_summary(self):
        return {'id': self.id, 'name': self.name, 'code': self.code}

    def to_dict(self):
        """Convert subject to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'code': self.code,
            'description': self.description,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Subject {self.code}: {self.name}>'
