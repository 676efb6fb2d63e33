"""
Student model for the Student Records API
"""

from database import db
from datetime import datetime

# Many-to-many link between students and their subjects
student_subjects = db.Table(
    'student_subject',
    db.Column('student_id', db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), primary_key=True),
    db.Column('subject_id', db.Integer, db.ForeignKey('subject.id', ondelete='CASCADE'), primary_key=True)
)

class Student(db.Model):
    """Student record, owned by exactly one user"""
    __tablename__ = 'student'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    roll_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    class_name = db.Column(db.String(50), nullable=False, index=True)
    age = db.Column(db.Integer, nullable=True)
    address = db.Column(db.Text, nullable=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    subjects = db.relationship('Subject', secondary=student_subjects, backref='students', lazy='select')
    marks = db.relationship('Mark', backref='student', lazy='dynamic', cascade='all, delete', passive_deletes=True)
    attendance_records = db.relationship('Attendance', backref='student', lazy='dynamic', cascade='all, delete', passive_deletes=True)

    def to_summary(self):
        """Short form embedded in mark and attendance rows"""
        return {'id': self.id, 'name': self.name, 'rollNumber': self.roll_number}

    def to_dict(self, include_subjects=True):
        """Convert student to dictionary"""
        data = {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'rollNumber': self.roll_number,
            'className': self.class_name,
            'age': self.age,
            'address': self.address,
            'user': self.user_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
        if include_subjects:
            data['subjects'] = [subject.to_summary() for subject in self.subjects]
        return data

    def __repr__(self):
        return f'<Student {self.roll_number}: {self.name}>'
