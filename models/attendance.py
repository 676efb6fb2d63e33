"""
Attendance model for the Student Records API
"""

import enum
from database import db
from datetime import datetime, date

class AttendanceStatus(str, enum.Enum):
    PRESENT = 'Present'
    ABSENT = 'Absent'
    LATE = 'Late'

class Attendance(db.Model):
    """Daily attendance record for a student"""
    __tablename__ = 'attendance'

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, default=date.today, index=True)
    status = db.Column(
        db.Enum(AttendanceStatus, name='attendance_status', values_callable=lambda statuses: [s.value for s in statuses]),
        nullable=False
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Unique constraint to prevent duplicate attendance for same student and date
    __table_args__ = (db.UniqueConstraint('student_id', 'date', name='unique_student_date_attendance'),)

    def to_dict(self, include_student=False):
        """Convert attendance record to dictionary"""
        student = self.student.to_summary() if include_student and self.student else self.student_id
        return {
            'id': self.id,
            'student': student,
            'date': self.date.isoformat() if self.date else None,
            'status': self.status.value if self.status else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        status = self.status.value if self.status else '?'
        return f'<Attendance student={self.student_id} {self.date} {status}>'
