"""
Marks model for the Student Records API
Mark model for exam score tracking
"""

import enum
from database import db
from datetime import datetime

class ExamType(str, enum.Enum):
    """Kinds of assessment a mark can be recorded for"""
    MID = 'Mid'
    FINAL = 'Final'
    QUIZ = 'Quiz'
    ASSIGNMENT = 'Assignment'

class Mark(db.Model):
    """Score out of 100 for one student, subject and exam type"""
    __tablename__ = 'mark'

    MIN_MARKS = 0
    MAX_MARKS = 100

    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False, index=True)
    subject_id = db.Column(db.Integer, db.ForeignKey('subject.id'), nullable=False, index=True)
    marks = db.Column(db.Float, nullable=False)
    exam_type = db.Column(
        db.Enum(ExamType, name='exam_type', values_callable=lambda types: [t.value for t in types]),
        nullable=False,
        default=ExamType.MID
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # At most one mark per exam type per subject per student
    __table_args__ = (
        db.UniqueConstraint('student_id', 'subject_id', 'exam_type', name='unique_student_subject_exam'),
        db.CheckConstraint('marks >= 0 AND marks <= 100', name='marks_range'),
    )

    def to_dict(self):
        """Convert mark to dictionary with student and subject names"""
        return {
            'id': self.id,
            'student': self.student.to_summary() if self.student else self.student_id,
            'subject': {'id': self.subject.id, 'name': self.subject.name} if self.subject else self.subject_id,
            'marks': self.marks,
            'examType': self.exam_type.value if self.exam_type else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        exam = self.exam_type.value if self.exam_type else '?'
        return f'<Mark student={self.student_id} subject={self.subject_id} {exam}: {self.marks}>'
