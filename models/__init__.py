"""
Database models package for the Student Records API
"""

from .user import User, Role
from .academic import Subject
from .student import Student, student_subjects
from .marks import Mark, ExamType
from .attendance import Attendance, AttendanceStatus

__all__ = [
    'User', 'Role', 'Subject', 'Student', 'student_subjects',
    'Mark', 'ExamType', 'Attendance', 'AttendanceStatus'
]
