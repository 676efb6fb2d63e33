"""
Mark service for the Student Records API
Recording marks, listing them and per-student averages
"""

from flask import current_app
from models.student import Student
from models.academic import Subject
from models.marks import Mark, ExamType
from services.access_policy import Action, Resource, Decision, authorize
from services.reporting_service import ReportingService
from services.student_service import resolve_student_scope
from utils.db_helpers import paginate_query
from utils.errors import ValidationError, NotFoundError
from utils.validators import validate_required, validate_marks, validate_choice, parse_record_id

MARK_CONFLICT = "Mark already recorded for this student, subject and exam type"

EXAM_TYPES = [exam_type.value for exam_type in ExamType]

class MarkService:
    """Mark service class"""

    def __init__(self, store):
        self.store = store

    def add_mark(self, caller, data):
        """Record one mark; a second mark for the same exam is a conflict"""
        authorize(caller, Action.CREATE, Resource.MARK)

        is_valid, message = validate_required(data, ['student', 'subject', 'marks'])
        if not is_valid:
            raise ValidationError(message)

        student_id = parse_record_id(data.get('student'))
        subject_id = parse_record_id(data.get('subject'))
        if student_id is None or subject_id is None:
            raise ValidationError("Student and subject must be valid record ids")

        is_valid, message = validate_marks(data.get('marks'), Mark.MAX_MARKS)
        if not is_valid:
            raise ValidationError(message)

        exam_type = data.get('examType') or ExamType.MID.value
        is_valid, message = validate_choice(exam_type, EXAM_TYPES, "Exam type")
        if not is_valid:
            raise ValidationError(message)

        if self.store.get(Student, student_id) is None:
            raise NotFoundError("Student not found")
        if self.store.get(Subject, subject_id) is None:
            raise NotFoundError("Subject not found")

        mark = Mark(
            student_id=student_id,
            subject_id=subject_id,
            marks=float(data['marks']),
            exam_type=ExamType(exam_type)
        )
        self.store.add(mark, conflict_message=MARK_CONFLICT)

        current_app.logger.info(
            f"Mark recorded: student={student_id} subject={subject_id} {exam_type}={mark.marks}"
        )
        return mark.to_dict()

    def list_marks(self, caller, page=1, per_page=5, student_id=None):
        """Paginated marks; students only ever see their own"""
        decision = authorize(caller, Action.LIST, Resource.MARK)

        query = self.store.query(Mark)
        if decision is Decision.ALLOW_SCOPED_TO_OWNER:
            own = resolve_student_scope(self.store, caller)
            query = query.filter(Mark.student_id == own.id)
        elif student_id not in (None, ''):
            record_id = parse_record_id(student_id)
            if record_id is None:
                raise ValidationError("studentId must be a valid record id")
            query = query.filter(Mark.student_id == record_id)

        query = query.order_by(Mark.created_at.desc(), Mark.id.desc())
        pagination = paginate_query(query, page, per_page)
        return {
            'marks': [mark.to_dict() for mark in pagination.items],
            'totalMarks': pagination.total,
            'totalPages': pagination.pages,
            'currentPage': pagination.page
        }

    def student_average(self, caller, student_id):
        """Average of one student's marks; no marks is reported as not found"""
        student = self.store.get(Student, student_id)
        authorize(caller, Action.READ, Resource.MARK, owner=student.user_id if student else None,
                  message="You can only view your own marks")

        marks = self.store.marks(student_id)
        average = ReportingService.average_marks(marks)
        if average is None:
            raise NotFoundError("No marks found for this student")

        return {
            'studentId': student_id,
            'average': ReportingService.present(average),
            'totalMarksEntries': len(marks)
        }
