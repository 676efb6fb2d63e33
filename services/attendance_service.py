"""
Attendance service for the Student Records API
Marking attendance, attendance history and percentage summaries
"""

from flask import current_app
from models.student import Student
from models.attendance import Attendance, AttendanceStatus
from services.access_policy import Action, Resource, Decision, authorize
from services.reporting_service import ReportingService
from services.student_service import resolve_student_scope
from utils.db_helpers import paginate_query
from utils.errors import ValidationError, NotFoundError
from utils.validators import (
    validate_required, validate_date, validate_choice, parse_date, parse_record_id
)

ATTENDANCE_CONFLICT = "Attendance already marked for this student on this date"

STATUSES = [status.value for status in AttendanceStatus]

class AttendanceService:
    """Attendance service class"""

    def __init__(self, store):
        self.store = store

    def _student_for_caller(self, caller, student_id):
        """Target student, if the caller may read that student's attendance"""
        student = self.store.get(Student, student_id)
        authorize(caller, Action.READ, Resource.ATTENDANCE, owner=student.user_id if student else None,
                  message="You can only access your own attendance")
        if student is None:
            raise NotFoundError("Student not found")
        return student

    def mark_attendance(self, caller, data):
        authorize(caller, Action.CREATE, Resource.ATTENDANCE)

        is_valid, message = validate_required(data, ['student', 'date', 'status'])
        if not is_valid:
            raise ValidationError(message)

        student_id = parse_record_id(data.get('student'))
        if student_id is None:
            raise ValidationError("Student must be a valid record id")

        for is_valid, message in (
            validate_date(data.get('date')),
            validate_choice(data.get('status'), STATUSES, "Status")
        ):
            if not is_valid:
                raise ValidationError(message)

        if self.store.get(Student, student_id) is None:
            raise NotFoundError("Student not found")

        record = Attendance(
            student_id=student_id,
            date=parse_date(data['date']),
            status=AttendanceStatus(data['status'])
        )
        self.store.add(record, conflict_message=ATTENDANCE_CONFLICT)

        current_app.logger.info(f"Attendance marked: student={student_id} {record.date} {record.status.value}")
        return record.to_dict()

    def student_attendance(self, caller, student_id, page=1, per_page=5):
        """Paginated attendance history, newest date first"""
        student = self._student_for_caller(caller, student_id)

        query = self.store.query(Attendance).filter(Attendance.student_id == student.id)
        query = query.order_by(Attendance.date.desc(), Attendance.id.desc())
        pagination = paginate_query(query, page, per_page)
        return {
            'records': [record.to_dict() for record in pagination.items],
            'totalAttendance': pagination.total,
            'totalPages': pagination.pages,
            'currentPage': pagination.page
        }

    def attendance_by_date(self, caller, date_str):
        decision = authorize(caller, Action.LIST, Resource.ATTENDANCE)

        is_valid, message = validate_date(date_str)
        if not is_valid:
            raise ValidationError(message)

        student_id = None
        if decision is Decision.ALLOW_SCOPED_TO_OWNER:
            student_id = resolve_student_scope(self.store, caller).id

        records = self.store.attendance(student_id=student_id, on_date=parse_date(date_str))
        return [record.to_dict(include_student=True) for record in records]

    def attendance_summary(self, caller, student_id):
        """Attendance percentage for one student; no rows counts as 0%"""
        student = self._student_for_caller(caller, student_id)

        summary = ReportingService.attendance_summary(self.store.attendance(student_id=student.id))
        return {
            'studentId': student.id,
            'totalDays': summary['total_days'],
            'presentDays': summary['present_days'],
            'attendancePercentage': ReportingService.present(summary['percentage'])
        }
