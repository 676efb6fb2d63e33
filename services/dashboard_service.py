"""
Dashboard and analytics service for the Student Records API
"""

from models.student import Student
from models.academic import Subject
from models.marks import Mark
from services.access_policy import Action, Resource, Decision, authorize
from services.reporting_service import ReportingService
from services.student_service import resolve_student_scope

UNKNOWN_STUDENT = "Unknown"

class DashboardService:
    """Role-dependent dashboard stats and class analytics"""

    def __init__(self, store):
        self.store = store

    def get_dashboard_stats(self, caller):
        """Own stats for students, overall counts for admin and teacher"""
        decision = authorize(caller, Action.LIST, Resource.DASHBOARD)
        if decision is Decision.ALLOW_SCOPED_TO_OWNER:
            return self._student_dashboard(resolve_student_scope(self.store, caller))

        averages = ReportingService.student_averages(self.store.marks())
        return {
            'totalStudents': self.store.count(Student),
            'totalSubjects': self.store.count(Subject),
            'totalMarksEntries': self.store.count(Mark),
            'overallAverage': ReportingService.present(ReportingService.class_average(averages))
        }

    def _student_dashboard(self, student):
        marks = self.store.marks(student.id)
        attendance = self.store.attendance(student_id=student.id)

        # No marks shows as 0 here, unlike the average endpoint
        average = ReportingService.average_marks(marks) or 0
        summary = ReportingService.attendance_summary(attendance)

        return {
            'studentName': student.name,
            'rollNumber': student.roll_number,
            'className': student.class_name,
            'totalSubjects': len(student.subjects),
            'totalMarks': len(marks),
            'averageMarks': ReportingService.present(average),
            'totalAttendance': summary['total_days'],
            'presentDays': summary['present_days'],
            'attendancePercentage': ReportingService.present(summary['percentage'])
        }

    def get_analytics(self, caller, top_limit=5, weak_threshold=40, attendance_threshold=75):
        """Class average, rankings, subject averages and low attendance"""
        authorize(caller, Action.LIST, Resource.ANALYTICS)

        marks = self.store.marks()
        averages = ReportingService.student_averages(marks)
        toppers = ReportingService.top_performers(averages, limit=top_limit)
        weak = ReportingService.weak_students(averages, threshold=weak_threshold)

        percentages = ReportingService.attendance_percentages(self.store.attendance())
        low = ReportingService.low_attendance(percentages, threshold=attendance_threshold)

        # One lookup for every name the response needs
        student_ids = [student_id for student_id, _ in toppers + weak + low]
        students = self.store.get_many(Student, student_ids)
        subjects = self.store.get_many(Subject, {mark.subject_id for mark in marks})

        def name_of(student_id):
            student = students.get(student_id)
            return student.name if student else UNKNOWN_STUDENT

        def ranking(rows):
            return [
                {
                    'studentId': student_id,
                    'name': name_of(student_id),
                    'averageMarks': ReportingService.present(average)
                }
                for student_id, average in rows
            ]

        return {
            'totalStudents': self.store.count(Student),
            'classAverage': ReportingService.present(ReportingService.class_average(averages)),
            'toppers': ranking(toppers),
            'weakStudents': ranking(weak),
            'averagesBySubject': [
                {
                    'subjectId': subject.id,
                    'subject': subject.name,
                    'average': ReportingService.present(average)
                }
                for subject, average in ReportingService.subject_averages(marks, subjects)
            ],
            'lowAttendance': [
                {
                    'studentId': student_id,
                    'name': name_of(student_id),
                    'attendancePercentage': ReportingService.present(percentage)
                }
                for student_id, percentage in low
            ]
        }
