"""
Unit tests for service classes
"""

import unittest
from collections import namedtuple
from flask_jwt_extended import decode_token
from app import create_app
from config import TestingConfig
from database import db
from models.user import User, Role
from models.academic import Subject
from models.student import Student
from services.access_policy import Identity
from services.auth_service import AuthService
from services.student_service import StudentService
from services.mark_service import MarkService
from services.attendance_service import AttendanceService
from services.dashboard_service import DashboardService
from services.store import Store
from utils.errors import (
    ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError
)

class TestServices(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

        self.store = Store(db.session)
        self.admin_user = User.query.filter_by(role=Role.ADMIN).first()
        self.admin = Identity(self.admin_user.id, Role.ADMIN)

        teacher = User(name='Tina Teacher', email='tina@example.com', role=Role.TEACHER)
        teacher.set_password('password123')
        self.store.add(teacher)
        self.teacher = Identity(teacher.id, Role.TEACHER)

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def _create_student(self, roll_number, name='Student', class_name='10-A'):
        result = StudentService(self.store).create_student(self.teacher, {
            'name': name,
            'email': f'{roll_number.lower()}@example.com',
            'rollNumber': roll_number,
            'className': class_name
        })
        student = db.session.get(Student, result['student']['id'])
        return student, Identity(student.user_id, Role.STUDENT)

    def _subject(self, name='Maths', code='M1'):
        return self.store.add(Subject(name=name, code=code))

    # Auth

    def test_register_and_login(self):
        """Registration as teacher or student then login returns a matching role"""
        service = AuthService(self.store)
        for role in ('teacher', 'student'):
            email = f'{role}@example.com'
            registered = service.register({'name': 'New User', 'email': email, 'password': 'secret123', 'role': role})
            self.assertEqual(registered['role'], role)

            logged_in = service.login(email, 'secret123')
            claims = decode_token(logged_in['token'])
            self.assertEqual(claims['role'], role)
            self.assertEqual(claims['id'], logged_in['id'])
            self.assertEqual(claims['sub'], str(logged_in['id']))

    def test_register_as_admin_rejected(self):
        with self.assertRaises(AuthorizationError):
            AuthService(self.store).register({
                'name': 'Mallory', 'email': 'mallory@example.com', 'password': 'secret123', 'role': 'admin'
            })
        self.assertIsNone(User.query.filter_by(email='mallory@example.com').first())

    def test_register_duplicate_email(self):
        data = {'name': 'Dup', 'email': 'dup@example.com', 'password': 'secret123', 'role': 'student'}
        AuthService(self.store).register(data)
        with self.assertRaises(ConflictError):
            AuthService(self.store).register(data)

    def test_login_does_not_disclose_unknown_email(self):
        service = AuthService(self.store)
        with self.assertRaises(AuthenticationError) as unknown:
            service.login('nobody@example.com', 'password123')
        with self.assertRaises(AuthenticationError) as wrong:
            service.login('tina@example.com', 'wrongpassword')
        self.assertEqual(unknown.exception.message, wrong.exception.message)

    def test_change_password(self):
        service = AuthService(self.store)
        with self.assertRaises(AuthenticationError):
            service.change_password(self.teacher.user_id, 'wrong', 'newpass123')

        service.change_password(self.teacher.user_id, 'password123', 'newpass123')
        self.assertIn('token', service.login('tina@example.com', 'newpass123'))

    # Students

    def test_create_student_creates_login(self):
        student, _ = self._create_student('CS001', name='Alice')

        user = db.session.get(User, student.user_id)
        self.assertEqual(user.role, Role.STUDENT)
        self.assertTrue(user.check_password(self.app.config['DEFAULT_STUDENT_PASSWORD']))

    def test_create_student_requires_fields(self):
        with self.assertRaises(ValidationError):
            StudentService(self.store).create_student(self.teacher, {'name': 'No Roll', 'email': 'x@example.com'})

    def test_duplicate_roll_number_conflicts(self):
        self._create_student('CS001')
        with self.assertRaises(ConflictError):
            StudentService(self.store).create_student(self.admin, {
                'name': 'Other', 'email': 'other@example.com', 'rollNumber': 'CS001', 'className': '10-A'
            })

    def test_student_list_scoped_to_own_record(self):
        self._create_student('CS001', name='Alice')
        bob, bob_identity = self._create_student('CS002', name='Bob')

        result = StudentService(self.store).list_students(bob_identity, search='Alice')
        self.assertEqual(result['totalStudents'], 0)

        result = StudentService(self.store).list_students(bob_identity)
        self.assertEqual([s['id'] for s in result['students']], [bob.id])

        result = StudentService(self.store).list_students(self.teacher)
        self.assertEqual(result['totalStudents'], 2)

    def test_student_list_search_filter_and_sort(self):
        self._create_student('CS001', name='Alice', class_name='10-A')
        self._create_student('CS002', name='Bob', class_name='10-B')
        self._create_student('CS003', name='Alicia', class_name='10-B')
        service = StudentService(self.store)

        result = service.list_students(self.admin, search='ali', sort_by='name', order='asc')
        self.assertEqual([s['name'] for s in result['students']], ['Alice', 'Alicia'])

        result = service.list_students(self.admin, class_name='10-B', sort_by='rollNumber', order='desc')
        self.assertEqual([s['rollNumber'] for s in result['students']], ['CS003', 'CS002'])

        result = service.list_students(self.admin, page=2, per_page=2)
        self.assertEqual(result['totalPages'], 2)
        self.assertEqual(len(result['students']), 1)

        result = service.list_students(self.admin, page=5, per_page=2)
        self.assertEqual(result['students'], [])
        self.assertEqual(result['totalStudents'], 3)

    def test_student_search_treats_wildcards_literally(self):
        self._create_student('CS001', name='Alice')
        self._create_student('CS002', name='Bob 100%')
        service = StudentService(self.store)

        result = service.list_students(self.admin, search='%')
        self.assertEqual([s['name'] for s in result['students']], ['Bob 100%'])

        result = service.list_students(self.admin, search='_')
        self.assertEqual(result['totalStudents'], 0)

    def test_user_with_student_record_cannot_own_another(self):
        """Re-using the login of an existing student is a conflict on ownership"""
        service = StudentService(self.store)
        ann = service.create_student(self.admin, {
            'name': 'Ann', 'email': 'x@example.com', 'rollNumber': 'A1', 'className': '10-A'
        })['student']
        service.update_student(self.admin, ann['id'], {'email': 'ann.new@example.com'})

        with self.assertRaises(ConflictError) as context:
            service.create_student(self.admin, {
                'name': 'Ben', 'email': 'x@example.com', 'rollNumber': 'B1', 'className': '10-A'
            })
        self.assertEqual(context.exception.message, "This user already owns a student record")
        self.assertEqual(db.session.get(Student, ann['id']).user_id, ann['user'])

    def test_create_student_links_existing_user(self):
        registered = AuthService(self.store).register({
            'name': 'Sam', 'email': 'sam@example.com', 'password': 'secret123', 'role': 'student'
        })
        result = StudentService(self.store).create_student(self.teacher, {
            'name': 'Sam', 'email': 'sam@example.com', 'rollNumber': 'S1', 'className': '10-A'
        })
        self.assertEqual(result['student']['user'], registered['id'])
        self.assertNotIn('Default Password', result['message'])

    def test_student_cannot_read_other_student(self):
        """Another student's record is an authorization failure, not not-found"""
        alice, alice_identity = self._create_student('CS001', name='Alice')
        bob, _ = self._create_student('CS002', name='Bob')
        service = StudentService(self.store)

        self.assertEqual(service.get_student(alice_identity, alice.id)['name'], 'Alice')
        with self.assertRaises(AuthorizationError):
            service.get_student(alice_identity, bob.id)
        with self.assertRaises(AuthorizationError):
            service.get_student(alice_identity, 9999)
        with self.assertRaises(NotFoundError):
            service.get_student(self.teacher, 9999)

    def test_teacher_cannot_delete_student(self):
        student, _ = self._create_student('CS001')
        with self.assertRaises(AuthorizationError):
            StudentService(self.store).delete_student(self.teacher, student.id)

    def test_assign_subjects(self):
        student, _ = self._create_student('CS001')
        maths = self._subject('Maths', 'M1')
        physics = self._subject('Physics', 'P1')
        service = StudentService(self.store)

        result = service.assign_subjects(self.admin, student.id, {'subjects': [maths.id, physics.id, maths.id]})
        self.assertEqual({s['code'] for s in result['student']['subjects']}, {'M1', 'P1'})

        with self.assertRaises(ValidationError):
            service.assign_subjects(self.admin, student.id, {'subjects': [maths.id, 9999]})

    # Marks

    def test_duplicate_mark_is_conflict(self):
        student, _ = self._create_student('CS001')
        subject = self._subject()
        service = MarkService(self.store)
        data = {'student': student.id, 'subject': subject.id, 'marks': 80, 'examType': 'Quiz'}

        service.add_mark(self.teacher, data)
        with self.assertRaises(ConflictError) as context:
            service.add_mark(self.teacher, dict(data, marks=95))
        self.assertIn("already recorded", context.exception.message)

    def test_add_mark_validation(self):
        student, _ = self._create_student('CS001')
        subject = self._subject()
        service = MarkService(self.store)

        with self.assertRaises(ValidationError):
            service.add_mark(self.teacher, {'student': student.id, 'subject': subject.id, 'marks': 101})
        with self.assertRaises(ValidationError):
            service.add_mark(self.teacher, {'student': student.id, 'subject': subject.id, 'marks': 50,
                                            'examType': 'Midterm'})
        with self.assertRaises(NotFoundError):
            service.add_mark(self.teacher, {'student': 9999, 'subject': subject.id, 'marks': 50})

        mark = service.add_mark(self.teacher, {'student': student.id, 'subject': subject.id, 'marks': 50})
        self.assertEqual(mark['examType'], 'Mid')

    def test_student_average(self):
        student, identity = self._create_student('CS001')
        other, _ = self._create_student('CS002')
        subject = self._subject()
        service = MarkService(self.store)

        with self.assertRaises(NotFoundError):
            service.student_average(self.teacher, student.id)

        for exam_type, marks in (('Mid', 70), ('Final', 85), ('Quiz', 90)):
            service.add_mark(self.teacher, {'student': student.id, 'subject': subject.id,
                                            'marks': marks, 'examType': exam_type})

        result = service.student_average(identity, student.id)
        self.assertEqual(result['average'], 81.67)
        self.assertEqual(result['totalMarksEntries'], 3)

        with self.assertRaises(AuthorizationError):
            service.student_average(identity, other.id)

    def test_marks_list_scoped_for_students(self):
        alice, alice_identity = self._create_student('CS001')
        bob, _ = self._create_student('CS002')
        subject = self._subject()
        service = MarkService(self.store)
        service.add_mark(self.teacher, {'student': alice.id, 'subject': subject.id, 'marks': 60})
        service.add_mark(self.teacher, {'student': bob.id, 'subject': subject.id, 'marks': 70})

        result = service.list_marks(alice_identity, student_id=str(bob.id))
        self.assertEqual(result['totalMarks'], 1)
        self.assertEqual(result['marks'][0]['student']['id'], alice.id)

        result = service.list_marks(self.teacher, student_id=str(bob.id))
        self.assertEqual(result['marks'][0]['student']['rollNumber'], 'CS002')
        self.assertEqual(service.list_marks(self.teacher)['totalMarks'], 2)

    # Attendance

    def test_attendance_summary(self):
        """3 Present and 1 Absent is exactly 75%"""
        student, identity = self._create_student('CS001')
        service = AttendanceService(self.store)
        statuses = ['Present', 'Present', 'Absent', 'Present']
        for day, status in enumerate(statuses, start=1):
            service.mark_attendance(self.teacher, {'student': student.id, 'date': f'2024-03-0{day}', 'status': status})

        summary = service.attendance_summary(identity, student.id)
        self.assertEqual(summary['totalDays'], 4)
        self.assertEqual(summary['presentDays'], 3)
        self.assertEqual(summary['attendancePercentage'], 75.0)

    def test_duplicate_attendance_is_conflict(self):
        student, _ = self._create_student('CS001')
        service = AttendanceService(self.store)
        data = {'student': student.id, 'date': '2024-03-01', 'status': 'Present'}

        service.mark_attendance(self.teacher, data)
        with self.assertRaises(ConflictError) as context:
            service.mark_attendance(self.teacher, dict(data, status='Absent'))
        self.assertEqual(context.exception.message, "Attendance already marked for this student on this date")

    def test_attendance_other_student_denied(self):
        _, alice_identity = self._create_student('CS001')
        bob, _ = self._create_student('CS002')
        service = AttendanceService(self.store)

        with self.assertRaises(AuthorizationError):
            service.student_attendance(alice_identity, bob.id)
        with self.assertRaises(AuthorizationError):
            service.attendance_summary(alice_identity, bob.id)

    def test_attendance_by_date(self):
        student, _ = self._create_student('CS001', name='Alice')
        service = AttendanceService(self.store)
        service.mark_attendance(self.teacher, {'student': student.id, 'date': '2024-03-01', 'status': 'Late'})

        records = service.attendance_by_date(self.teacher, '2024-03-01')
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]['student']['name'], 'Alice')
        self.assertEqual(service.attendance_by_date(self.teacher, '2024-03-02'), [])

        with self.assertRaises(ValidationError):
            service.attendance_by_date(self.teacher, '01-03-2024')

    # Dashboard and analytics

    def test_student_dashboard_without_data_is_zero(self):
        _, identity = self._create_student('CS001', name='Alice')

        stats = DashboardService(self.store).get_dashboard_stats(identity)
        self.assertEqual(stats['studentName'], 'Alice')
        self.assertEqual(stats['averageMarks'], 0)
        self.assertEqual(stats['attendancePercentage'], 0)

    def test_student_without_record_gets_not_found(self):
        registered = AuthService(self.store).register({
            'name': 'Loner', 'email': 'loner@example.com', 'password': 'secret123', 'role': 'student'
        })
        identity = Identity(registered['id'], Role.STUDENT)
        with self.assertRaises(NotFoundError):
            DashboardService(self.store).get_dashboard_stats(identity)

    def test_admin_dashboard_uses_per_student_averages(self):
        alice, _ = self._create_student('CS001')
        bob, _ = self._create_student('CS002')
        maths = self._subject('Maths', 'M1')
        service = MarkService(self.store)
        service.add_mark(self.teacher, {'student': alice.id, 'subject': maths.id, 'marks': 100})
        for exam_type, marks in (('Mid', 0), ('Final', 0), ('Quiz', 100)):
            service.add_mark(self.teacher, {'student': bob.id, 'subject': maths.id,
                                            'marks': marks, 'examType': exam_type})

        stats = DashboardService(self.store).get_dashboard_stats(self.admin)
        self.assertEqual(stats['totalStudents'], 2)
        self.assertEqual(stats['totalMarksEntries'], 4)
        self.assertEqual(stats['overallAverage'], 66.67)

    def test_analytics_denied_for_students(self):
        _, identity = self._create_student('CS001')
        with self.assertRaises(AuthorizationError):
            DashboardService(self.store).get_analytics(identity)

    def test_analytics(self):
        subject = self._subject('Maths', 'M1')
        mark_service = MarkService(self.store)
        attendance_service = AttendanceService(self.store)
        students = []
        for index in range(7):
            student, _ = self._create_student(f'CS00{index}', name=f'Student {index}')
            students.append(student)
            mark_service.add_mark(self.teacher, {'student': student.id, 'subject': subject.id,
                                                 'marks': 20 + index * 10})

        for day, status in enumerate(['Present', 'Absent'], start=1):
            attendance_service.mark_attendance(self.teacher, {'student': students[0].id,
                                                              'date': f'2024-03-0{day}', 'status': status})

        result = DashboardService(self.store).get_analytics(self.teacher)

        self.assertEqual(result['totalStudents'], 7)
        self.assertEqual(len(result['toppers']), 5)
        self.assertEqual(result['toppers'][0]['name'], 'Student 6')
        self.assertEqual([s['averageMarks'] for s in result['weakStudents']], [30.0, 20.0])
        self.assertEqual(result['averagesBySubject'], [{'subjectId': subject.id, 'subject': 'Maths', 'average': 50.0}])
        self.assertEqual(result['lowAttendance'], [
            {'studentId': students[0].id, 'name': 'Student 0', 'attendancePercentage': 50.0}
        ])

MarkRow = namedtuple('MarkRow', ['student_id', 'subject_id', 'marks'])
NamedRow = namedtuple('NamedRow', ['id', 'name'])

class FakeStore:
    """In-memory store double that records lookups"""

    def __init__(self, marks, students, subjects):
        self._marks = marks
        self._rows = {Student: students, Subject: subjects}
        self.lookups = []

    def marks(self, student_id=None):
        return list(self._marks)

    def attendance(self, student_id=None, on_date=None):
        return []

    def count(self, model):
        return len(self._rows.get(model, {}))

    def get_many(self, model, ids):
        ids = set(ids)
        self.lookups.append((model, ids))
        return {key: row for key, row in self._rows[model].items() if key in ids}

class TestAnalyticsWithStoreDouble(unittest.TestCase):

    def setUp(self):
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self):
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def test_names_resolved_in_one_lookup(self):
        students = {1: NamedRow(1, 'Ann'), 2: NamedRow(2, 'Ben')}
        subjects = {10: NamedRow(10, 'Maths')}
        marks = [MarkRow(1, 10, 90), MarkRow(2, 10, 30), MarkRow(3, 10, 10)]
        store = FakeStore(marks, students, subjects)

        result = DashboardService(store).get_analytics(Identity(1, Role.ADMIN))

        student_lookups = [ids for model, ids in store.lookups if model is Student]
        self.assertEqual(student_lookups, [{1, 2, 3}])
        self.assertEqual([row['name'] for row in result['toppers']], ['Ann', 'Ben', 'Unknown'])
        self.assertEqual([row['name'] for row in result['weakStudents']], ['Ben', 'Unknown'])

if __name__ == '__main__':
    unittest.main()
