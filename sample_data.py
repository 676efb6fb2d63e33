#!/usr/bin/env python3
"""
Sample data generator for the Student Records API
Creates sample data for testing and demonstration
"""

from datetime import date, timedelta
from app import create_app
from database import db
from models import User, Role, Subject, Student, Mark, ExamType, Attendance, AttendanceStatus

def create_sample_data():
    """Create sample data for the system"""
    app = create_app()

    with app.app_context():
        print("Creating sample data...")

        teacher = User(name='Priya Raman', email='teacher@school.local', role=Role.TEACHER)
        teacher.set_password('teacher123')
        db.session.add(teacher)

        subjects_data = [
            {'name': 'Mathematics', 'code': 'MATH101', 'description': 'Algebra and calculus'},
            {'name': 'Physics', 'code': 'PHY101', 'description': 'Mechanics and optics'},
            {'name': 'Computer Science', 'code': 'CS101', 'description': 'Programming fundamentals'}
        ]
        subjects = [Subject(**subject_data) for subject_data in subjects_data]
        db.session.add_all(subjects)
        db.session.commit()
        print(f"✓ Created {len(subjects)} subjects")

        students_data = [
            {'name': 'Alice Johnson', 'roll_number': 'CS001', 'class_name': '10-A', 'age': 15},
            {'name': 'Bob Smith', 'roll_number': 'CS002', 'class_name': '10-A', 'age': 16},
            {'name': 'Carol White', 'roll_number': 'CS003', 'class_name': '10-B', 'age': 15},
            {'name': 'David Brown', 'roll_number': 'CS004', 'class_name': '10-B', 'age': 16}
        ]

        students = []
        for student_data in students_data:
            email = f"{student_data['roll_number'].lower()}@school.local"
            user = User(name=student_data['name'], email=email, role=Role.STUDENT)
            user.set_password(app.config['DEFAULT_STUDENT_PASSWORD'])
            student = Student(email=email, user=user, subjects=subjects, **student_data)
            db.session.add_all([user, student])
            students.append(student)

        db.session.commit()
        print(f"✓ Created {len(students)} students")

        # Marks spread from strong to weak so analytics have something to show
        base_scores = [88, 72, 55, 31]
        for student, base in zip(students, base_scores):
            for offset, subject in enumerate(subjects):
                for exam_type in (ExamType.MID, ExamType.FINAL):
                    db.session.add(Mark(
                        student=student,
                        subject=subject,
                        marks=min(100, base + offset * 3),
                        exam_type=exam_type
                    ))

        start = date.today() - timedelta(days=9)
        for index, student in enumerate(students):
            for day in range(10):
                absent = (day + index) % (5 - index) == 0
                status = AttendanceStatus.ABSENT if absent else AttendanceStatus.PRESENT
                db.session.add(Attendance(student=student, date=start + timedelta(days=day), status=status))

        db.session.commit()
        print("✓ Created marks and attendance")
        print("Sample data created. Teacher login: teacher@school.local / teacher123")

if __name__ == '__main__':
    create_sample_data()
