"""
Entity store for the Student Records API
Thin handle around a SQLAlchemy session, passed into services
"""

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models.user import User
from models.student import Student
from models.marks import Mark
from models.attendance import Attendance
from utils.errors import ConflictError, ValidationError, UnexpectedError

class Store:
    """Persistent store for users, students, subjects, marks and attendance"""

    def __init__(self, session):
        self.session = session

    # Reads

    def get(self, model, record_id):
        """Get a record by primary key, or None"""
        if record_id is None:
            return None
        return self.session.get(model, record_id)

    def query(self, model):
        return self.session.query(model)

    def count(self, model):
        return self.session.query(model).count()

    def get_many(self, model, ids):
        """Fetch many records in one round trip, keyed by id"""
        ids = {record_id for record_id in ids if record_id is not None}
        if not ids:
            return {}
        rows = self.session.query(model).filter(model.id.in_(ids)).all()
        return {row.id: row for row in rows}

    def find_user_by_email(self, email):
        return self.session.query(User).filter(User.email == email).first()

    def find_student_by_user(self, user_id):
        """Resolve the student record owned by a user"""
        return self.session.query(Student).filter(Student.user_id == user_id).first()

    def marks(self, student_id=None):
        """Mark rows in document (insertion) order"""
        query = self.session.query(Mark)
        if student_id is not None:
            query = query.filter(Mark.student_id == student_id)
        return query.order_by(Mark.id.asc()).all()

    def attendance(self, student_id=None, on_date=None):
        """Attendance rows in document (insertion) order"""
        query = self.session.query(Attendance)
        if student_id is not None:
            query = query.filter(Attendance.student_id == student_id)
        if on_date is not None:
            query = query.filter(Attendance.date == on_date)
        return query.order_by(Attendance.id.asc()).all()

    # Writes

    def add(self, obj, conflict_message=None):
        """Add a record and commit"""
        self.session.add(obj)
        self.commit(conflict_message)
        return obj

    def add_all(self, objects, conflict_message=None):
        """Add several records in one commit"""
        self.session.add_all(objects)
        self.commit(conflict_message)
        return objects

    def delete_student(self, student):
        """Delete a student together with its marks and attendance"""
        self.session.query(Mark).filter(Mark.student_id == student.id).delete(synchronize_session=False)
        self.session.query(Attendance).filter(Attendance.student_id == student.id).delete(synchronize_session=False)
        self.session.delete(student)
        self.commit()

    def commit(self, conflict_message=None):
        """Commit; unique violations become ConflictError, other constraint failures ValidationError"""
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if is_unique_violation(e):
                raise ConflictError(conflict_message or "Record with this identifier already exists") from e
            raise ValidationError("Database constraint violation") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise UnexpectedError(f"Database operation failed: {str(e)}") from e

def is_unique_violation(error):
    """True for UNIQUE / duplicate key failures (SQLite and PostgreSQL wording)"""
    text = str(error.orig)
    return 'UNIQUE constraint failed' in text or 'duplicate key value' in text

def get_store():
    """Store handle registered on the current application"""
    return current_app.extensions['store']
