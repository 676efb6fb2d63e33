"""
Student service for the Student Records API
Business logic for student records and subject assignment
"""

from flask import current_app
from sqlalchemy import or_
from models.user import User, Role
from models.student import Student
from models.academic import Subject
from services.access_policy import Action, Resource, Decision, authorize
from utils.db_helpers import paginate_query
from utils.errors import ValidationError, NotFoundError, ConflictError
from utils.validators import (
    validate_required, validate_name, validate_email, validate_roll_number,
    validate_age, validate_id_list
)

STUDENT_CONFLICT = "A student with this email or roll number already exists"

SORTABLE_FIELDS = {
    'name': Student.name,
    'rollNumber': Student.roll_number,
    'className': Student.class_name,
    'age': Student.age,
    'createdAt': Student.created_at,
}

# Wire name -> model attribute for writable fields
EDITABLE_FIELDS = {
    'name': 'name',
    'email': 'email',
    'phone': 'phone',
    'rollNumber': 'roll_number',
    'className': 'class_name',
    'age': 'age',
    'address': 'address',
}

TEXT_FIELDS = frozenset({'name', 'email', 'phone', 'rollNumber', 'className', 'address'})

def resolve_student_scope(store, caller):
    """Find the student record owned by the calling user"""
    student = store.find_student_by_user(caller.user_id)
    if student is None:
        raise NotFoundError("Student record not found")
    return student

def _check(result):
    is_valid, message = result
    if not is_valid:
        raise ValidationError(message)

def _clean(value):
    return value.strip() if isinstance(value, str) else value

def _validate_field(field, value):
    if field in TEXT_FIELDS and value is not None and not isinstance(value, str):
        raise ValidationError(f"{field} must be text")

    if field == 'name':
        _check(validate_name(value))
    elif field == 'email':
        _check(validate_email(value))
    elif field == 'rollNumber':
        _check(validate_roll_number(value))
    elif field == 'className':
        _check(validate_name(value, "Class name"))
    elif field == 'age':
        _check(validate_age(value))

class StudentService:
    """Student service class"""

    def __init__(self, store):
        self.store = store

    def list_students(self, caller, page=1, per_page=5, search='', class_name=None,
                      sort_by='createdAt', order='desc'):
        """Paginated student list, narrowed to the caller's own record for students"""
        decision = authorize(caller, Action.LIST, Resource.STUDENT)

        query = self.store.query(Student)
        if decision is Decision.ALLOW_SCOPED_TO_OWNER:
            query = query.filter(Student.user_id == caller.user_id)

        if search:
            # autoescape keeps % and _ literal
            query = query.filter(or_(
                Student.name.icontains(search, autoescape=True),
                Student.roll_number.icontains(search, autoescape=True)
            ))

        if class_name:
            query = query.filter(Student.class_name == class_name)

        column = SORTABLE_FIELDS.get(sort_by, Student.created_at)
        if order == 'asc':
            query = query.order_by(column.asc(), Student.id.asc())
        else:
            query = query.order_by(column.desc(), Student.id.desc())

        pagination = paginate_query(query, page, per_page)
        return {
            'success': True,
            'students': [student.to_dict() for student in pagination.items],
            'totalStudents': pagination.total,
            'totalPages': pagination.pages,
            'currentPage': pagination.page
        }

    def create_student(self, caller, data):
        """Create a student and, when needed, its login account"""
        authorize(caller, Action.CREATE, Resource.STUDENT)

        _check(validate_required(data, ['name', 'email', 'rollNumber', 'className']))
        for field in ('name', 'email', 'phone', 'rollNumber', 'className', 'age', 'address'):
            _validate_field(field, _clean(data.get(field)))

        email = data['email'].strip().lower()
        default_password = None
        records = []

        user = self.store.find_user_by_email(email)
        if user is not None and user.student is not None:
            raise ConflictError("This user already owns a student record")
        if user is None:
            default_password = current_app.config['DEFAULT_STUDENT_PASSWORD']
            user = User(name=data['name'].strip(), email=email, role=Role.STUDENT)
            user.set_password(default_password)
            records.append(user)

        student = Student(
            name=data['name'].strip(),
            email=email,
            phone=_clean(data.get('phone')),
            roll_number=data['rollNumber'].strip(),
            class_name=data['className'].strip(),
            age=int(data['age']) if data.get('age') not in (None, '') else None,
            address=_clean(data.get('address')),
            user=user
        )
        records.append(student)
        self.store.add_all(records, conflict_message=STUDENT_CONFLICT)

        current_app.logger.info(f"Student created: {student.roll_number} by user {caller.user_id}")

        message = "Student created successfully"
        if default_password:
            message += f". Email: {email}, Default Password: {default_password}"
        return {'success': True, 'message': message, 'student': student.to_dict()}

    def get_student(self, caller, student_id):
        """Single student; students may only read their own record"""
        student = self.store.get(Student, student_id)
        owner = student.user_id if student else None
        authorize(caller, Action.READ, Resource.STUDENT, owner=owner,
                  message="You can only access your own student record")

        if student is None:
            raise NotFoundError("Student not found")
        return student.to_dict()

    def _get_or_404(self, student_id):
        student = self.store.get(Student, student_id)
        if student is None:
            raise NotFoundError("Student not found")
        return student

    def update_student(self, caller, student_id, data):
        authorize(caller, Action.UPDATE, Resource.STUDENT)
        student = self._get_or_404(student_id)

        for field, attribute in EDITABLE_FIELDS.items():
            if field not in data:
                continue
            value = _clean(data[field])
            _validate_field(field, value)
            if field == 'email':
                value = value.lower()
            elif field == 'age':
                value = int(value) if value not in (None, '') else None
            setattr(student, attribute, value)

        self.store.commit(conflict_message=STUDENT_CONFLICT)
        current_app.logger.info(f"Student updated: {student.roll_number}")
        return student.to_dict()

    def delete_student(self, caller, student_id):
        """Delete a student; its marks and attendance go with it"""
        authorize(caller, Action.DELETE, Resource.STUDENT)
        student = self._get_or_404(student_id)

        roll_number = student.roll_number
        self.store.delete_student(student)

        current_app.logger.info(f"Student deleted: {roll_number}")
        return {'message': "Student deleted successfully"}

    def assign_subjects(self, caller, student_id, data):
        """Replace the student's subjects; every id must exist"""
        authorize(caller, Action.ASSIGN, Resource.STUDENT)
        student = self._get_or_404(student_id)

        subject_ids = data.get('subjects')
        _check(validate_id_list(subject_ids, "Subjects"))

        unique_ids = list(dict.fromkeys(int(subject_id) for subject_id in subject_ids))
        subjects = self.store.get_many(Subject, unique_ids)
        if len(subjects) != len(unique_ids):
            raise ValidationError("One or more subjects invalid")

        student.subjects = [subjects[subject_id] for subject_id in unique_ids]
        self.store.commit()

        current_app.logger.info(f"Assigned {len(unique_ids)} subject(s) to {student.roll_number}")
        return {'message': "Subjects assigned successfully", 'student': student.to_dict()}
