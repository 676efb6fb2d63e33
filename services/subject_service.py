"""
Subject service for the Student Records API
"""

from flask import current_app
from models.academic import Subject
from services.access_policy import Action, Resource, authorize
from utils.db_helpers import paginate_query
from utils.errors import ValidationError
from utils.validators import validate_required, validate_name, validate_subject_code

class SubjectService:
    """Subject service class"""

    def __init__(self, store):
        self.store = store

    def list_subjects(self, caller, page=1, per_page=10):
        """Paginated subjects, newest first"""
        authorize(caller, Action.LIST, Resource.SUBJECT)

        query = self.store.query(Subject).order_by(Subject.created_at.desc(), Subject.id.desc())
        pagination = paginate_query(query, page, per_page)
        return {
            'subjects': [subject.to_dict() for subject in pagination.items],
            'totalSubjects': pagination.total,
            'totalPages': pagination.pages,
            'currentPage': pagination.page
        }

    def create_subject(self, caller, data):
        authorize(caller, Action.CREATE, Resource.SUBJECT)

        is_valid, message = validate_required(data, ['name', 'code'])
        if not is_valid:
            raise ValidationError(message)

        name, code, description = data.get('name'), data.get('code'), data.get('description')
        if not all(isinstance(value, str) for value in (name, code)) or \
                (description is not None and not isinstance(description, str)):
            raise ValidationError("Subject name, code and description must be text")

        for is_valid, message in (validate_name(name.strip(), "Subject name"), validate_subject_code(code.strip())):
            if not is_valid:
                raise ValidationError(message)

        subject = Subject(
            name=name.strip(),
            code=code.strip(),
            description=description.strip() if description else None
        )
        self.store.add(subject, conflict_message="Subject already exists")

        current_app.logger.info(f"Subject created: {subject.code}")
        return subject.to_dict()
