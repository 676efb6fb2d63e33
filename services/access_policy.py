"""
Access policy for the Student Records API

Decides, per role, whether an action on a resource is allowed and whether a
listing has to be narrowed to the caller's own records. The policy is a pure
function: it never touches the store, so the owner of a record has to be
resolved by the caller and passed in.
"""

import enum
from collections import namedtuple
from models.user import Role
from utils.errors import AuthorizationError

Identity = namedtuple('Identity', ['user_id', 'role'])

class Action(enum.Enum):
    LIST = 'list'
    READ = 'read'
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'
    ASSIGN = 'assign'

class Resource(enum.Enum):
    USER = 'user'
    STUDENT = 'student'
    SUBJECT = 'subject'
    MARK = 'mark'
    ATTENDANCE = 'attendance'
    DASHBOARD = 'dashboard'
    ANALYTICS = 'analytics'

class Decision(enum.Enum):
    ALLOW = 'allow'
    DENY = 'deny'
    ALLOW_SCOPED_TO_OWNER = 'allow_scoped_to_owner'

READ_ACTIONS = frozenset({Action.LIST, Action.READ})

# Resources a teacher may create
TEACHER_CREATABLE = frozenset({Resource.STUDENT, Resource.SUBJECT, Resource.MARK, Resource.ATTENDANCE})

# Resources that belong to one student and are narrowed for the student role
OWNED_RESOURCES = frozenset({Resource.STUDENT, Resource.MARK, Resource.ATTENDANCE, Resource.DASHBOARD})

# Resources without an owner that every role may read
SHARED_RESOURCES = frozenset({Resource.SUBJECT})

def _admin_decision(action, resource):
    return Decision.ALLOW

def _teacher_decision(action, resource):
    if resource is Resource.USER:
        return Decision.DENY
    if action in READ_ACTIONS:
        return Decision.ALLOW
    if action is Action.CREATE and resource in TEACHER_CREATABLE:
        return Decision.ALLOW
    return Decision.DENY

def _student_decision(identity, action, resource, owner):
    if action not in READ_ACTIONS:
        return Decision.DENY
    if resource in SHARED_RESOURCES:
        return Decision.ALLOW
    if resource not in OWNED_RESOURCES:
        return Decision.DENY
    if action is Action.LIST:
        return Decision.ALLOW_SCOPED_TO_OWNER
    if owner is not None and owner == identity:
        return Decision.ALLOW
    return Decision.DENY

def decide(identity, role, action, resource, owner=None):
    """Return the Decision for a caller acting on a resource.

    ``identity`` is the caller's user id and ``owner`` the user id that owns
    the target record, if there is one.
    """
    if role is Role.ADMIN:
        return _admin_decision(action, resource)
    if role is Role.TEACHER:
        return _teacher_decision(action, resource)
    if role is Role.STUDENT:
        return _student_decision(identity, action, resource, owner)
    raise ValueError(f"Unknown role: {role!r}")

def authorize(caller, action, resource, owner=None, message=None):
    """Apply the policy for an Identity, raising AuthorizationError on DENY"""
    decision = decide(caller.user_id, caller.role, action, resource, owner)
    if decision is Decision.DENY:
        raise AuthorizationError(message or "You are not allowed to perform this action")
    return decision
