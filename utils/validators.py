"""
Validation utilities for the Student Records API
Each validator returns (is_valid, message)
"""

import re
from datetime import datetime, date

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

def validate_required(data, fields):
    """Check that every field is present and not blank"""
    missing = [
        field for field in fields
        if data.get(field) is None or (isinstance(data.get(field), str) and not data.get(field).strip())
    ]
    if missing:
        return False, f"Missing required field(s): {', '.join(missing)}"

    return True, "All required fields present"

def validate_name(name, field_name="Name"):
    """Validate person or subject name"""
    if not name or len(str(name).strip()) == 0:
        return False, f"{field_name} is required"

    if len(name) > 100:
        return False, f"{field_name} must be 100 characters or less"

    return True, f"Valid {field_name.lower()}"

def validate_email(email):
    """Validate email address format"""
    if not email or len(str(email).strip()) == 0:
        return False, "Email is required"

    if len(email) > 120:
        return False, "Email must be 120 characters or less"

    if not EMAIL_PATTERN.match(email):
        return False, "Email address is not valid"

    return True, "Valid email"

def validate_password(password):
    """Validate password strength"""
    if not password:
        return False, "Password is required"

    if len(password) < 6:
        return False, "Password must be at least 6 characters long"

    if len(password) > 128:
        return False, "Password must be 128 characters or less"

    return True, "Valid password"

def validate_roll_number(roll_number):
    """Validate student roll number format"""
    if not roll_number or len(str(roll_number).strip()) == 0:
        return False, "Roll number is required"

    if len(roll_number) > 20:
        return False, "Roll number must be 20 characters or less"

    # Allow alphanumeric and some special characters
    if not re.match(r'^[A-Za-z0-9_/-]+$', roll_number):
        return False, "Roll number can only contain letters, numbers, hyphens, slashes, and underscores"

    return True, "Valid roll number"

def validate_subject_code(subject_code):
    """Validate subject code format"""
    if not subject_code or len(str(subject_code).strip()) == 0:
        return False, "Subject code is required"

    if len(subject_code) > 20:
        return False, "Subject code must be 20 characters or less"

    if not re.match(r'^[A-Za-z0-9_-]+$', subject_code):
        return False, "Subject code can only contain letters, numbers, hyphens, and underscores"

    return True, "Valid subject code"

def _whole_number(value):
    """Return value as an int when it is a whole number, else None; booleans are rejected"""
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None

def validate_age(age):
    """Validate optional student age"""
    if age is None or age == '':
        return True, "No age given"

    age_int = _whole_number(age)
    if age_int is None:
        return False, "Age must be a whole number"

    if age_int < 1 or age_int > 120:
        return False, "Age must be between 1 and 120"

    return True, "Valid age"

def validate_marks(marks, max_marks=100):
    """Validate marks between 0 and the maximum"""
    if isinstance(marks, bool):
        return False, "Marks must be a valid number"

    try:
        marks_float = float(marks)
    except (ValueError, TypeError):
        return False, "Marks must be a valid number"

    if marks_float != marks_float:  # NaN
        return False, "Marks must be a valid number"

    if marks_float < 0:
        return False, "Marks cannot be negative"

    if marks_float > max_marks:
        return False, f"Marks cannot exceed maximum marks ({max_marks})"

    return True, "Valid marks"

def validate_choice(value, choices, field_name):
    """Validate that value is one of the allowed choices"""
    if value not in choices:
        return False, f"{field_name} must be one of: {', '.join(choices)}"

    return True, f"Valid {field_name.lower()}"

def validate_date(date_str):
    """Validate date format"""
    try:
        if isinstance(date_str, str):
            datetime.strptime(date_str, '%Y-%m-%d')
        elif isinstance(date_str, date):
            pass  # Already a date object
        else:
            return False, "Invalid date format"

        return True, "Valid date"
    except ValueError:
        return False, "Date must be in YYYY-MM-DD format"

def parse_date(date_str):
    """Parse a YYYY-MM-DD string into a date"""
    if isinstance(date_str, date):
        return date_str
    return datetime.strptime(date_str, '%Y-%m-%d').date()

def validate_id_list(ids, field_name="IDs"):
    """Validate a list of integer record ids"""
    if not isinstance(ids, list):
        return False, f"{field_name} must be a list"

    for value in ids:
        if _whole_number(value) is None:
            return False, f"{field_name} must contain only record ids"

    return True, f"Valid {field_name.lower()}"

def parse_record_id(value):
    """Return value as a positive integer id, or None if it is not one"""
    number = _whole_number(value)
    return number if number is not None and number > 0 else None
