from .decorators import admin_required, get_current_user_data
from .validators import validate_required_fields, sanitize_string, QuestionValidator, validate_lesson, validate_overview

__all__ = [
    'admin_required',
    'get_current_user_data',
    'validate_required_fields',
    'sanitize_string',
    'QuestionValidator',
    'validate_lesson',
    'validate_overview'
]
