from typing import Any, Dict, List, Tuple

from qbank.utils.normalizer import OPTION_LETTERS

QUESTION_TYPES = ['mcq', 'cq', 'sq']


def validate_required_fields(data, required_fields):
    """
    Validate that required fields are present in data.
    Returns tuple (is_valid, missing_fields)
    """
    missing = []
    for field in required_fields:
        if field not in data or data[field] is None or data[field] == '':
            missing.append(field)

    return len(missing) == 0, missing


def sanitize_string(value, max_length=None):
    """
    Sanitize a string value by stripping whitespace
    and optionally truncating to max_length.
    """
    if not isinstance(value, str):
        return value

    value = value.strip()

    if max_length and len(value) > max_length:
        value = value[:max_length]

    return value


def _blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def _objects(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) for item in value)


class QuestionValidator:
    """Completeness checks run over parsed records before they are saved."""

    @staticmethod
    def shape_errors(question) -> List[str]:
        """Structural problems that would stop the other checks from reading the record."""
        if not isinstance(question, dict):
            return ['Record must be an object']
        errors = []
        if question.get('options') is not None and not _objects(question['options']):
            errors.append('Options must be a list of objects')
        if question.get('parts') is not None and not _objects(question['parts']):
            errors.append('Parts must be a list of objects')
        return errors

    @staticmethod
    def validate_mcq(question: Dict[str, Any]) -> Tuple[bool, List[str]]:
        errors = []

        if _blank(question.get('subject')):
            errors.append('Subject is required')
        if _blank(question.get('chapter')):
            errors.append('Chapter is required')
        if _blank(question.get('question_text')):
            errors.append('Question text is required')

        options = question.get('options') or []
        if len(options) < 2:
            errors.append('At least 2 options are required')

        labels = [option.get('label') for option in options]
        if len(set(labels)) != len(labels):
            errors.append('Option labels must be unique')
        if any(label not in OPTION_LETTERS for label in labels):
            errors.append('Option labels must be a, b, c or d')

        correct_answer = question.get('correct_answer')
        if _blank(correct_answer):
            errors.append('Correct answer is required')
        elif correct_answer not in labels:
            errors.append(f"Correct answer '{correct_answer}' does not match any option")

        return len(errors) == 0, errors

    @staticmethod
    def validate_cq(question: Dict[str, Any]) -> Tuple[bool, List[str]]:
        errors = []

        if _blank(question.get('question_text')) and not question.get('image'):
            errors.append('Stem text is required')

        parts = question.get('parts') or []
        if not parts:
            errors.append('At least one part is required')

        for part in parts:
            letter = part.get('letter', '?')
            if _blank(part.get('text')):
                errors.append(f"Part {letter} has no text")
            marks = part.get('marks', 0)
            if not isinstance(marks, int) or marks < 0:
                errors.append(f"Part {letter} has invalid marks")

        return len(errors) == 0, errors

    @staticmethod
    def validate_sq(question: Dict[str, Any]) -> Tuple[bool, List[str]]:
        errors = []
        if _blank(question.get('question')):
            errors.append('Question is required')
        return len(errors) == 0, errors

    @classmethod
    def validate(cls, question: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Dispatch on the record's ``type``."""
        shape = cls.shape_errors(question)
        if shape:
            return False, shape

        question_type = question.get('type')
        if question_type == 'mcq':
            return cls.validate_mcq(question)
        if question_type == 'cq':
            return cls.validate_cq(question)
        if question_type == 'sq':
            return cls.validate_sq(question)
        return False, [f"Invalid question type: {question_type!r}"]

    @classmethod
    def validate_batch(cls, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
        valid = []
        invalid = []
        for index, question in enumerate(questions):
            is_valid, errors = cls.validate(question)
            if is_valid:
                valid.append(question)
            else:
                invalid.append({'index': index, 'record': question, 'errors': errors})
        return {'valid': valid, 'invalid': invalid}


def validate_lesson(chapters) -> Tuple[bool, List[str]]:
    """Check a parsed lesson (list of chapter dicts)."""
    if not isinstance(chapters, list) or not chapters:
        return False, ['No chapters found']

    errors = []
    for index, chapter in enumerate(chapters, start=1):
        if not isinstance(chapter, dict):
            errors.append(f"Chapter {index}: must be an object")
            continue
        prefix = f"Chapter {index} ({chapter.get('chapter') or 'Unnamed'}): "
        if not chapter.get('subject'):
            errors.append(f"{prefix}Subject is missing")
        if not chapter.get('chapter'):
            errors.append(f"{prefix}Chapter name is missing")

        topics = chapter.get('topics') or []
        if not topics:
            errors.append(f"{prefix}No topics found")
        elif not _objects(topics):
            errors.append(f"{prefix}Topics must be a list of objects")
            continue

        for topic in topics:
            topic_prefix = f"{prefix}Topic \"{topic.get('title') or 'Unnamed'}\": "
            if not topic.get('title'):
                errors.append(f"{topic_prefix}Missing title")
            if not topic.get('subtopics') and not topic.get('questions'):
                errors.append(f"{topic_prefix}No subtopics or questions found")

            questions = topic.get('questions') or []
            if not _objects(questions):
                errors.append(f"{topic_prefix}Questions must be a list of objects")
                continue

            for number, question in enumerate(questions, start=1):
                question_prefix = f"{topic_prefix}Question {number}: "
                if not question.get('question'):
                    errors.append(f"{question_prefix}Missing text")
                options = question.get('options') or []
                if not _objects(options):
                    errors.append(f"{question_prefix}Options must be a list of objects")
                elif len(options) < 2:
                    errors.append(f"{question_prefix}Must have at least 2 options")
                if not question.get('correct_answer'):
                    errors.append(f"{question_prefix}Missing the correct answer")

    return len(errors) == 0, errors


def validate_overview(overview) -> Tuple[bool, List[str]]:
    """Check a parsed chapter overview (``{'topics': [...]}``)."""
    if not isinstance(overview, dict) or 'topics' not in overview:
        return False, ['Missing topics array']

    topics = overview['topics']
    if not isinstance(topics, list):
        return False, ['Topics must be an array']
    if not topics:
        return False, ['At least one topic is required']

    errors = []
    for index, topic in enumerate(topics):
        if not isinstance(topic, dict):
            errors.append(f"Topic at index {index} must be an object")
            continue
        if not topic.get('id'):
            errors.append(f"Topic at index {index} is missing an ID")
        if not topic.get('title'):
            errors.append(f"Topic at index {index} is missing a title")
        content = topic.get('content')
        if not isinstance(content, str):
            errors.append(f"Topic at index {index} has invalid content (must be a string)")
        elif not content.strip():
            errors.append(f"Topic \"{topic.get('title') or topic.get('id')}\" has no content")

    return len(errors) == 0, errors
