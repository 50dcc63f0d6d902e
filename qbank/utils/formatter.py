"""Render question records back into the plain-text import format."""
from typing import Any, Dict, Iterable, List

from qbank.utils.records import METADATA_FIELDS

FIELD_LABELS = {
    'subject': 'Subject',
    'chapter': 'Chapter',
    'lesson': 'Lesson',
    'board': 'Board',
}


def _as_dict(record) -> Dict[str, Any]:
    return record.to_dict() if hasattr(record, 'to_dict') else record


def _metadata_lines(record: Dict[str, Any]) -> List[str]:
    return [
        f"[{FIELD_LABELS[name]}: {record[name]}]"
        for name in METADATA_FIELDS if record.get(name)
    ]


def format_mcq(record, number: int = 1) -> str:
    record = _as_dict(record)
    lines = _metadata_lines(record)
    lines.append(f"{number}. {record.get('question_text', '')}")
    for option in record.get('options', []):
        lines.append(f"{option.get('label', '')}) {option.get('text', '')}")
    if record.get('correct_answer'):
        lines.append(f"Correct: {record['correct_answer']}")
    if record.get('explanation'):
        lines.append(f"Explanation: {record['explanation']}")
    return '\n'.join(lines)


def format_cq(record, number: int = 1) -> str:
    record = _as_dict(record)
    lines = _metadata_lines(record)
    lines.append(f"Question {number}")
    if record.get('image'):
        lines.append('[Picture]')
    if record.get('question_text'):
        lines.append(record['question_text'])

    parts = record.get('parts', [])
    for part in parts:
        marks = f" ({part['marks']})" if part.get('marks') else ''
        lines.append(f"{part.get('letter', '')}. {part.get('text', '')}{marks}")

    answered = [part for part in parts if part.get('answer')]
    if answered:
        lines.append('Answer:')
        for part in answered:
            lines.append(f"{part.get('letter', '')}. {part['answer']}")
    return '\n'.join(lines)


def format_sq(record, number: int = 1) -> str:
    record = _as_dict(record)
    lines = _metadata_lines(record)
    lines.append(f"{number}. {record.get('question', '')}")
    if record.get('answer'):
        lines.append(f"Answer: {record['answer']}")
    return '\n'.join(lines)


FORMATTERS = {
    'mcq': format_mcq,
    'cq': format_cq,
    'sq': format_sq,
}


def format_records(records: Iterable) -> str:
    """Render a list of records as one document, one section per record."""
    blocks = []
    for index, record in enumerate(records, start=1):
        record = _as_dict(record)
        formatter = FORMATTERS.get(record.get('type'))
        if formatter is None:
            raise ValueError(f"Cannot format record of type {record.get('type')!r}")
        blocks.append(formatter(record, index))
    return '\n---\n'.join(blocks)
