"""The bundled format examples must parse cleanly with their own parsers."""

import pytest

from qbank.utils.cq_parser import parse_cq_questions
from qbank.utils.examples import FORMAT_EXAMPLES
from qbank.utils.lesson_parser import parse_lesson_text
from qbank.utils.math_parser import parse_math_questions
from qbank.utils.mcq_parser import parse_mcq_questions
from qbank.utils.overview_parser import parse_overview_chapters, parse_overview_text
from qbank.utils.sq_parser import parse_sq_questions
from qbank.utils.validators import QuestionValidator, validate_lesson, validate_overview


@pytest.mark.parametrize('kind, language, parser, expected', [
    ('mcq', 'en', parse_mcq_questions, 3),
    ('mcq', 'bn', parse_mcq_questions, 1),
    ('cq', 'en', parse_cq_questions, 1),
    ('cq', 'bn', parse_cq_questions, 1),
    ('sq', 'en', parse_sq_questions, 4),
    ('sq', 'bn', parse_sq_questions, 2),
    ('math', 'en', parse_math_questions, 1),
])
def test_question_examples_are_valid(kind, language, parser, expected):
    records = [record.to_dict() for record in parser(FORMAT_EXAMPLES[kind][language], language)]

    assert len(records) == expected
    report = QuestionValidator.validate_batch(records)
    assert report['invalid'] == []


def test_cq_examples_have_four_answered_parts():
    for language in ('en', 'bn'):
        question = parse_cq_questions(FORMAT_EXAMPLES['cq'][language], language)[0]
        assert [p.marks for p in question.parts] == [1, 2, 3, 4]
        assert all(p.answer for p in question.parts)
        assert question.board


def test_lesson_example_is_valid():
    chapters = [chapter.to_dict() for chapter in parse_lesson_text(FORMAT_EXAMPLES['lesson']['en'])]
    assert validate_lesson(chapters) == (True, [])


def test_overview_examples():
    overview = parse_overview_text(FORMAT_EXAMPLES['overview']['en'])
    topics = [topic.to_dict() for topic in overview['topics']]
    assert validate_overview({'topics': topics}) == (True, [])

    chapters = parse_overview_chapters(FORMAT_EXAMPLES['overview']['bulk'])
    assert [c['name'] for c in chapters][0] == 'English Version: Motion'
    assert len(chapters) == 2
