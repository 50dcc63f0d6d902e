"""Tests for the short question (SQ) parser."""

from qbank.utils.sq_parser import parse_sq_questions


GROUPED_SQ = """Subject: Biology
Question 1 (Dhaka Board-2022)
a. What is a cell? (1)
b. What is DNA? (1)
Answer:
a. The basic unit of life.
b. Deoxyribonucleic acid.
It carries genetic information.
"""

SEQUENTIAL_SQ = """Subject: Geography
1. What is the capital of France? Answer: Paris
2. What is H2O?
Ans: Water
3. Define speed.
Answer:
Distance per unit time.
Measured in m/s.
"""


class TestGroupedMode:
    def test_pairs_questions_and_answers_by_letter(self):
        questions = parse_sq_questions(GROUPED_SQ)

        assert [q.question for q in questions] == ['What is a cell?', 'What is DNA?']
        assert questions[0].answer == 'The basic unit of life.'
        assert questions[1].answer == 'Deoxyribonucleic acid.\nIt carries genetic information.'

    def test_header_board_and_metadata(self):
        for question in parse_sq_questions(GROUPED_SQ):
            assert question.subject == 'Biology'
            assert question.board == 'Dhaka Board-2022'
            assert question.to_dict()['type'] == 'sq'

    def test_bengali_letters(self):
        text = 'ক) কোষ কী?\nখ) ডিএনএ কী?\nউত্তর:\nক) জীবনের একক।\nখ) জিনগত উপাদান।'
        questions = parse_sq_questions(text, language='bn')

        assert len(questions) == 2
        assert questions[0].question == 'কোষ কী?'
        assert questions[0].answer == 'জীবনের একক।'
        assert questions[1].language == 'bn'

    def test_question_without_answer_is_dropped(self):
        text = 'a. First?\nb. Second?\nAnswer:\na. Only the first.'
        questions = parse_sq_questions(text)
        assert [q.question for q in questions] == ['First?']


class TestSequentialMode:
    def test_inline_marker_and_block_answers(self):
        questions = parse_sq_questions(SEQUENTIAL_SQ)

        assert len(questions) == 3
        assert questions[0].question == 'What is the capital of France?'
        assert questions[0].answer == 'Paris'
        assert questions[1].answer == 'Water'
        assert questions[2].question == 'Define speed.'
        assert questions[2].answer == 'Distance per unit time.\nMeasured in m/s.'
        assert all(q.subject == 'Geography' for q in questions)

    def test_question_continues_until_answer(self):
        questions = parse_sq_questions('1. Read the statement\nand explain it.\nAnswer: Done.')
        assert questions[0].question == 'Read the statement\nand explain it.'
        assert questions[0].answer == 'Done.'

    def test_question_without_answer_is_kept(self):
        questions = parse_sq_questions('1. Unanswered question?')
        assert questions[0].question == 'Unanswered question?'
        assert questions[0].answer == ''

    def test_answer_line_starting_with_a_number(self):
        text = '1. How many planets?\nAnswer:\n8 planets orbit the sun.\n2. Is Pluto one of them? Answer: No'
        questions = parse_sq_questions(text)

        assert [(q.question, q.answer) for q in questions] == [
            ('How many planets?', '8 planets orbit the sun.'),
            ('Is Pluto one of them?', 'No'),
        ]

    def test_empty_input(self):
        assert parse_sq_questions('') == []
        assert parse_sq_questions(None) == []


class TestSections:
    def test_metadata_is_scoped_to_its_section(self):
        text = (
            '### Physics set\nSubject: Physics\n1. Q one? Answer: A\n'
            '---\n'
            '1. Q two? Answer: B'
        )
        first, second = parse_sq_questions(text)
        assert first.subject == 'Physics'
        assert second.subject == ''

    def test_heading_starts_a_section(self):
        text = 'Subject: Math\n1. Q one? Answer: A\n### Next\n1. Q two? Answer: B'
        first, second = parse_sq_questions(text)
        assert first.subject == 'Math'
        assert second.subject == ''
