"""
Parser for math creative questions written with LaTeX.

Format::

    **[Subject: Higher Math]**
    **[Chapter: Matrices]**
    **Stem:** Let \\( A = \\begin{pmatrix} 1 & 2 \\\\ 3 & 4 \\end{pmatrix} \\)
    **Question 1a** Find \\( |A| \\). (2)
    **Answer 1a** \\( |A| = -2 \\)
    ---

Markdown ``*`` is only removed from marker lines; body text keeps it because
it is often multiplication.
"""
import logging
import re
from typing import List

from qbank.utils.normalizer import ZERO_WIDTH_PATTERN, match_metadata, split_marks
from qbank.utils.records import CQPart, CQQuestion, Metadata

logger = logging.getLogger(__name__)

DEFAULT_MARKS = 5

SET_SEPARATOR = re.compile(r'^\s*-{3,}\s*$|\n\s*\n\s*\n', re.MULTILINE)
STEM_PATTERN = re.compile(r'^Stem\s*[:ঃ]\s*(.*)$', re.IGNORECASE)
QUESTION_PATTERN = re.compile(r'^Question\s+\d+\s*([a-d])\b\s*[:.]?\s*(.*)$', re.IGNORECASE)
ANSWER_PATTERN = re.compile(r'^Answer\s+\d+\s*([a-d])\b\s*[:.]?\s*(.*)$', re.IGNORECASE)


def _marker(line: str) -> str:
    return line.replace('**', '').strip()


def parse_math_questions(text: str, language: str = 'en') -> List[CQQuestion]:
    """
    Parse math CQ text into CQ records.

    Metadata carries forward from one question set to the next.  A set is
    emitted only when it has a subject and at least one part.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    text = ZERO_WIDTH_PATTERN.sub('', text)
    questions = []
    inherited = Metadata()

    for block in SET_SEPARATOR.split(text):
        if not block.strip():
            continue

        question = CQQuestion(language=language)
        stem_lines: List[str] = []
        part = None
        mode = None

        for raw_line in block.split('\n'):
            line = raw_line.strip()
            if not line:
                continue
            marker = _marker(line)

            metadata = match_metadata(marker)
            if metadata:
                setattr(question, metadata[0], metadata[1])
                continue

            stem = STEM_PATTERN.match(marker)
            if stem:
                stem_lines = [stem.group(1).strip()] if stem.group(1).strip() else []
                mode = 'stem'
                continue

            part_match = QUESTION_PATTERN.match(marker)
            if part_match:
                part_text, marks = split_marks(part_match.group(2), allow_bare=False)
                part = CQPart(
                    letter=part_match.group(1).lower(),
                    text=part_text,
                    marks=DEFAULT_MARKS if marks is None else marks
                )
                question.parts.append(part)
                mode = 'part'
                continue

            answer_match = ANSWER_PATTERN.match(marker)
            if answer_match:
                part = question.find_part(answer_match.group(1).lower())
                mode = 'answer' if part is not None else None
                if part is not None:
                    part.answer = answer_match.group(2).strip()
                continue

            if mode == 'stem':
                stem_lines.append(line)
            elif mode == 'part':
                part.text = f"{part.text}\n{line}".strip()
            elif mode == 'answer':
                part.answer = f"{part.answer}\n{line}".strip()

        question.question_text = '\n'.join(stem_lines).strip()
        inherited.fill_missing(question)
        inherited.absorb(question)

        if question.subject and question.parts:
            questions.append(question)
        else:
            logger.debug('Skipped math question set without subject or parts')

    logger.info(f"Math parse produced {len(questions)} question(s)")
    return questions
