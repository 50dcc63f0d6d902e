"""
Short question (SQ) parser.

Each section (split on ``---`` lines or ``###`` headings) is parsed in one of
two modes:

* grouped: lettered sub-questions, an ``Answer:`` divider line, then lettered
  answers.  Questions and answers are paired by letter.
* sequential: numbered questions, each followed by its own answer, either
  inline (``1. What is X? Answer: Y``) or after an answer marker line.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from qbank.utils.normalizer import clean_text, match_metadata, normalize_option_label, split_marks
from qbank.utils.records import Metadata, SQQuestion

logger = logging.getLogger(__name__)


@dataclass
class Section:
    metadata: Metadata = field(default_factory=Metadata)
    lines: List[str] = field(default_factory=list)


class SQParser:
    """Parser for short question/answer text."""

    SEPARATOR = re.compile(r'^-{3,}$')
    HEADING = re.compile(r'^###\s*(.*)$')

    ANSWER_DIVIDER = re.compile(r'^(?:answer|ans|উত্তর)\s*[:=ঃ]?\s*$', re.IGNORECASE)
    ANSWER_MARKER = re.compile(r'^(?:answer|ans|উত্তর)\s*[:=ঃ]\s*(.*)$', re.IGNORECASE)
    INLINE_ANSWER = re.compile(r'(?:^|\s)(?:answer|ans|উত্তর)\s*[:=ঃ]\s*(.*)$', re.IGNORECASE)

    LETTERED = re.compile(r'^([a-dক-ঘ])[.)]\s*(.+)$')
    NUMBERED = re.compile(r'^[\d০-৯]+[।.)\s]')
    # once an answer has begun, "8 planets ..." is answer text, not question 8
    NUMBERED_IN_ANSWER = re.compile(r'^[\d০-৯]+[।.)]')
    NUMBER_PREFIX = re.compile(r'^[\d০-৯]+[।.)\s]*')

    SECTION_HEADER = re.compile(
        r'^(?:(?:question|প্রশ্ন)(?:\s+(?:set|সেট))?|সৃজনশীল\s+প্রশ্ন|q\.?)'
        r'\s*[\d০-৯]*\s*[:.)]?\s*(?:\((.*)\))?$',
        re.IGNORECASE
    )

    def __init__(self, language: str = 'en'):
        self.language = language

    def parse(self, text: str) -> List[SQQuestion]:
        """
        Parse short question text into records.

        Args:
            text: Raw pasted text
        Returns:
            List of SQQuestion records
        """
        if not isinstance(text, str) or not text.strip():
            return []

        questions = []
        for section in self._split_sections(clean_text(text)):
            grouped = self._parse_grouped(section)
            if grouped is not None:
                logger.debug(f"SQ section parsed in grouped mode: {len(grouped)} pair(s)")
                questions.extend(grouped)
            else:
                questions.extend(self._parse_sequential(section))

        logger.info(f"SQ parse produced {len(questions)} question(s)")
        return questions

    def _split_sections(self, text: str) -> List[Section]:
        sections = [Section()]
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            if not line:
                continue

            if self.SEPARATOR.match(line):
                sections.append(Section())
                continue

            heading = self.HEADING.match(line)
            if heading:
                sections.append(Section())
                line = heading.group(1).strip()
                if not line:
                    continue

            metadata = match_metadata(line)
            if metadata:
                sections[-1].metadata.set(*metadata)
            else:
                sections[-1].lines.append(line)

        return [section for section in sections if section.lines]

    def _new_question(self, section: Section) -> SQQuestion:
        question = SQQuestion(language=self.language)
        question.apply_metadata(section.metadata)
        return question

    def _is_header(self, section: Section, line: str) -> bool:
        header = self.SECTION_HEADER.match(line)
        if not header:
            return False
        if header.group(1) and not section.metadata.board:
            section.metadata.board = header.group(1).strip()
        return True

    def _parse_grouped(self, section: Section) -> Optional[List[SQQuestion]]:
        """Return grouped-mode records, or None when the section is not grouped."""
        lines = section.lines
        divider = next((i for i, line in enumerate(lines) if self.ANSWER_DIVIDER.match(line)), None)
        if divider is None:
            return None

        question_pool = lines[:divider]
        answer_pool = lines[divider + 1:]
        if not any(self.LETTERED.match(line) for line in question_pool):
            return None
        if not any(self.LETTERED.match(line) for line in answer_pool):
            return None

        sub_questions: List[List[str]] = []
        current = None
        for line in question_pool:
            match = self.LETTERED.match(line)
            if match:
                current = [normalize_option_label(match.group(1)), match.group(2)]
                sub_questions.append(current)
            elif self._is_header(section, line):
                continue
            elif current is not None:
                current[1] = f"{current[1]}\n{line}"

        answers: Dict[str, List[str]] = {}
        current_label = None
        for line in answer_pool:
            match = self.LETTERED.match(line)
            if match:
                current_label = normalize_option_label(match.group(1))
                answers[current_label] = [match.group(2)]
            elif current_label is not None:
                answers[current_label].append(line)

        questions = []
        for label, question_text in sub_questions:
            answer = '\n'.join(answers.get(label, [])).strip()
            question_text, _ = split_marks(question_text.strip(), allow_bare=False)
            if question_text and answer:
                question = self._new_question(section)
                question.question = question_text
                question.answer = answer
                questions.append(question)
        return questions

    def _parse_sequential(self, section: Section) -> List[SQQuestion]:
        questions = []
        current = None
        in_answer = False

        for line in section.lines:
            if self._is_header(section, line):
                continue

            numbered = self.NUMBERED_IN_ANSWER if in_answer or (current and current.answer) else self.NUMBERED
            if numbered.match(line):
                if current is not None and current.question:
                    questions.append(current)
                current = self._new_question(section)
                in_answer = False

                text = self.NUMBER_PREFIX.sub('', line).strip()
                inline = self.INLINE_ANSWER.search(text)
                if inline:
                    current.question = text[:inline.start()].strip()
                    current.answer = inline.group(1).strip()
                    in_answer = True
                else:
                    current.question = text
                continue

            if current is None:
                continue

            marker = self.ANSWER_MARKER.match(line) or self.ANSWER_DIVIDER.match(line)
            if marker:
                in_answer = True
                remainder = marker.group(1).strip() if marker.groups() else ''
                if remainder:
                    current.answer = f"{current.answer}\n{remainder}" if current.answer else remainder
                continue

            if in_answer or current.answer:
                current.answer = f"{current.answer}\n{line}" if current.answer else line
            else:
                current.question = f"{current.question}\n{line}" if current.question else line

        if current is not None and current.question:
            questions.append(current)
        return questions


def parse_sq_questions(text: str, language: str = 'en') -> List[SQQuestion]:
    """Parse short question text; returns an empty list when nothing is found."""
    return SQParser(language).parse(text)
