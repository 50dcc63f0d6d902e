"""
Multiple-choice question parser.

Turns pasted exam text into MCQ records.  The text is split into sections on
``---`` lines; each section keeps its own metadata, so a separator resets
subject/chapter/lesson/board.  Inside a section every line is first classified
(metadata, question start, option, answer key, explanation marker or plain
text) and then handled against the scan state.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from qbank.utils.normalizer import clean_text, match_metadata, normalize_option_label, parse_int
from qbank.utils.records import MCQQuestion, Metadata, Option

logger = logging.getLogger(__name__)


class LineKind(Enum):
    SKIP = 'skip'
    METADATA = 'metadata'
    QUESTION_START = 'question_start'
    OPTION = 'option'
    ANSWER = 'answer'
    EXPLANATION = 'explanation'
    TEXT = 'text'


@dataclass
class ScanState:
    """Mutable state for one section of the document."""
    metadata: Metadata = field(default_factory=Metadata)
    question: Optional[MCQQuestion] = None
    in_explanation: bool = False
    questions: List[MCQQuestion] = field(default_factory=list)


class MCQParser:
    """Line-classifying scanner for MCQ import text."""

    SEPARATOR = re.compile(r'^-{3,}$')
    SET_HEADER = re.compile(r'^(?:question\s+set|প্রশ্ন\s+সেট)\b.*$', re.IGNORECASE)

    # A leading numeral followed by '.' or a danda; never a parenthesis
    QUESTION_START = re.compile(r'^([\d০-৯]+)[।.]')
    QUESTION_PREFIX = re.compile(r'^[\d০-৯]+[।.]\s*')
    SMALL_NUMBER = re.compile(r'^([1-4১-৪])[।.]')

    OPTION = re.compile(r'^(?:[a-dক-ঘ1-4১-৪][.)।\s]|[A-D][.)])')
    OPTION_PARTS = re.compile(r'^([a-dA-Dক-ঘ1-4১-৪])[.)।\s]*(.+)$')

    ANSWER = re.compile(
        r'^(?:correct\s*answer|correct|answer|ans|সঠিক\s*উত্তর|সঠিক|উত্তর)\s*[:=ঃ：]\s*(.+)$',
        re.IGNORECASE
    )
    EXPLANATION = re.compile(
        r'^(?:explanation|explain|exp|bekkha|ব্যাখ্যা)\s*[:=ঃ：]\s*(.*)$',
        re.IGNORECASE
    )

    # Cue phrases after which small numerals are always option labels
    OPTION_CUES = ['কোনটি সঠিক', 'Which is correct', 'নিচের কোনটি']

    def __init__(self, language: str = 'en'):
        self.language = language

    def parse(self, text: str) -> List[MCQQuestion]:
        """
        Parse MCQ text into records.

        Args:
            text: Raw pasted text
        Returns:
            List of MCQQuestion records in document order
        """
        if not isinstance(text, str) or not text.strip():
            return []

        questions = []
        for section in self._split_sections(clean_text(text)):
            questions.extend(self._parse_section(section))

        logger.info(f"MCQ parse produced {len(questions)} question(s)")
        return questions

    def _split_sections(self, text: str) -> List[List[str]]:
        sections = [[]]
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            if not line:
                continue
            if self.SEPARATOR.match(line):
                sections.append([])
                continue
            sections[-1].append(line)
        return [section for section in sections if section]

    def classify_line(self, line: str) -> LineKind:
        if self.SET_HEADER.match(line):
            return LineKind.SKIP
        if match_metadata(line):
            return LineKind.METADATA
        if self.QUESTION_START.match(line):
            return LineKind.QUESTION_START
        if self.OPTION.match(line):
            return LineKind.OPTION
        if self.ANSWER.match(line):
            return LineKind.ANSWER
        if self.EXPLANATION.match(line):
            return LineKind.EXPLANATION
        return LineKind.TEXT

    def _parse_section(self, lines: List[str]) -> List[MCQQuestion]:
        state = ScanState()

        for line in lines:
            kind = self.classify_line(line)

            if kind == LineKind.SKIP:
                continue

            if kind == LineKind.METADATA:
                name, value = match_metadata(line)
                state.metadata.set(name, value)
                state.in_explanation = False
                continue

            if kind == LineKind.QUESTION_START:
                if self.starts_new_question(state.question, line):
                    self._start_question(state, line)
                else:
                    self._add_option(state, line)
                continue

            if state.question is None:
                # Nothing to attach to before the first numbered question
                continue

            if kind == LineKind.OPTION:
                if not self._add_option(state, line):
                    self._add_text(state, line)
            elif kind == LineKind.ANSWER:
                self._set_answer(state, line)
            elif kind == LineKind.EXPLANATION:
                remainder = self.EXPLANATION.match(line).group(1).strip()
                state.question.explanation = remainder
                state.in_explanation = True
            else:
                self._add_text(state, line)

        self._flush(state)
        return state.questions

    def starts_new_question(self, question: Optional[MCQQuestion], line: str) -> bool:
        """
        Decide whether a numbered line opens a question or is a numbered option.

        A closed question always yields to a new one.  Otherwise a small
        numeral (1-4) is an option when the stem carries a "which is correct"
        cue, or when it is the next option in sequence.
        """
        if question is None or question.is_closed():
            return True

        small = self.SMALL_NUMBER.match(line)
        if not small:
            return True

        if any(cue in question.question_text for cue in self.OPTION_CUES):
            return False

        return parse_int(small.group(1)) != len(question.options) + 1

    def _start_question(self, state: ScanState, line: str):
        self._flush(state)
        question = MCQQuestion(language=self.language)
        question.apply_metadata(state.metadata)
        question.question_text = self.QUESTION_PREFIX.sub('', line).strip()
        state.question = question
        state.in_explanation = False

    def _add_option(self, state: ScanState, line: str) -> bool:
        question = state.question
        match = self.OPTION_PARTS.match(line)
        if question is None or not match or question.is_closed():
            return False

        label = normalize_option_label(match.group(1))
        if label in question.option_labels():
            return False

        question.options.append(Option(label=label, text=match.group(2).strip()))
        return True

    def _set_answer(self, state: ScanState, line: str):
        value = self.ANSWER.match(line).group(1).strip()
        token = value.split()[0].strip('()[].')
        state.question.correct_answer = normalize_option_label(token.lower())
        state.in_explanation = False

    def _add_text(self, state: ScanState, line: str):
        question = state.question
        if state.in_explanation:
            question.explanation = f"{question.explanation}\n{line}" if question.explanation else line
        elif question.correct_answer and not question.explanation:
            question.explanation = line
            state.in_explanation = True
        elif not question.options:
            question.question_text = f"{question.question_text}\n{line}" if question.question_text else line

    def _flush(self, state: ScanState):
        if state.question is not None:
            logger.debug(f"MCQ flushed with {len(state.question.options)} option(s)")
            state.questions.append(state.question)
        state.question = None
        state.in_explanation = False


def parse_mcq_questions(text: str, language: str = 'en') -> List[MCQQuestion]:
    """Parse MCQ import text; returns an empty list when nothing is found."""
    return MCQParser(language).parse(text)
