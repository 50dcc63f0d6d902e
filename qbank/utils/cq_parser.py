"""
Creative question (CQ) parser.

A CQ is a stem (stimulus) followed by lettered parts, each carrying marks and
an answer written further down under an answer header.  Two conventions are
accepted side by side:

* English: ``Question 1`` headers, stem text, ``a. ... (1)`` part lines, then
  ``Answer:`` and ``a. ...`` answer lines.
* Bengali: ``উদ্দীপক:`` stimulus block, ``প্রশ্ন:`` parts block, ``উত্তর:``
  answer block, with ``ক।``/``ক.`` letters and Bengali digits.

Metadata is inherited forward across questions.  A block that holds only
metadata, or only stem text, emits nothing by itself: its values are carried
onto the next question that has parts.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from qbank.utils.normalizer import clean_text, match_metadata, normalize_option_label, split_marks
from qbank.utils.records import CQPart, CQQuestion, Metadata

logger = logging.getLogger(__name__)

IMAGE_SENTINEL = '[There is a picture]'


class LineKind(Enum):
    BLANK = 'blank'
    SEPARATOR = 'separator'
    HEADER = 'header'
    METADATA = 'metadata'
    STIMULUS_HEADER = 'stimulus_header'
    QUESTION_HEADER = 'question_header'
    ANSWER_HEADER = 'answer_header'
    IMAGE = 'image'
    PART = 'part'
    TEXT = 'text'


class Section(Enum):
    STEM = 'stem'
    STIMULUS = 'stimulus'
    ANSWER = 'answer'


@dataclass
class QuestionDraft:
    """A question under construction plus its section bookkeeping."""
    question: CQQuestion
    section: Section = Section.STEM
    stem_lines: List[str] = field(default_factory=list)
    has_started_parts: bool = False
    answer_part: Optional[CQPart] = None
    skip_answer: bool = False
    bullet_mode: bool = False


@dataclass
class ScanState:
    draft: Optional[QuestionDraft] = None
    pending_metadata: Metadata = field(default_factory=Metadata)
    pending_stem: str = ''
    questions: List[CQQuestion] = field(default_factory=list)


class CQParser:
    """Section-aware scanner for creative question text."""

    SEPARATOR = re.compile(r'^-{3,}$')
    HEADER = re.compile(r'^(?:question|প্রশ্ন|q\.?|সৃজনশীল\s+প্রশ্ন)\s*[\d০-৯ং]+', re.IGNORECASE)
    HEADER_MAX_LENGTH = 50

    STIMULUS_HEADER = re.compile(r'^(?:উদ্দীপক|stem|stimulus)\s*[:ঃ：]\s*(.*)$', re.IGNORECASE)
    QUESTION_HEADER = re.compile(r'^(?:প্রশ্ন|questions?)\s*[:ঃ：]\s*(.*)$', re.IGNORECASE)
    ANSWER_HEADER = re.compile(
        r'^(?:answers?|ans\.?|উত্তর(?:সমূহ)?)\s*(?:[:=ঃ：]\s*(.*))?$',
        re.IGNORECASE
    )

    PART = re.compile(r'^([a-dক-ঘ])[.)।]\s*(.+)$')
    PARENTHESIZED = re.compile(r'\(([^)]*)\)')

    IMAGE_WORDS = ('picture', 'image', 'ছবি', 'চিত্র')

    def __init__(self, language: str = 'en'):
        self.language = language

    def parse(self, text: str) -> List[CQQuestion]:
        """
        Parse creative question text into records.

        Args:
            text: Raw pasted text, English or Bengali
        Returns:
            List of CQQuestion records that have at least one part
        """
        if not isinstance(text, str) or not text.strip():
            return []

        state = ScanState()
        self._start_question(state)

        for raw_line in clean_text(text).split('\n'):
            self._handle_line(state, raw_line.strip())

        self._save_question(state)
        logger.info(f"CQ parse produced {len(state.questions)} question(s)")
        return state.questions

    def classify_line(self, line: str) -> LineKind:
        if not line:
            return LineKind.BLANK
        if self.SEPARATOR.match(line):
            return LineKind.SEPARATOR
        if self.is_header(line):
            return LineKind.HEADER
        if match_metadata(line):
            return LineKind.METADATA
        if self.STIMULUS_HEADER.match(line):
            return LineKind.STIMULUS_HEADER
        if self.QUESTION_HEADER.match(line):
            return LineKind.QUESTION_HEADER
        if self.ANSWER_HEADER.match(line):
            return LineKind.ANSWER_HEADER
        if self.is_image_placeholder(line):
            return LineKind.IMAGE
        if self.PART.match(line):
            return LineKind.PART
        return LineKind.TEXT

    def is_header(self, line: str) -> bool:
        if not self.HEADER.match(line):
            return False
        return len(self.PARENTHESIZED.sub('', line).strip()) < self.HEADER_MAX_LENGTH

    def is_image_placeholder(self, line: str) -> bool:
        lowered = line.lower()
        if line.startswith('[') and line.endswith(']'):
            return any(word in lowered for word in self.IMAGE_WORDS)
        return lowered in self.IMAGE_WORDS

    def extract_board(self, text: str) -> Tuple[str, str]:
        """Return ``(board, rest)`` for a header carrying ``(Dhaka Board-2024)``."""
        match = self.PARENTHESIZED.search(text)
        if not match:
            return '', text.strip()
        rest = (text[:match.start()] + text[match.end():]).strip()
        return match.group(1).strip(), rest

    def _handle_line(self, state: ScanState, line: str):
        kind = self.classify_line(line)
        draft = state.draft

        if kind == LineKind.SEPARATOR:
            self._start_question(state)
            return

        if kind == LineKind.HEADER:
            board, _ = self.extract_board(line)
            self._start_question(state)
            if board:
                state.draft.question.board = board
            return

        if kind == LineKind.METADATA:
            if draft.question.parts or draft.section == Section.ANSWER:
                self._start_question(state)
            name, value = match_metadata(line)
            setattr(state.draft.question, name, value)
            return

        if kind == LineKind.STIMULUS_HEADER:
            if draft.question.parts:
                self._start_question(state)
            state.draft.section = Section.STIMULUS
            remainder = self.STIMULUS_HEADER.match(line).group(1).strip()
            if remainder:
                self._add_stimulus_line(state.draft, remainder)
            return

        if kind == LineKind.QUESTION_HEADER:
            if draft.question.parts:
                self._start_question(state)
            state.draft.section = Section.STEM
            board, rest = self.extract_board(self.QUESTION_HEADER.match(line).group(1))
            if board:
                state.draft.question.board = board
            if rest:
                state.draft.stem_lines.append(rest)
            return

        if kind == LineKind.ANSWER_HEADER:
            draft.section = Section.ANSWER
            remainder = (self.ANSWER_HEADER.match(line).group(1) or '').strip()
            if remainder:
                self._handle_answer_line(draft, remainder)
            return

        if kind == LineKind.IMAGE:
            draft.question.image = IMAGE_SENTINEL
            return

        if draft.section == Section.ANSWER:
            if kind == LineKind.BLANK:
                self._break_answer(draft)
            else:
                self._handle_answer_line(draft, line)
            return

        if kind == LineKind.BLANK:
            return

        if draft.section == Section.STIMULUS:
            if kind != LineKind.PART:
                self._add_stimulus_line(draft, line)
                return
            draft.section = Section.STEM

        if kind == LineKind.PART:
            self._add_part(draft, line)
        elif not draft.has_started_parts:
            draft.stem_lines.append(line)
        elif draft.question.parts:
            last_part = draft.question.parts[-1]
            last_part.text = f"{last_part.text} {line}"

    def _add_stimulus_line(self, draft: QuestionDraft, line: str):
        line = re.sub(r'^>\s*', '', line).strip()
        if line:
            draft.stem_lines.append(line)

    def _add_part(self, draft: QuestionDraft, line: str):
        match = self.PART.match(line)
        letter = normalize_option_label(match.group(1))
        text, marks = split_marks(match.group(2).strip())

        draft.has_started_parts = True
        draft.question.parts.append(CQPart(letter=letter, text=text, marks=marks or 0))

    def _handle_answer_line(self, draft: QuestionDraft, line: str):
        question = draft.question

        if line.startswith('·'):
            draft.bullet_mode = True
            part = next((p for p in question.parts if not p.answer), None)
            if part:
                part.answer = line[1:].strip()
                draft.answer_part = part
            return

        if draft.bullet_mode and draft.answer_part:
            if draft.answer_part.answer:
                draft.answer_part.answer = f"{draft.answer_part.answer} {line}"
            return

        match = self.PART.match(line)
        if match:
            part = question.find_part(normalize_option_label(match.group(1)))
            draft.answer_part = part
            draft.skip_answer = part is None
            if part:
                part.answer = match.group(2).strip()
            return

        if draft.skip_answer:
            return

        target = draft.answer_part
        if target is None and question.parts and not draft.bullet_mode:
            target = question.parts[-1]
            draft.answer_part = target

        if target is not None:
            self._append_answer(target, line)

    @staticmethod
    def _append_answer(part: CQPart, line: str):
        if not part.answer:
            part.answer = line
        elif part.answer.endswith('\n'):
            part.answer += line
        else:
            part.answer = f"{part.answer}\n{line}"

    @staticmethod
    def _break_answer(draft: QuestionDraft):
        part = draft.answer_part
        if part and part.answer and not part.answer.endswith('\n'):
            part.answer += '\n'

    def _start_question(self, state: ScanState):
        self._save_question(state)
        state.draft = QuestionDraft(question=CQQuestion(language=self.language))

    def _save_question(self, state: ScanState):
        draft = state.draft
        state.draft = None
        if draft is None:
            return

        question = draft.question
        question.question_text = '\n'.join(draft.stem_lines).strip()
        for part in question.parts:
            part.answer = part.answer.strip()
        question.parts = [part for part in question.parts if part.text.strip()]

        if question.parts:
            if state.pending_stem:
                question.question_text = '\n'.join(
                    text for text in (state.pending_stem, question.question_text) if text
                )
                state.pending_stem = ''
            state.pending_metadata.fill_missing(question)
            state.pending_metadata.absorb(question)
            state.questions.append(question)
            logger.debug(f"CQ saved with parts {[part.letter for part in question.parts]}")
        elif question.question_text:
            # Stem shared by the next question
            state.pending_metadata.absorb(question)
            state.pending_stem = question.question_text
        else:
            state.pending_metadata.absorb(question)


def parse_cq_questions(text: str, language: str = 'en') -> List[CQQuestion]:
    """Parse creative question text; returns an empty list when nothing is found."""
    return CQParser(language).parse(text)
