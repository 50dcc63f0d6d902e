"""
Structured records produced by the text parsers.

Question records carry a ``type`` discriminant (``mcq``, ``cq`` or ``sq``) so a
list of mixed records can be dispatched on without guessing at its shape.
Every record converts to a plain dict with ``to_dict()`` for JSON responses
and for storage.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List

METADATA_FIELDS = ('subject', 'chapter', 'lesson', 'board')


@dataclass
class Metadata:
    """Subject/chapter/lesson/board block inherited by following questions."""
    subject: str = ''
    chapter: str = ''
    lesson: str = ''
    board: str = ''

    def set(self, name: str, value: str):
        if name in METADATA_FIELDS:
            setattr(self, name, value)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in METADATA_FIELDS)

    def copy(self) -> 'Metadata':
        return Metadata(self.subject, self.chapter, self.lesson, self.board)

    def fill_missing(self, target):
        """Copy every field set here onto ``target`` where it has none."""
        for name in METADATA_FIELDS:
            value = getattr(self, name)
            if value and not getattr(target, name):
                setattr(target, name, value)

    def absorb(self, source):
        """Take every non-empty field of ``source``."""
        for name in METADATA_FIELDS:
            value = getattr(source, name)
            if value:
                setattr(self, name, value)


@dataclass
class Option:
    label: str
    text: str


@dataclass
class QuestionRecord:
    language: str = 'en'
    subject: str = ''
    chapter: str = ''
    lesson: str = ''
    board: str = ''

    type = ''

    def apply_metadata(self, metadata: Metadata):
        for name in METADATA_FIELDS:
            setattr(self, name, getattr(metadata, name))

    def to_dict(self) -> Dict[str, Any]:
        data = {'type': self.type}
        data.update(asdict(self))
        return data


@dataclass
class MCQQuestion(QuestionRecord):
    question_text: str = ''
    options: List[Option] = field(default_factory=list)
    correct_answer: str = ''
    explanation: str = ''

    type = 'mcq'

    def option_labels(self) -> List[str]:
        return [option.label for option in self.options]

    def is_closed(self) -> bool:
        """A question is closed once its answer or explanation is known."""
        return bool(self.correct_answer or self.explanation)


@dataclass
class CQPart:
    letter: str
    text: str
    marks: int = 0
    answer: str = ''


@dataclass
class CQQuestion(QuestionRecord):
    question_text: str = ''
    parts: List[CQPart] = field(default_factory=list)
    image: str = ''

    type = 'cq'

    def find_part(self, letter: str):
        for part in self.parts:
            if part.letter == letter:
                return part
        return None


@dataclass
class SQQuestion(QuestionRecord):
    question: str = ''
    answer: str = ''

    type = 'sq'


# Lesson tree

@dataclass
class Subtopic:
    title: str
    definition: str = ''
    explanation: str = ''
    shortcut: str = ''
    mistakes: str = ''
    difficulty: str = ''


@dataclass
class LessonQuestion:
    question: str = ''
    options: List[Option] = field(default_factory=list)
    correct_answer: str = ''
    explanation: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Topic:
    title: str
    description: str = ''
    subtopics: List[Subtopic] = field(default_factory=list)
    questions: List[LessonQuestion] = field(default_factory=list)


@dataclass
class Chapter:
    subject: str
    chapter: str
    topics: List[Topic] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Chapter overview

@dataclass
class OverviewTopic:
    id: str
    title: str
    content: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
