"""
Lesson outline parser.

Lessons are written as a markdown-like outline::

    Subject: Physics  Chapter: Motion
    ### Topic 1: Velocity
    #### Subtopic 1.1: Speed
    **Definition:** ...
    **Explanation:** ...
    ### Review Questions & Answers
    Q1: ...
    a) ...
    Correct: b
    Explanation: ...

and become a chapter -> topic -> subtopic/question tree.
"""
import logging
import re
from typing import List, Optional

from qbank.utils.normalizer import ZERO_WIDTH_PATTERN, normalize_option_label
from qbank.utils.records import Chapter, LessonQuestion, Option, Subtopic, Topic

logger = logging.getLogger(__name__)

SUBJECT_PATTERN = re.compile(
    r'^(?:[*#-]*\s*)?(?:\*\*)?Subject:\s*(.*?)(?:\*\*)?(?:\s+(?:\*\*)?Chapter:|$)',
    re.IGNORECASE
)
CHAPTER_LINE_PATTERN = re.compile(r'^(?:[*-]*\s*)?(?:\*\*)?Chapter:', re.IGNORECASE)
CHAPTER_PATTERN = re.compile(r'(?:\*\*)?Chapter:\s*(.*?)(?:\*\*)?$', re.IGNORECASE)

TOPIC_PATTERN = re.compile(
    r'^(?:[*#•+\-\s]*)?(?:###\s*)?(?:\*\*)?Topic\b(?:\s+[\d.]+)?\s*[:：ঃ.\-]?\s*(.*?)(?:\*\*)?$',
    re.IGNORECASE
)
SUBTOPIC_PATTERN = re.compile(
    r'^(?:[*#•+\-\s]*)?(?:####\s*)?(?:\*\*)?Subtopic\b(?:\s+[\d.]+)?\s*[:：ঃ.\-]?\s*(.*?)(?:\*\*)?$',
    re.IGNORECASE
)

REVIEW_MARKERS = ('review questions', 'পর্যালোচনা প্রশ্ন ও উত্তর')

PROPERTY_PATTERN = re.compile(
    r'^[#*•+\-\s]*(?:\*\*)?('
    r'Definition|সংজ্ঞা|'
    r'Explanation|ব্যাখ্যা|'
    r'(?:Memorizing/Understanding\s+)?shortcuts?|মনে রাখার টিপস/কৌশল|'
    r'(?:Common\s+)?Misconceptions?(?:/Mistakes?)?|Mistakes?|সাধারণ ভুল ধারণা/ভুল|'
    r'Difficulty|জটিলতা'
    r')(?:\*\*)?[:：ঃ.]\s*(?:\*\*)?\s*(.*)$',
    re.IGNORECASE
)

# Substring of the matched label -> Subtopic field
PROPERTY_FIELDS = [
    ('definition', 'definition'),
    ('সংজ্ঞা', 'definition'),
    ('explanation', 'explanation'),
    ('ব্যাখ্যা', 'explanation'),
    ('shortcut', 'shortcut'),
    ('মনে রাখার', 'shortcut'),
    ('misconception', 'mistakes'),
    ('mistake', 'mistakes'),
    ('ভুল', 'mistakes'),
    ('difficulty', 'difficulty'),
    ('জটিলতা', 'difficulty'),
]

QUESTION_PATTERN = re.compile(r'^(?:\*\*)?Q[\d০-৯]*[:：ঃ]\s*(?:\*\*)?\s*(.*?)(?:\*\*)?$', re.IGNORECASE)
CORRECT_PATTERN = re.compile(r'^(?:\*\*)?Correct(?:\*\*)?\s*[:：ঃ]\s*(?:\*\*)?\s*(.*?)(?:\*\*)?$', re.IGNORECASE)
EXPLANATION_PATTERN = re.compile(
    r'^(?:\*\*)?Explanation(?:\*\*)?\s*[:：ঃ]\s*(?:\*\*)?\s*(.*?)(?:\*\*)?$',
    re.IGNORECASE
)
OPTION_PATTERN = re.compile(r'^(?:\*\*)?([a-d]|[ক-ঘ])[).]\s*(?:\*\*)?\s*(.*?)(?:\*\*)?$', re.IGNORECASE)


def _strip_bold(value: str) -> str:
    return re.sub(r'^\*\*?|\*\*$', '', value.strip()).strip()


def _clean_line(line: str) -> str:
    return ZERO_WIDTH_PATTERN.sub('', line).strip()


class ReviewQuestionScanner:
    """The small MCQ grammar used for a topic's review questions."""

    def __init__(self, questions: Optional[List[LessonQuestion]] = None):
        self.questions = questions if questions is not None else []
        self.current: Optional[LessonQuestion] = None

    def feed(self, line: str):
        match = QUESTION_PATTERN.match(line)
        if match:
            self.current = LessonQuestion(question=_strip_bold(match.group(1)))
            self.questions.append(self.current)
            return

        question = self.current
        if question is None:
            return

        match = CORRECT_PATTERN.match(line)
        if match:
            answer = _strip_bold(match.group(1)).lower()
            question.correct_answer = normalize_option_label(answer.strip('().'))
            return

        match = EXPLANATION_PATTERN.match(line)
        if match:
            question.explanation = _strip_bold(match.group(1))
            return

        match = OPTION_PATTERN.match(line)
        if match:
            question.options.append(Option(
                label=normalize_option_label(match.group(1).lower()),
                text=_strip_bold(match.group(2))
            ))
            return

        if question.explanation:
            question.explanation = f"{question.explanation} {line}"
        elif not question.correct_answer and not question.options:
            question.question = f"{question.question} {line}".strip()


class LessonParser:
    """Outline scanner producing a list of Chapter trees."""

    def __init__(self):
        self.chapters: List[Chapter] = []
        self.chapter: Optional[Chapter] = None
        self.topic: Optional[Topic] = None
        self.subtopic: Optional[Subtopic] = None
        self.last_property: Optional[str] = None
        self.review: Optional[ReviewQuestionScanner] = None

    def parse(self, text: str) -> List[Chapter]:
        if not isinstance(text, str) or not text.strip():
            raise ValueError('Invalid input: text must be a non-empty string')

        for raw_line in text.split('\n'):
            line = _clean_line(raw_line)
            if not line or line == '---':
                continue
            self._handle_line(line)

        logger.info(f"Lesson parse produced {len(self.chapters)} chapter(s)")
        return self.chapters

    def _handle_line(self, line: str):
        if self._handle_chapter(line):
            return

        topic_match = TOPIC_PATTERN.match(line)
        if topic_match:
            self._start_topic(_strip_bold(topic_match.group(1)))
            return

        lowered = line.lower()
        if any(marker in lowered for marker in REVIEW_MARKERS):
            if self.topic is not None:
                self.review = ReviewQuestionScanner(self.topic.questions)
            self.subtopic = None
            return

        subtopic_match = SUBTOPIC_PATTERN.match(line)
        if subtopic_match and self.topic is not None:
            self.subtopic = Subtopic(title=_strip_bold(subtopic_match.group(1)))
            self.topic.subtopics.append(self.subtopic)
            self.last_property = None
            self.review = None
            return

        if self.topic is None:
            return

        if self.review is not None:
            self.review.feed(line)
            return

        if self._handle_property(line):
            return

        if self.subtopic is None and not line.startswith('#'):
            self.topic.description = f"{self.topic.description}\n{line}".strip()

    def _handle_chapter(self, line: str) -> bool:
        subject_match = SUBJECT_PATTERN.match(line)
        chapter_match = None
        if subject_match or CHAPTER_LINE_PATTERN.match(line):
            chapter_match = CHAPTER_PATTERN.search(line)
        if not subject_match and not chapter_match:
            return False

        subject = _strip_bold(subject_match.group(1)) if subject_match else ''
        chapter_name = _strip_bold(chapter_match.group(1)) if chapter_match else ''
        if not subject and not chapter_name:
            return False

        current = self.chapter
        is_current_empty = current is not None and not current.chapter and not current.topics

        if current is None:
            create_new = True
        elif subject and chapter_name:
            create_new = True
        elif subject:
            create_new = not is_current_empty
        else:
            create_new = bool(current.chapter)

        if create_new:
            self.chapter = Chapter(
                subject=subject or (current.subject if current else ''),
                chapter=chapter_name
            )
            self.chapters.append(self.chapter)
            logger.debug(f"Lesson chapter opened: {self.chapter.subject} / {self.chapter.chapter}")
        else:
            if subject:
                current.subject = subject
            if chapter_name:
                current.chapter = chapter_name

        self.topic = None
        self.subtopic = None
        self.review = None
        return True

    def _start_topic(self, title: str):
        if self.chapter is None:
            self.chapter = Chapter(subject='Unknown', chapter='General')
            self.chapters.append(self.chapter)

        self.topic = Topic(title=title)
        self.chapter.topics.append(self.topic)
        self.subtopic = None
        self.last_property = None
        self.review = None

    def _handle_property(self, line: str) -> bool:
        match = PROPERTY_PATTERN.match(line)
        if match:
            label = match.group(1).lower()
            field_name = next(name for key, name in PROPERTY_FIELDS if key in label)

            if self.subtopic is None:
                self.subtopic = Subtopic(title=self.topic.title)
                self.topic.subtopics.append(self.subtopic)

            setattr(self.subtopic, field_name, _strip_bold(match.group(2)))
            self.last_property = field_name
            return True

        if self.subtopic is not None and self.last_property and not line.startswith('#') \
                and not QUESTION_PATTERN.match(line):
            previous = getattr(self.subtopic, self.last_property)
            setattr(self.subtopic, self.last_property, f"{previous}\n{line}" if previous else line)
            return True

        return False


def parse_lesson_text(text: str) -> List[Chapter]:
    """
    Parse a lesson outline into chapters.

    Raises:
        ValueError: if ``text`` is not a non-empty string
    """
    return LessonParser().parse(text)


def parse_questions_only(text: str) -> List[LessonQuestion]:
    """Parse review questions alone, for appending to an existing topic."""
    if not isinstance(text, str) or not text.strip():
        return []

    scanner = ReviewQuestionScanner()
    for raw_line in text.split('\n'):
        line = _clean_line(raw_line)
        if line:
            scanner.feed(line)

    logger.info(f"Parsed {len(scanner.questions)} review question(s)")
    return scanner.questions
