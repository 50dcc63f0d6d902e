"""
Chapter overview parser.

Overviews are keyed by topic ids: ``T-01: Work`` in English or ``টি-০১: কাজ``
in Bengali, optionally behind markdown ``###``/``**`` decoration.  Everything
between two topic headers is that topic's content, kept line for line.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from qbank.utils.normalizer import ZERO_WIDTH_PATTERN, BN_YA, parse_int
from qbank.utils.records import OverviewTopic

logger = logging.getLogger(__name__)

TOPIC_HEADER = re.compile(
    r'^(?:[#\s*]*)((?:T|টি)-[০-৯\d]+(?:\s*&\s*(?:T|টি)-[০-৯\d]+)?)\s*[:：ঃ]\s*(.+)$',
    re.IGNORECASE
)
CHAPTER_BANNER = re.compile(
    rf'^(?:[#\s*]*)(Chapter\s*[\d০-৯]+|অধ্যা{BN_YA}\s*[\d০-৯]+|English\s*Version|বাংলা\s*সংস্করণ)(.*)$',
    re.IGNORECASE
)
HARD_SPLIT = re.compile(r'^[\s\-*#=]{3,}$')


def _topic_title(raw: str) -> str:
    return re.sub(r'[:：ঃ]$', '', raw.replace('*', '').strip()).strip()


def _trim_blank_edges(lines: List[str]) -> str:
    while lines and not lines[0].strip():
        lines = lines[1:]
    while lines and not lines[-1].strip():
        lines = lines[:-1]
    return '\n'.join(lines)


def parse_overview_text(text: str) -> Dict[str, List[OverviewTopic]]:
    """
    Parse a single chapter overview.

    Lines before the first topic header (version or chapter banners) are
    dropped.  Invalid input yields ``{'topics': []}``.
    """
    if not isinstance(text, str) or not text.strip():
        return {'topics': []}

    topics: List[OverviewTopic] = []
    content: List[str] = []
    current: Optional[OverviewTopic] = None

    for raw_line in text.split('\n'):
        line = ZERO_WIDTH_PATTERN.sub('', raw_line.rstrip('\r'))
        match = TOPIC_HEADER.match(line.strip())
        if match:
            if current is not None:
                current.content = _trim_blank_edges(content)
            current = OverviewTopic(id=match.group(1).strip(), title=_topic_title(match.group(2)))
            topics.append(current)
            content = []
        elif current is not None:
            content.append(line)

    if current is not None:
        current.content = _trim_blank_edges(content)

    logger.info(f"Overview parse produced {len(topics)} topic(s)")
    return {'topics': topics}


@dataclass
class TopicBucket:
    topics: List[OverviewTopic] = field(default_factory=list)
    last_number: int = 0
    title_fallback: str = ''


class BulkOverviewParser:
    """Splits a multi-chapter paste into one overview per chapter and language."""

    def __init__(self, subject: str = ''):
        self.subject = subject.strip()
        self.chapters: List[Dict[str, Any]] = []
        self.header = ''
        self.buckets = {'en': TopicBucket(), 'bn': TopicBucket()}
        self.topic: Optional[OverviewTopic] = None
        self.topic_language = 'en'
        self.content: List[str] = []

    def parse(self, text: str) -> List[Dict[str, Any]]:
        if not isinstance(text, str) or not text.strip():
            return []

        for raw_line in text.split('\n'):
            self._handle_line(raw_line.rstrip('\r'))

        self._save_topic()
        self._flush()
        logger.info(f"Bulk overview parse produced {len(self.chapters)} chapter(s)")
        return self.chapters

    def _handle_line(self, line: str):
        trimmed = ZERO_WIDTH_PATTERN.sub('', line.strip())
        if not trimmed:
            if self.topic is not None:
                self.content.append('')
            return

        banner = CHAPTER_BANNER.match(trimmed)
        if banner:
            self._save_topic()
            if self.buckets['en'].topics or self.buckets['bn'].topics:
                self._flush()
            main = banner.group(1).replace('*', '').strip()
            sub = re.sub(r'[#\s*:()]+', ' ', banner.group(2)).strip()
            self.header = f"{main}: {sub}" if sub else main
            return

        if HARD_SPLIT.match(trimmed):
            self._save_topic()
            self._flush()
            self.header = ''
            return

        match = TOPIC_HEADER.match(trimmed)
        if match:
            self._save_topic()
            topic_id = match.group(1).strip()
            language = 'bn' if 'টি' in topic_id else 'en'
            number = parse_int(re.search(r'[০-৯\d]+', topic_id).group(0))

            bucket = self.buckets[language]
            if bucket.topics and 0 < number <= bucket.last_number:
                logger.debug(f"Topic numbering restarted at {topic_id}")
                self._flush()
                bucket = self.buckets[language]

            self.topic = OverviewTopic(id=topic_id, title=_topic_title(match.group(2)))
            self.topic_language = language
            bucket.last_number = number
            return

        if self.topic is not None:
            self.content.append(line)

    def _save_topic(self):
        if self.topic is None:
            return
        self.topic.content = _trim_blank_edges(self.content)
        bucket = self.buckets[self.topic_language]
        bucket.topics.append(self.topic)
        if not bucket.title_fallback:
            bucket.title_fallback = self.topic.title
        self.topic = None
        self.content = []

    def _flush(self):
        english, bangla = self.buckets['en'], self.buckets['bn']
        prefix = f"{self.subject}: " if self.subject else ''

        for bucket, suffix, other in ((english, 'English', bangla), (bangla, 'Bangla', english)):
            if not bucket.topics:
                continue
            base = self.header or f"Chapter: {bucket.title_fallback}"
            name = f"{prefix}{base} ({suffix})" if other.topics else f"{prefix}{base}"
            self.chapters.append({'name': name, 'data': {'topics': list(bucket.topics)}})

        self.buckets = {'en': TopicBucket(), 'bn': TopicBucket()}


def parse_overview_chapters(text: str, subject: str = '') -> List[Dict[str, Any]]:
    """Parse a bulk paste of several chapter overviews."""
    return BulkOverviewParser(subject).parse(text)
