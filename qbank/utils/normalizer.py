"""
Shared numeral, letter and metadata helpers used by every question parser.

Import documents mix English and Bengali freely: Bengali digits (০-৯), Bengali
option letters (ক-ঘ), numeric option labels (1-4) and two different Unicode
spellings of the Bengali letter য়.  Everything here is a pure function over
strings.
"""
import re
import unicodedata
from typing import Optional, Tuple

BENGALI_DIGITS = {
    '০': '0', '১': '1', '২': '2', '৩': '3', '৪': '4',
    '৫': '5', '৬': '6', '৭': '7', '৮': '8', '৯': '9',
}

BENGALI_LETTERS = {'ক': 'a', 'খ': 'b', 'গ': 'c', 'ঘ': 'd'}

NUMERIC_OPTIONS = {'1': 'a', '2': 'b', '3': 'c', '4': 'd'}

OPTION_LETTERS = ('a', 'b', 'c', 'd')

# Precomposed U+09DF or U+09AF followed by the nukta U+09BC
BN_YA = '(?:\u09df|\u09af\u09bc)'

ZERO_WIDTH_PATTERN = re.compile('[\u200b-\u200d\ufeff]')

METADATA_KEY_PATTERN = rf'(?:subject|topic|chapter|lesson|board|বিষ{BN_YA}|অধ্যা{BN_YA}|পাঠ|বোর্ড)'

METADATA_PATTERN = re.compile(
    rf'^\[?\s*({METADATA_KEY_PATTERN})\s*[:ঃ：]\s*([^\]\n]*?)\s*\]?$',
    re.IGNORECASE
)

_DIGIT_TABLE = str.maketrans(BENGALI_DIGITS)


def _fold_key(key: str) -> str:
    key = unicodedata.normalize('NFC', key.strip().lower())
    return key.replace('\u09df', '\u09af\u09bc')


FIELD_NAMES = {
    _fold_key(key): value for key, value in {
        'subject': 'subject',
        'topic': 'subject',
        'বিষয়': 'subject',
        'chapter': 'chapter',
        'অধ্যায়': 'chapter',
        'lesson': 'lesson',
        'পাঠ': 'lesson',
        'board': 'board',
        'বোর্ড': 'board',
    }.items()
}


def to_ascii_digits(text: str) -> str:
    """Replace every Bengali digit in ``text`` with its ASCII equivalent."""
    if not text:
        return text
    return text.translate(_DIGIT_TABLE)


def parse_int(token, default: int = 0) -> int:
    """Parse an integer written with ASCII or Bengali digits."""
    if token is None:
        return default
    try:
        return int(to_ascii_digits(str(token)).strip())
    except ValueError:
        return default


def normalize_option_label(token: str) -> str:
    """
    Map an option label to its canonical ASCII letter.

    ``a-d``, ``ক-ঘ``, ``1-4`` and ``১-৪`` all map onto ``a-d``.  Anything else
    is returned unchanged so the caller can decide whether it is an error.
    """
    if not token:
        return token

    key = token.strip()
    lowered = key.lower()
    if lowered in OPTION_LETTERS:
        return lowered
    if key in BENGALI_LETTERS:
        return BENGALI_LETTERS[key]

    ascii_key = to_ascii_digits(key)
    if ascii_key in NUMERIC_OPTIONS:
        return NUMERIC_OPTIONS[ascii_key]

    return token


def canonical_field(key: str) -> Optional[str]:
    """Return subject/chapter/lesson/board for a metadata key, or None."""
    if not key:
        return None
    return FIELD_NAMES.get(_fold_key(key))


def clean_text(text: str, strip_markdown: bool = True) -> str:
    """Remove zero-width characters and, by default, markdown ``*`` markers."""
    text = ZERO_WIDTH_PATTERN.sub('', text)
    if strip_markdown:
        text = text.replace('*', '')
    return text


def match_metadata(line: str) -> Optional[Tuple[str, str]]:
    """
    Recognise a ``[Key: Value]`` or bare ``Key: Value`` metadata line.

    Returns ``(field, value)`` with the canonical field name, or None.
    """
    match = METADATA_PATTERN.match(line.strip())
    if not match:
        return None

    field = canonical_field(match.group(1))
    if not field:
        return None

    return field, match.group(2).strip()


MARKS_BRACKETED = re.compile(r'[(\[]\s*([\d০-৯]+)\s*[)\]]\s*$')
MARKS_TRAILING = re.compile(r'\s+([\d০-৯]+)\s*$')


def split_marks(text: str, allow_bare: bool = True) -> Tuple[str, Optional[int]]:
    """
    Split a trailing marks annotation off a question part.

    ``What is dye? (1)``, ``What is dye? [১]`` and ``What is dye? 1`` all give
    ``('What is dye?', 1)``.  Returns ``(text, None)`` when no marks are found.
    """
    match = MARKS_BRACKETED.search(text)
    if not match and allow_bare:
        match = MARKS_TRAILING.search(text)
    if not match:
        return text.strip(), None
    return text[:match.start()].strip(), parse_int(match.group(1))
