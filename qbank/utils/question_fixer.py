"""
Repairs for question records damaged during copy-paste.

Both fixers take a record dict (as returned to the preview step) and return
``(record, changed)``.  The input dict is never modified.
"""
import copy
import logging
import re
from typing import Any, Dict, Tuple

from qbank.utils.normalizer import normalize_option_label, split_marks

logger = logging.getLogger(__name__)

CIRCLED = '①-⑳❶-❿⓫-⓴'
CIRCLED_LABELS = {
    '①': 'a', '②': 'b', '③': 'c', '④': 'd',
    '❶': 'a', '❷': 'b', '❸': 'c', '❹': 'd',
}

ANSWER_LOOKAHEAD = r'\s*(?:Correct|সঠিক|Ans|Answer)'

CIRCLED_OPTION = re.compile(
    rf'([{CIRCLED}])\s*(.*?)(?=\s*[{CIRCLED}]|{ANSWER_LOOKAHEAD}|$)',
    re.IGNORECASE
)
LETTERED_OPTION = re.compile(
    rf'(?:^|\s+)\(?([a-dক-ঘ1-4১-৪])[).।]\s*(.*?)'
    rf'(?=\s+\(?[a-dক-ঘ1-4১-৪][).।]\s*|{ANSWER_LOOKAHEAD}|$)',
    re.IGNORECASE
)
INLINE_ANSWER = re.compile(
    rf'(?:Correct Answer|সঠিক উত্তর|Ans|Answer)\s*[:=ঃ]\s*([{CIRCLED}a-dক-ঘ1-4১-৪])',
    re.IGNORECASE
)
LEADING_NOISE = [
    re.compile(r'^Question:\s*', re.IGNORECASE),
    re.compile(r'^\(N/A\)\s*', re.IGNORECASE),
    re.compile(r'^\(-\)\s*'),
]

PIPE_PARTS = re.compile(r'\|[a-d]:', re.IGNORECASE)
TRAILING_MARKS = re.compile(r'\s*[\[(][\d০-৯]+[\])]\s*$')


def _label(token: str) -> str:
    token = token.lower()
    return CIRCLED_LABELS.get(token) or normalize_option_label(token)


def detect_and_fix_mcq_options(question: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """
    Pull options that were pasted inline into an MCQ's question text.

    Handles circled numerals (① ② ...) and ``a)``/``(a)``/``1.``/``ক)`` labels.
    At least two options must be found for the record to be rewritten.  An
    inline ``Correct Answer: X`` is picked up as well.
    """
    if question.get('type') != 'mcq':
        return question, False

    original = str(question.get('question_text') or '')
    if len(original) < 10:
        return question, False

    answer = INLINE_ANSWER.search(original)
    options_text = original[:answer.start()].rstrip() if answer else original

    matches = list(CIRCLED_OPTION.finditer(options_text))
    if len(matches) < 2:
        matches = list(LETTERED_OPTION.finditer(options_text))
    if len(matches) < 2:
        return question, False

    fixed_text = original[:matches[0].start()].strip()
    for pattern in LEADING_NOISE:
        fixed_text = pattern.sub('', fixed_text).strip()

    fixed = copy.deepcopy(question)
    fixed['question_text'] = fixed_text
    fixed['options'] = [
        {'label': _label(match.group(1)), 'text': match.group(2).strip()}
        for match in matches
    ]

    if answer:
        fixed['correct_answer'] = _label(answer.group(1))

    logger.debug(f"Recovered {len(matches)} inline option(s)")
    return fixed, True


def detect_and_fix_cq(question: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """
    Cut a pipe-delimited part dump (``...[2]|a:'...'|b:...``) off a CQ stem.

    Marks left dangling at the end of the stem or of a part's text are removed;
    a part's marks are filled from its text when they were missing.
    """
    if question.get('type') != 'cq':
        return question, False

    fixed = copy.deepcopy(question)
    changed = False

    original = str(fixed.get('question_text') or '')
    corruption = PIPE_PARTS.search(original)
    if corruption:
        stem = TRAILING_MARKS.sub('', original[:corruption.start()]).strip()
        if stem:
            fixed['question_text'] = stem
            changed = True

    for part in fixed.get('parts') or []:
        text, marks = split_marks(str(part.get('text') or ''), allow_bare=False)
        if marks is None:
            continue
        part['text'] = text
        if not part.get('marks'):
            part['marks'] = marks
        changed = True

    return (fixed, True) if changed else (question, False)
