import logging
import re
from typing import Iterable, List

from docassist.core.logger import log_execution_time

logger = logging.getLogger(__name__)

# Compile regex patterns once at module level
_HEADER_LINE = re.compile(r'^(question|category|section|note)', re.IGNORECASE)
_LIST_MARKERS = (
    re.compile(r'^\d+[.)-]\s*'),            # "1. ", "1) ", "1- "
    re.compile(r'^-\s*'),                   # "- "
    re.compile(r'^\*\s*'),                  # "* "
    re.compile(r'^[a-z][.)]\s*', re.IGNORECASE),  # "a. ", "A) "
)
_QUESTION_PREFIX = re.compile(r'^(q:|question:)', re.IGNORECASE)
_INTERROGATIVE_START = re.compile(
    r'^(what|how|why|when|where|who|tell|describe|explain|can you|do you|have you)',
    re.IGNORECASE,
)

MIN_QUESTION_LENGTH = 15


def clean_question_line(line: str) -> str:
    """Strip list markers and "Q:" style prefixes from a single line."""
    cleaned = line
    for marker in _LIST_MARKERS:
        cleaned = marker.sub('', cleaned)
    cleaned = cleaned.strip()
    return _QUESTION_PREFIX.sub('', cleaned).strip()


def dedupe(questions: Iterable[str]) -> List[str]:
    """Drop exact duplicates, keeping first-seen order."""
    return list(dict.fromkeys(questions))


@log_execution_time
def parse_questions(raw_text: str) -> List[str]:
    """
    Parse a numbered (or bulleted) list of questions from LLM output.

    Header-like lines and short fragments are dropped; interrogative lines
    without terminal punctuation get a question mark.
    """
    if not raw_text:
        return []

    questions = []
    for line in raw_text.split('\n'):
        line = line.strip()
        if not line or _HEADER_LINE.match(line):
            continue

        cleaned = clean_question_line(line)
        if len(cleaned) <= MIN_QUESTION_LENGTH:
            continue

        if not cleaned.endswith(('?', '.', ':')) and _INTERROGATIVE_START.match(cleaned):
            cleaned += '?'

        questions.append(cleaned)

    unique = dedupe(questions)
    logger.debug(f"Parsed {len(unique)} question(s) from {len(raw_text)} chars")
    return unique
