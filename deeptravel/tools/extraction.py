"""Day and section extraction over normalized itinerary markdown.

Each heading kind has an ordered table of ``(pattern, label)`` pairs. The
canonical form comes first and legacy forms follow, because normalization is
best effort and upstream formatting drifts. :func:`first_match` walks a table
and stops at the first pattern that matches.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from deeptravel.config import get_logger
from deeptravel.schemas import DaySections, ExtractedDay
from deeptravel.tools.headings import (
    CANONICAL_SECTIONS,
    DAY_HEADING_LINE,
    SECTION_KEYS,
    SECTION_LABELS,
    TRAILING_LABELS,
)

logger = get_logger(__name__)

PatternTable = Sequence[Tuple[Pattern[str], str]]

ITINERARY_DAYS = range(1, 8)

_ANY_SECTION_LABEL = "(?:" + "|".join(SECTION_LABELS[key] for key in SECTION_KEYS) + "|" + TRAILING_LABELS + ")"

# A day runs until the next day heading of any number, so a missing day never
# makes its predecessor swallow the following one.
_DAY_END = rf"(?={DAY_HEADING_LINE}|\Z)"

# A section runs until the next known section heading in any style, the next
# day heading, or the end of the text.
_SECTION_END = (
    r"(?="
    rf"^#{{1,3}}[ \t]*(?:\*\*)?{_ANY_SECTION_LABEL}\b"
    rf"|^\*\*{_ANY_SECTION_LABEL}[ \t]*:?[ \t]*\*\*"
    rf"|^{_ANY_SECTION_LABEL}[ \t]*:"
    rf"|{DAY_HEADING_LINE}"
    r"|\Z)"
)

_FLAGS = re.M | re.I


def first_match(patterns: PatternTable, text: str) -> Optional[Tuple[re.Match, str]]:
    """Return the match and label of the first pattern in ``patterns`` that hits."""
    for pattern, label in patterns:
        match = pattern.search(text)
        if match and match.group(0):
            return match, label
    return None


def day_patterns(day_number: int) -> List[Tuple[Pattern[str], str]]:
    n = int(day_number)
    body = rf"[\s\S]*?{_DAY_END}"
    return [
        (re.compile(rf"^# Day {n}: {body}", _FLAGS), "canonical"),
        (re.compile(rf"^# Day {n}:{body}", _FLAGS), "colon-no-space"),
        (re.compile(rf"^# Day {n}\b{body}", _FLAGS), "space-separated"),
        (re.compile(rf"^## Day {n}\b{body}", _FLAGS), "level-two"),
    ]


def _section_table(key: str) -> List[Tuple[Pattern[str], str]]:
    label = SECTION_LABELS[key]
    canonical = re.escape(CANONICAL_SECTIONS[key])
    body = rf"[\s\S]*?{_SECTION_END}"
    return [
        (re.compile(rf"^## {canonical}[ \t]*$\n?{body}", _FLAGS), "canonical"),
        (re.compile(rf"^#{{1,3}}[ \t]*(?:\*\*)?(?:{label})\b[^\n]*\n?{body}", _FLAGS), "heading"),
        (re.compile(rf"^\*\*(?:{label})[ \t]*:?[ \t]*\*\*[^\n]*\n?{body}", _FLAGS), "bold"),
        (re.compile(rf"^(?:{label})[ \t]*:[^\n]*\n?{body}", re.M), "plain"),
    ]


SECTION_PATTERNS: Dict[str, List[Tuple[Pattern[str], str]]] = {key: _section_table(key) for key in SECTION_KEYS}


def locate_day_block(text: str, day_number: int) -> Optional[Tuple[str, str]]:
    """Return ``(block, pattern_label)`` for ``day_number`` or ``None``."""
    if not text:
        return None
    hit = first_match(day_patterns(day_number), text)
    if hit is None:
        return None
    match, label = hit
    return match.group(0), label


def locate_section(day_block: str, key: str) -> Optional[str]:
    if not day_block:
        return None
    hit = first_match(SECTION_PATTERNS[key], day_block)
    return hit[0].group(0) if hit else None


def section_body(section_text: Optional[str]) -> str:
    """Strip the heading line from an extracted section."""
    if not section_text:
        return ""
    _heading, _newline, body = section_text.partition("\n")
    return body.strip()


def extract_day(text: str, day_number: int) -> ExtractedDay:
    located = locate_day_block(text, day_number)
    if located is None:
        exists = bool(text) and f"# Day {day_number}" in text
        logger.info(
            "Could not extract Day %s%s",
            day_number,
            " (heading present but malformed)" if exists else " - this day might be missing from the content",
        )
        return ExtractedDay(day_number=day_number, extracted=False, exists=exists)

    block, label = located
    sections = DaySections(**{key: locate_section(block, key) for key in SECTION_KEYS})
    missing = [key for key in SECTION_KEYS if getattr(sections, key) is None]
    logger.debug("Found Day %s content using %s pattern", day_number, label)
    if missing:
        logger.info("Day %s is missing sections: %s", day_number, ", ".join(missing))
    return ExtractedDay(
        day_number=day_number,
        raw_block=block,
        sections=sections,
        extracted=True,
        exists=True,
        pattern=label,
    )


def extract_days(text: str, day_numbers: Iterable[int] = ITINERARY_DAYS) -> List[ExtractedDay]:
    return [extract_day(text, day) for day in day_numbers]
