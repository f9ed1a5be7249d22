"""Content normalizer for generated itinerary markdown.

Generated itineraries arrive with every imaginable heading style
(``### Day 2``, ``Day 2 - Old Town``, ``**Morning:**``, ``Dinner:`` ...).
Extraction and the PDF renderer expect one form only::

    # Day 2: Old Town

    ## Morning Activities

The normalizer rewrites day headings, then section headings, then repairs
spacing and, where it can, day headings the model forgot to write.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from deeptravel.config import get_logger
from deeptravel.tools.headings import (
    CANONICAL_SECTIONS,
    SECTION_KEYS,
    SECTION_LABELS,
    day_heading,
    section_heading,
)

logger = get_logger(__name__)

ITINERARY_LENGTH = 7

_TITLE_SEPARATORS = ":-–— \t"

# Order matters: the prefix-less rule runs last and only sees lines that start
# with "Day", so already-hashed headings are never rewritten twice.
_DAY_RULES: List[Tuple[Pattern[str], str]] = [
    (re.compile(r"^#{1,3}[ \t]*(?:\*\*)?[ \t]*Day[ \t]+(?P<num>\d+)(?P<rest>.*)$", re.M | re.I), "hashed"),
    (re.compile(r"^\*\*[ \t]*Day[ \t]+(?P<num>\d+)(?P<rest>.*)$", re.M | re.I), "bold"),
    (
        re.compile(
            r"^Day[ \t]+(?P<num>\d+)(?P<rest>[ \t]*(?:[:\-–—].*)?|[ \t]+[A-Z].*)$",
            re.M,
        ),
        "plain",
    ),
]


def _section_rules(key: str) -> List[Tuple[Pattern[str], str]]:
    label = SECTION_LABELS[key]
    return [
        (
            re.compile(
                rf"^#{{1,3}}[ \t]*(?:\*\*)?(?:{label})\b(?:\*\*)?[ \t]*(?::[ \t]*)?(?:\*\*)?(?P<rest>.*)$",
                re.M | re.I,
            ),
            "hashed",
        ),
        (re.compile(rf"^\*\*(?:{label})[ \t]*:?[ \t]*\*\*[ \t]*:?(?P<rest>.*)$", re.M | re.I), "bold"),
        (re.compile(rf"^(?:{label})[ \t]*:(?P<rest>.*)$", re.M), "labelled"),
        (re.compile(rf"^(?:{label})[ \t]*$", re.M), "bare"),
    ]


_SECTION_RULES: Dict[str, List[Tuple[Pattern[str], str]]] = {key: _section_rules(key) for key in SECTION_KEYS}

_HEADING_SPACING = re.compile(r"^(#{1,6}[ \t][^\n]*?)[ \t]*\n(?:[ \t]*\n)*", re.M)
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
_FOUND_DAY = re.compile(r"^# Day (\d+):", re.M)
_SECTION_RANK = {CANONICAL_SECTIONS[key]: rank for rank, key in enumerate(SECTION_KEYS)}
_STRUCTURE_LINE = re.compile(
    r"^(?:(?P<day># Day \d+:)|## (?P<section>"
    + "|".join(re.escape(CANONICAL_SECTIONS[key]) for key in SECTION_KEYS)
    + r")[ \t]*$)",
    re.M,
)
_ANY_DAY_HEADING = re.compile(r"^# Day \d+:", re.M)

_SECTION_STUBS: Dict[str, str] = {
    "morning": "Explore the local area and enjoy breakfast at a nearby cafe.",
    "lunch": "Try a local restaurant for an authentic meal experience.",
    "afternoon": "Visit attractions and immerse yourself in the local culture.",
    "evening": "Enjoy dinner at a recommended restaurant and relax for the evening.",
}


def normalize_content(content: Optional[str], fill_missing_days: bool = True) -> str:
    """Return ``content`` rewritten into canonical itinerary markdown."""
    if not content:
        return ""

    normalized = _unify_newlines(content)
    normalized = _standardize_headings(normalized)
    normalized = standardize_content_structure(normalized, fill_missing_days)
    return normalized


def normalize_day_content(day_content: Optional[str], day_number: int) -> str:
    """Normalize a single generated day, filling in whatever it is missing.

    A day heading is synthesized when the text has none (the first line is
    used as its title unless it is a section heading) and every absent section
    gets a short stub paragraph so downstream extraction always finds four
    sections.
    """
    if not day_content:
        return ""

    normalized = _standardize_headings(_unify_newlines(day_content))

    if not _ANY_DAY_HEADING.search(normalized):
        title = "Itinerary"
        first_line, newline, remainder = normalized.partition("\n")
        candidate = first_line.replace("**", "").strip()
        if newline and candidate and not candidate.startswith("#") and not _mentions_section(candidate):
            title = candidate
            normalized = remainder
        normalized = f"{day_heading(day_number, title)}\n\n{normalized}"

    for key in SECTION_KEYS:
        if not re.search(rf"^{re.escape(section_heading(key))}[ \t]*$", normalized, re.M):
            normalized = f"{normalized.rstrip()}\n\n{section_heading(key)}\n{_SECTION_STUBS[key]}\n"

    return normalize_content(normalized, fill_missing_days=False)


def standardize_day_headings(content: str) -> str:
    result = content
    for pattern, _label in _DAY_RULES:
        result = pattern.sub(_rewrite_day_heading, result)
    return result


def standardize_section_headings(content: str) -> str:
    # Each section's rules are independent of the other sections.
    result = content
    for key in SECTION_KEYS:
        replace = _section_rewriter(key)
        for pattern, _label in _SECTION_RULES[key]:
            result = pattern.sub(replace, result)
    return result


def standardize_content_structure(content: str, fill_missing_days: bool = True) -> str:
    result = _HEADING_SPACING.sub(r"\1\n\n", content)
    result = _EXCESS_BLANK_LINES.sub("\n\n", result)
    return _insert_missing_day_headings(result) if fill_missing_days else result


def _unify_newlines(content: str) -> str:
    return content.replace("\r\n", "\n").replace("\r", "\n")


def _standardize_headings(content: str) -> str:
    # Terminates: every rewrite either leaves a line canonical or consumes a
    # label from the start of a line.
    result = content
    while True:
        updated = standardize_section_headings(standardize_day_headings(result))
        if updated == result:
            return result
        result = updated


def _rewrite_day_heading(match: re.Match) -> str:
    title = match.group("rest").replace("**", "").strip().lstrip(_TITLE_SEPARATORS).strip()
    return day_heading(int(match.group("num")), title or "Itinerary")


def _section_rewriter(key: str) -> Callable[[re.Match], str]:
    heading = section_heading(key)

    def replace(match: re.Match) -> str:
        rest = (match.groupdict().get("rest") or "").strip().lstrip(":–—").strip()
        return f"{heading}\n{rest}" if rest else heading

    return replace


def _mentions_section(line: str) -> bool:
    lowered = line.lower()
    return any(word in lowered for word in ("morning", "lunch", "afternoon", "evening", "dinner"))


def _find_stray_section(content: str) -> Optional[int]:
    """Offset of the first section heading that no day heading accounts for.

    A section heading is stray when it appears before any day heading, or
    when it does not advance the Morning/Lunch/Afternoon/Evening order inside
    the current day (the order restarted, so a new day began unannounced).
    """
    last_rank: Optional[int] = None
    for match in _STRUCTURE_LINE.finditer(content):
        if match.group("day"):
            last_rank = -1
            continue
        rank = _SECTION_RANK[match.group("section")]
        if last_rank is None or rank <= last_rank:
            return match.start()
        last_rank = rank
    return None


def _insert_missing_day_headings(content: str) -> str:
    # Best effort, one pass per missing day: with several days missing, or
    # sections out of order, the synthetic heading can land on the wrong block.
    found_days = {int(number) for number in _FOUND_DAY.findall(content)}
    if not found_days or max(found_days) > ITINERARY_LENGTH:
        return content

    result = content
    for day in range(1, ITINERARY_LENGTH + 1):
        if day in found_days:
            continue
        logger.info("Content normalizer: Day %d missing, attempting to detect and insert", day)
        position = _find_stray_section(result)
        if position is None:
            continue
        result = f"{result[:position]}{day_heading(day)}\n\n{result[position:]}"
        logger.info("Content normalizer: Added missing header for Day %d", day)
    return result
