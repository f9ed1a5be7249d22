"""Canonical itinerary headings and the regex fragments that recognise them."""
from __future__ import annotations

from typing import Dict, Tuple

SECTION_KEYS: Tuple[str, ...] = ("morning", "lunch", "afternoon", "evening")

CANONICAL_SECTIONS: Dict[str, str] = {
    "morning": "Morning Activities",
    "lunch": "Lunch Recommendation",
    "afternoon": "Afternoon Activities",
    "evening": "Evening/Dinner Plan",
}

# Label spellings accepted for each section, without any markdown decoration.
SECTION_LABELS: Dict[str, str] = {
    "morning": r"Morning(?:[ \t]+Activities)?",
    "lunch": r"Lunch(?:[ \t]+Recommendations?)?",
    "afternoon": r"Afternoon(?:[ \t]+Activities)?",
    "evening": (
        r"(?:Evening(?:[ \t]*(?:/|&|and)[ \t]*Dinner)?(?:[ \t]+(?:Activities|Plan))?"
        r"|Dinner(?:[ \t]+Plan)?)"
    ),
}

# Headings that close the evening block of a day without being one of the four sections.
TRAILING_LABELS = r"(?:Accommodation|Practical[ \t]+Information)"

DAY_HEADING_LINE = r"^#{1,3}[ \t]*(?:\*\*)?[ \t]*Day[ \t]+\d+\b"


def day_heading(day_number: int, title: str = "Itinerary") -> str:
    return f"# Day {day_number}: {title}"


def section_heading(key: str) -> str:
    return f"## {CANONICAL_SECTIONS[key]}"
