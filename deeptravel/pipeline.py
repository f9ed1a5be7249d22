# deeptravel/pipeline.py
from __future__ import annotations

from typing import List, Optional

from deeptravel.config import get_logger
from deeptravel.generators.base import validate_day_number
from deeptravel.generators.factory import ItineraryGeneratorFactory, get_generator_factory
from deeptravel.schemas import Destination, ExtractedDay, ExtractionReport, ItineraryReport
from deeptravel.tools.extraction import ITINERARY_DAYS, extract_day, extract_days
from deeptravel.tools.headings import day_heading, section_heading
from deeptravel.tools.normalizer import normalize_content, normalize_day_content

logger = get_logger(__name__)


def _report_fields(content: str, days: List[ExtractedDay]) -> dict:
    return {
        "content": content,
        "length": len(content),
        "days": [day.summary() for day in days],
        "all_days_extracted": bool(days) and all(day.extracted for day in days),
        "all_sections_extracted": bool(days) and all(day.complete for day in days),
    }


def analyze_content(raw: str, normalize: bool = True) -> ExtractionReport:
    """Normalize (optionally) and extract days 1-7 from caller-supplied markdown."""
    content = normalize_content(raw) if normalize else (raw or "")
    days = extract_days(content, ITINERARY_DAYS)
    extracted = sum(1 for day in days if day.extracted)
    logger.info("Extracted %d/%d days from %d chars of content", extracted, len(days), len(content))
    return ExtractionReport(**_report_fields(content, days))


async def generate_structured_itinerary(
    destination: Destination,
    generator_type: Optional[str] = None,
    factory: Optional[ItineraryGeneratorFactory] = None,
) -> ItineraryReport:
    """Generate, normalize and extract a full itinerary for ``destination``."""
    factory = factory or await get_generator_factory()
    chosen, raw = await factory.generate_itinerary_with_type(destination, generator_type)

    content = normalize_content(raw)
    days = extract_days(content, ITINERARY_DAYS)
    missing = [day.day_number for day in days if not day.extracted]
    if missing:
        logger.info(
            "Itinerary for %s is missing days %s after normalization",
            destination.name,
            ", ".join(str(n) for n in missing),
        )
    return ItineraryReport(
        destination=destination,
        generator_type=chosen,
        raw_content=raw,
        **_report_fields(content, days),
    )


async def generate_day_content(
    destination: Destination,
    day_number: int,
    generator_type: Optional[str] = None,
    factory: Optional[ItineraryGeneratorFactory] = None,
) -> ExtractedDay:
    """Generate a single day and return it normalized and extracted."""
    validate_day_number(day_number)
    factory = factory or await get_generator_factory()
    raw = await factory.generate_day(destination, day_number, generator_type)
    content = normalize_day_content(raw, day_number)
    return extract_day(content, day_number)


def build_sample_itinerary(destination: Destination) -> str:
    """Structured 7-day sample used to check extraction against known-good input."""
    name = destination.name
    parts = [f"# 7-Day Itinerary for {name}, {destination.country}\n\n"]
    for day in ITINERARY_DAYS:
        parts.append(f"{day_heading(day, f'Exploring {name} - Day {day}')}\n\n")
        parts.append(f"{section_heading('morning')}\nStart your day exploring {name}.\n\n")
        parts.append(f"{section_heading('lunch')}\nEnjoy a delicious meal at a local restaurant.\n\n")
        parts.append(f"{section_heading('afternoon')}\nVisit popular attractions in the area.\n\n")
        parts.append(f"{section_heading('evening')}\nHave dinner and enjoy the evening atmosphere.\n\n")
    return "".join(parts)
