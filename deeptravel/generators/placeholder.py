"""Deterministic generator used when no text-generation service is configured."""
from __future__ import annotations

from typing import List

from deeptravel.generators.base import MAX_DAY_NUMBER, ItineraryGenerator, validate_day_number
from deeptravel.schemas import Destination
from deeptravel.tools.headings import day_heading, section_heading


class PlaceholderItineraryGenerator(ItineraryGenerator):
    name = "placeholder"

    async def generate_itinerary(self, destination: Destination) -> str:
        parts: List[str] = [
            f"# 7-Day Itinerary for {destination.name}, {destination.country}",
            "Note: This is a placeholder. Configure OPENAI_API_KEY to generate real content.",
        ]
        parts.extend(self._day(destination, day) for day in range(1, MAX_DAY_NUMBER + 1))
        return "\n\n".join(parts) + "\n"

    async def generate_day(self, destination: Destination, day_number: int) -> str:
        validate_day_number(day_number)
        return self._day(destination, day_number) + "\n"

    @staticmethod
    def _day(destination: Destination, day_number: int) -> str:
        name = destination.name
        return "\n\n".join(
            [
                day_heading(day_number, f"Exploring {name} - Day {day_number}"),
                section_heading("morning"),
                f"Start your day exploring {name}.",
                section_heading("lunch"),
                "Enjoy a meal at a local restaurant.",
                section_heading("afternoon"),
                f"Visit popular attractions in {name}.",
                section_heading("evening"),
                "Have dinner and enjoy the evening atmosphere.",
            ]
        )
