"""Exceptions raised by the itinerary core.

Extraction misses are not errors; they are reported as flags on
``ExtractedDay``.
"""
from __future__ import annotations


class ItineraryError(Exception):
    """Base class for itinerary generation errors."""


class InvalidDayNumber(ItineraryError, ValueError):
    def __init__(self, day_number: object, max_day: int = 7) -> None:
        self.day_number = day_number
        self.max_day = max_day
        super().__init__(f"Day number must be an integer between 1 and {max_day}, got {day_number!r}")


class GenerationFailure(ItineraryError):
    """The text-generation service answered but produced no usable content."""


class UnknownGeneratorType(ItineraryError, KeyError):
    def __init__(self, generator_type: object) -> None:
        self.generator_type = generator_type
        super().__init__(f"Unknown generator type: {generator_type!r}")

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return self.args[0]
