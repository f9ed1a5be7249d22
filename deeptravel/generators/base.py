"""Interface shared by every itinerary generator strategy."""
from __future__ import annotations

from abc import ABC, abstractmethod

from deeptravel.errors import InvalidDayNumber
from deeptravel.schemas import Destination

MAX_DAY_NUMBER = 7


def validate_day_number(day_number: object) -> int:
    """Return ``day_number`` if it is an integer in 1..7, else raise ``InvalidDayNumber``."""
    if isinstance(day_number, bool) or not isinstance(day_number, int):
        raise InvalidDayNumber(day_number, MAX_DAY_NUMBER)
    if not 1 <= day_number <= MAX_DAY_NUMBER:
        raise InvalidDayNumber(day_number, MAX_DAY_NUMBER)
    return day_number


class ItineraryGenerator(ABC):
    """Produces raw itinerary markdown for a destination."""

    name = "generator"

    @abstractmethod
    async def generate_itinerary(self, destination: Destination) -> str:
        """Return the complete 7-day itinerary."""

    @abstractmethod
    async def generate_day(self, destination: Destination, day_number: int) -> str:
        """Return the content of a single day (1-7)."""
