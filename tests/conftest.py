import logging
from typing import Dict, List

import pytest

from deeptravel.generators.base import ItineraryGenerator, validate_day_number
from deeptravel.generators.factory import reset_generator_factory
from deeptravel.schemas import Destination


class RecordingGenerator(ItineraryGenerator):
    """Generator stub that remembers every call it receives."""

    def __init__(self, label: str, itinerary: str = "", day: str = "") -> None:
        self.name = label
        self.itinerary = itinerary or f"# Day 1: {label}\n\n## Morning Activities\n\nFrom {label}.\n"
        self.day = day
        self.calls: List[tuple] = []

    async def generate_itinerary(self, destination):
        self.calls.append(("itinerary", destination.name))
        return self.itinerary

    async def generate_day(self, destination, day_number):
        validate_day_number(day_number)
        self.calls.append(("day", destination.name, day_number))
        return self.day or f"# Day {day_number}: {self.name}\n\n## Morning Activities\n\nFrom {self.name}.\n"


class FailingGenerator(ItineraryGenerator):
    name = "failing"

    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def generate_itinerary(self, destination):
        raise self.exc

    async def generate_day(self, destination, day_number):
        raise self.exc


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def recording_generators() -> Dict[str, RecordingGenerator]:
    return {name: RecordingGenerator(name) for name in ("default", "chunked", "resilient", "efficient")}


@pytest.fixture
def amsterdam() -> Destination:
    return Destination(id=35, name="Amsterdam", country="Netherlands", featured=False)


@pytest.fixture
def kyoto_featured() -> Destination:
    return Destination(id=12, name="Kyoto", country="Japan", featured=True)


@pytest.fixture
def factory_log():
    """Collect records emitted by the generator factory logger."""
    logger = logging.getLogger("deeptravel.generators.factory")
    handler = _ListHandler()
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(previous_level)


@pytest.fixture(autouse=True)
def _fresh_factory_singleton():
    reset_generator_factory()
    yield
    reset_generator_factory()
