"""Itinerary generator backed by the OpenAI chat API."""
from __future__ import annotations

from deeptravel import llm
from deeptravel.config import DEFAULT_OPENAI_MODEL, get_logger
from deeptravel.generators.base import ItineraryGenerator, validate_day_number
from deeptravel.schemas import Destination

logger = get_logger(__name__)


class OpenAIItineraryGenerator(ItineraryGenerator):
    name = "openai"

    def __init__(self, model: str = DEFAULT_OPENAI_MODEL, temperature: float = 0.7, max_tokens: int = 4000) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate_itinerary(self, destination: Destination) -> str:
        logger.info("Starting itinerary generation for %s, %s", destination.name, destination.country)
        prompts = llm.build_itinerary_prompts(destination)
        content = await llm.complete_markdown(
            prompts["system"],
            prompts["user"],
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        logger.info("Completed itinerary generation for %s (%d chars)", destination.name, len(content))
        return content

    async def generate_day(self, destination: Destination, day_number: int) -> str:
        validate_day_number(day_number)
        prompts = llm.build_day_prompts(destination, day_number)
        # One day is a fraction of the full itinerary's length.
        return await llm.complete_markdown(
            prompts["system"],
            prompts["user"],
            model=self.model,
            temperature=self.temperature,
            max_tokens=max(1000, self.max_tokens // 3),
        )
