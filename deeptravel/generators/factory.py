"""Generator selection, invocation and timing.

The factory maps every :data:`~deeptravel.config.GeneratorType` to a strategy
instance and picks one per request:

1. an explicitly requested type wins;
2. featured destinations get the configured premium type;
3. everything else gets the configured default type.

The lookup table is complete before a factory exists. Use
:func:`create_generator_factory` to build one, or await
:func:`get_generator_factory` for the shared process-wide instance.
"""
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Dict, Mapping, Optional, Tuple

from deeptravel import llm
from deeptravel.config import GENERATOR_TYPES, GeneratorSettings, LoggingConfig, get_logger, load_settings
from deeptravel.errors import UnknownGeneratorType
from deeptravel.generators.base import ItineraryGenerator, validate_day_number
from deeptravel.generators.openai_generator import OpenAIItineraryGenerator
from deeptravel.generators.placeholder import PlaceholderItineraryGenerator
from deeptravel.schemas import Destination

logger = get_logger(__name__)

REASON_EXPLICIT = "explicit"
REASON_PREMIUM = "premium-featured"
REASON_DEFAULT = "default"


class ItineraryGeneratorFactory:
    def __init__(
        self,
        generators: Mapping[str, ItineraryGenerator],
        *,
        default_type: str = "efficient",
        premium_type: str = "efficient",
        logging_config: Optional[LoggingConfig] = None,
    ) -> None:
        missing = [t for t in GENERATOR_TYPES if generators.get(t) is None]
        if missing:
            raise ValueError(f"Generator table is missing entries for: {', '.join(missing)}")
        self._generators: Dict[str, ItineraryGenerator] = {t: generators[t] for t in GENERATOR_TYPES}
        self._default_type = self._checked_type(default_type)
        self._premium_type = self._checked_type(premium_type)
        self.logging = logging_config or LoggingConfig()

    @staticmethod
    def _checked_type(generator_type: object) -> str:
        if generator_type not in GENERATOR_TYPES:
            raise UnknownGeneratorType(generator_type)
        return generator_type  # type: ignore[return-value]

    @property
    def premium_generator_type(self) -> str:
        return self._premium_type

    @property
    def generator_types(self) -> Tuple[str, ...]:
        return tuple(self._generators)

    def get_default_generator_type(self) -> str:
        return self._default_type

    def set_default_generator_type(self, generator_type: str) -> None:
        self._default_type = self._checked_type(generator_type)

    def get_generator(self, generator_type: str) -> ItineraryGenerator:
        return self._generators[self._checked_type(generator_type)]

    def select_generator_type(
        self, destination: Destination, generator_type: Optional[str] = None
    ) -> Tuple[str, str]:
        """Return ``(generator_type, reason)`` for this request."""
        if generator_type:
            return self._checked_type(generator_type), REASON_EXPLICIT
        if destination.featured:
            return self._premium_type, REASON_PREMIUM
        return self._default_type, REASON_DEFAULT

    async def generate_itinerary(self, destination: Destination, generator_type: Optional[str] = None) -> str:
        _chosen, content = await self.generate_itinerary_with_type(destination, generator_type)
        return content

    async def generate_itinerary_with_type(
        self, destination: Destination, generator_type: Optional[str] = None
    ) -> Tuple[str, str]:
        """Return ``(generator_type, content)``, the type being the one that actually ran."""
        chosen, reason = self.select_generator_type(destination, generator_type)
        generator = self._generators[chosen]
        content = await self._run(
            chosen,
            reason,
            destination,
            "itinerary",
            lambda: generator.generate_itinerary(destination),
        )
        return chosen, content

    async def generate_day(
        self, destination: Destination, day_number: int, generator_type: Optional[str] = None
    ) -> str:
        validate_day_number(day_number)
        chosen, reason = self.select_generator_type(destination, generator_type)
        generator = self._generators[chosen]
        return await self._run(
            chosen,
            reason,
            destination,
            f"day {day_number}",
            lambda: generator.generate_day(destination, day_number),
        )

    async def _run(
        self,
        chosen: str,
        reason: str,
        destination: Destination,
        what: str,
        call: Callable[[], Awaitable[str]],
    ) -> str:
        if self.logging.generator_usage:
            if reason == REASON_PREMIUM:
                logger.info(
                    "Using PREMIUM generator (%s) to create %s for featured destination: %s",
                    chosen,
                    what,
                    destination.name,
                )
            else:
                logger.info("Using %s generator (%s) to create %s for %s", chosen, reason, what, destination.name)

        start = time.perf_counter()
        try:
            result = await call()
        except Exception:
            logger.exception(
                "Error using %s generator for %s of %s, %s (id=%s)",
                chosen,
                what,
                destination.name,
                destination.country,
                destination.id,
            )
            raise

        if self.logging.content_generation:
            elapsed = time.perf_counter() - start
            logger.info(
                "%s generator completed %s for %s in %.2fs (%d chars)",
                chosen,
                what,
                destination.name,
                elapsed,
                len(result),
            )
        return result


def build_default_generators(settings: GeneratorSettings) -> Dict[str, ItineraryGenerator]:
    # All four types share one strategy until differentiated ones are registered.
    if settings.openai_api_key and llm.llm_available():
        shared: ItineraryGenerator = OpenAIItineraryGenerator(model=settings.openai_model)
    else:
        shared = PlaceholderItineraryGenerator()
    logger.info("Using %s generator for all generator types", shared.name)
    return {generator_type: shared for generator_type in GENERATOR_TYPES}


async def create_generator_factory(
    settings: Optional[GeneratorSettings] = None,
    generators: Optional[Mapping[str, ItineraryGenerator]] = None,
) -> ItineraryGeneratorFactory:
    """Build a factory whose generator table is fully populated."""
    settings = settings or load_settings()
    table = dict(generators) if generators is not None else build_default_generators(settings)
    return ItineraryGeneratorFactory(
        table,
        default_type=settings.default_type,
        premium_type=settings.premium_type,
        logging_config=settings.logging,
    )


_factory: Optional[ItineraryGeneratorFactory] = None
_factory_lock = asyncio.Lock()


async def get_generator_factory() -> ItineraryGeneratorFactory:
    """Return the shared factory, creating it on first use."""
    global _factory
    if _factory is not None:
        return _factory
    async with _factory_lock:
        if _factory is None:
            _factory = await create_generator_factory()
    return _factory


def reset_generator_factory(factory: Optional[ItineraryGeneratorFactory] = None) -> None:
    """Drop (or replace) the shared factory."""
    global _factory, _factory_lock
    _factory = factory
    _factory_lock = asyncio.Lock()
