import asyncio
import logging

import pytest

from conftest import FailingGenerator, RecordingGenerator
from deeptravel.config import GeneratorSettings, LoggingConfig
from deeptravel.errors import InvalidDayNumber, UnknownGeneratorType
from deeptravel.generators import factory as factory_module
from deeptravel.generators.factory import (
    ItineraryGeneratorFactory,
    create_generator_factory,
    get_generator_factory,
)
from deeptravel.generators.placeholder import PlaceholderItineraryGenerator
from deeptravel.schemas import Destination


def _factory(generators, **kwargs) -> ItineraryGeneratorFactory:
    kwargs.setdefault("default_type", "default")
    kwargs.setdefault("premium_type", "resilient")
    return ItineraryGeneratorFactory(generators, **kwargs)


@pytest.mark.parametrize(
    "featured, explicit, expected, reason",
    [
        (False, None, "default", "default"),
        (True, None, "resilient", "premium-featured"),
        (False, "chunked", "chunked", "explicit"),
        (True, "chunked", "chunked", "explicit"),
    ],
)
def test_selection_policy_invokes_expected_generator(recording_generators, featured, explicit, expected, reason):
    factory = _factory(recording_generators)
    destination = Destination(id=1, name="Lisbon", country="Portugal", featured=featured)

    assert factory.select_generator_type(destination, explicit) == (expected, reason)
    result = asyncio.run(factory.generate_itinerary(destination, explicit))

    assert f"From {expected}." in result
    called = [name for name, gen in recording_generators.items() if gen.calls]
    assert called == [expected]


def test_generate_day_uses_same_policy(recording_generators, kyoto_featured):
    factory = _factory(recording_generators)

    result = asyncio.run(factory.generate_day(kyoto_featured, 3))

    assert result.startswith("# Day 3: resilient")
    assert recording_generators["resilient"].calls == [("day", "Kyoto", 3)]


def test_invalid_day_number_propagates(recording_generators, amsterdam):
    factory = _factory(recording_generators)

    with pytest.raises(InvalidDayNumber) as excinfo:
        asyncio.run(factory.generate_day(amsterdam, 8))
    assert excinfo.value.day_number == 8


def test_invalid_day_is_rejected_before_selection_is_logged(recording_generators, amsterdam, factory_log):
    factory = _factory(recording_generators)

    with pytest.raises(InvalidDayNumber):
        asyncio.run(factory.generate_day(amsterdam, 9))

    assert factory_log == []
    assert all(not gen.calls for gen in recording_generators.values())


def test_generate_with_type_reports_the_generator_that_ran(recording_generators, kyoto_featured):
    factory = _factory(recording_generators)

    chosen, content = asyncio.run(factory.generate_itinerary_with_type(kyoto_featured))

    assert chosen == "resilient"
    assert "From resilient." in content


def test_generation_error_is_reraised_unchanged(recording_generators, amsterdam, factory_log):
    boom = RuntimeError("upstream timeout")
    generators = dict(recording_generators, default=FailingGenerator(boom))
    factory = _factory(generators)

    with pytest.raises(RuntimeError) as excinfo:
        asyncio.run(factory.generate_itinerary(amsterdam))

    assert excinfo.value is boom
    errors = [r for r in factory_log if r.levelno == logging.ERROR]
    assert errors and "Amsterdam" in errors[0].getMessage()
    assert all(not gen.calls for gen in recording_generators.values())


def test_selection_and_timing_are_logged(recording_generators, kyoto_featured, factory_log):
    factory = _factory(recording_generators)
    asyncio.run(factory.generate_itinerary(kyoto_featured))

    messages = [r.getMessage() for r in factory_log]
    assert any("PREMIUM generator (resilient)" in m and "Kyoto" in m for m in messages)
    assert any("resilient generator completed itinerary for Kyoto" in m and "chars)" in m for m in messages)


def test_logging_flags_silence_factory(recording_generators, amsterdam, factory_log):
    quiet = LoggingConfig(generator_usage=False, content_generation=False)
    factory = _factory(recording_generators, logging_config=quiet)

    asyncio.run(factory.generate_itinerary(amsterdam))

    assert factory_log == []


def test_incomplete_generator_table_is_rejected(recording_generators):
    del recording_generators["efficient"]
    with pytest.raises(ValueError):
        ItineraryGeneratorFactory(recording_generators)


def test_unknown_generator_type_is_rejected(recording_generators, amsterdam):
    factory = _factory(recording_generators)

    with pytest.raises(UnknownGeneratorType):
        factory.select_generator_type(amsterdam, "turbo")
    with pytest.raises(UnknownGeneratorType):
        factory.set_default_generator_type("turbo")


def test_default_generator_type_can_be_changed(recording_generators, amsterdam):
    factory = _factory(recording_generators)
    factory.set_default_generator_type("efficient")

    assert factory.get_default_generator_type() == "efficient"
    assert factory.select_generator_type(amsterdam) == ("efficient", "default")
    assert factory.get_generator("chunked") is recording_generators["chunked"]


def test_create_factory_without_api_key_uses_placeholder():
    settings = GeneratorSettings(default_type="chunked", premium_type="efficient", openai_api_key=None)

    factory = asyncio.run(create_generator_factory(settings))

    generators = {factory.get_generator(t) for t in factory.generator_types}
    assert len(generators) == 1
    assert isinstance(generators.pop(), PlaceholderItineraryGenerator)
    assert factory.get_default_generator_type() == "chunked"
    assert factory.premium_generator_type == "efficient"


def test_create_factory_accepts_explicit_table(recording_generators):
    factory = asyncio.run(create_generator_factory(GeneratorSettings(), recording_generators))
    assert factory.get_generator("resilient") is recording_generators["resilient"]


def test_shared_factory_is_created_once(monkeypatch, recording_generators):
    created = []

    async def fake_create(settings=None, generators=None):
        await asyncio.sleep(0)
        built = _factory(recording_generators)
        created.append(built)
        return built

    monkeypatch.setattr(factory_module, "create_generator_factory", fake_create)

    async def run():
        return await asyncio.gather(*[get_generator_factory() for _ in range(5)])

    factories = asyncio.run(run())

    assert len(created) == 1
    assert all(f is created[0] for f in factories)


def test_placeholder_generator_rejects_out_of_range_days(amsterdam):
    generator = PlaceholderItineraryGenerator()
    for bad in (0, 8, -1, True, "3"):
        with pytest.raises(InvalidDayNumber):
            asyncio.run(generator.generate_day(amsterdam, bad))
