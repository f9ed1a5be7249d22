import logging

import pytest

from deeptravel.config import (
    DEFAULT_GENERATOR_TYPE,
    DEFAULT_OPENAI_MODEL,
    GENERATOR_TYPES,
    get_logger,
    load_settings,
)

_ENV_VARS = (
    "DEEPTRAVEL_DEFAULT_GENERATOR",
    "DEEPTRAVEL_PREMIUM_GENERATOR",
    "DEEPTRAVEL_OPENAI_MODEL",
    "DEEPTRAVEL_LOG_GENERATOR_USAGE",
    "DEEPTRAVEL_LOG_CONTENT_GENERATION",
    "OPENAI_API_KEY",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_generator_types_are_ordered():
    assert GENERATOR_TYPES == ("default", "chunked", "resilient", "efficient")


def test_defaults_without_environment(clean_env):
    settings = load_settings()

    assert settings.default_type == DEFAULT_GENERATOR_TYPE == "efficient"
    assert settings.premium_type == "efficient"
    assert settings.openai_api_key is None
    assert settings.openai_model == DEFAULT_OPENAI_MODEL
    assert settings.logging.generator_usage
    assert settings.logging.content_generation


def test_environment_overrides(clean_env):
    clean_env.setenv("DEEPTRAVEL_DEFAULT_GENERATOR", "Chunked")
    clean_env.setenv("DEEPTRAVEL_PREMIUM_GENERATOR", "resilient")
    clean_env.setenv("DEEPTRAVEL_OPENAI_MODEL", "gpt-4o-mini")
    clean_env.setenv("DEEPTRAVEL_LOG_GENERATOR_USAGE", "off")
    clean_env.setenv("OPENAI_API_KEY", "sk-test")

    settings = load_settings()

    assert settings.default_type == "chunked"
    assert settings.premium_type == "resilient"
    assert settings.openai_model == "gpt-4o-mini"
    assert settings.openai_api_key == "sk-test"
    assert settings.logging.generator_usage is False
    assert settings.logging.content_generation is True


def test_unknown_values_fall_back_to_defaults(clean_env):
    clean_env.setenv("DEEPTRAVEL_DEFAULT_GENERATOR", "turbo")
    clean_env.setenv("DEEPTRAVEL_LOG_CONTENT_GENERATION", "sometimes")

    settings = load_settings()

    assert settings.default_type == "efficient"
    assert settings.logging.content_generation is True


def test_get_logger_attaches_single_handler():
    first = get_logger("deeptravel.tests.sample")
    second = get_logger("deeptravel.tests.sample")

    assert first is second
    assert len(first.handlers) == 1
    assert first.propagate is False
    assert isinstance(first.handlers[0], logging.StreamHandler)


def test_settings_carry_only_consumed_fields():
    settings = load_settings()
    assert not hasattr(settings, "test_type")
    assert not hasattr(settings.logging, "cache_hits")
