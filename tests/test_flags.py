"""
Unit tests for analytics flag resolution.
"""
import dataclasses

import pytest

from app.core import config
from app.core.flags import AnalyticsFlags, as_bool, resolve_flags


def test_defaults_without_environment():
    flags = resolve_flags({}, env={})
    assert flags.use_openai is False
    assert flags.use_embeddings is False
    assert flags.embedding_model == config.EMBEDDING_MODEL
    assert flags.similarity_threshold == config.SIM_THRESHOLD


def test_api_key_enables_generation_by_default():
    assert resolve_flags(env={"OPENAI_API_KEY": "sk-test"}).use_openai is True


def test_env_flag_beats_computed_default():
    env = {"OPENAI_API_KEY": "sk-test", "ANALYTICS_USE_OPENAI": "0"}
    assert resolve_flags(env=env).use_openai is False


def test_override_beats_env_flag():
    env = {"ANALYTICS_USE_OPENAI": "0", "ANALYTICS_USE_EMBEDDINGS": "false"}
    flags = resolve_flags({"openai": True, "embeddings": "1"}, env=env)
    assert flags.use_openai is True
    assert flags.use_embeddings is True


def test_unset_override_falls_through():
    flags = resolve_flags({"openai": None, "embeddings": ""}, env={"ANALYTICS_USE_EMBEDDINGS": "yes"})
    assert flags.use_openai is False
    assert flags.use_embeddings is True


def test_embedding_model_env_enables_embeddings():
    flags = resolve_flags(env={"TEXT2VEC_OPENAI_MODEL": "text-embedding-3-large"})
    assert flags.use_embeddings is True
    assert flags.embedding_model == "text-embedding-3-large"
    assert resolve_flags(env={"WEAVIATE_HOST": "localhost"}).use_embeddings is True


def test_similarity_threshold_from_env():
    assert resolve_flags(env={"SIM_THRESHOLD": "0.5"}).similarity_threshold == 0.5
    assert resolve_flags(env={"SIM_THRESHOLD": "high"}).similarity_threshold == config.SIM_THRESHOLD


def test_key_and_temperature_come_from_given_env():
    flags = resolve_flags(env={"OPENAI_API_KEY": "sk-test", "ANALYSIS_TEMPERATURE": "0.5"})
    assert flags.api_key == "sk-test"
    assert flags.provider_available is True
    assert flags.temperature == 0.5
    assert "sk-test" not in repr(flags)


def test_missing_key_means_no_provider():
    flags = resolve_flags({"openai": True}, env={"ANALYSIS_TEMPERATURE": "warm"})
    assert flags.use_openai is True
    assert flags.provider_available is False
    assert flags.temperature == config.ANALYSIS_TEMPERATURE


def test_flags_are_immutable():
    flags = resolve_flags(env={})
    with pytest.raises(dataclasses.FrozenInstanceError):
        flags.use_openai = True


@pytest.mark.parametrize("value, expected", [
    ("1", True), ("TRUE", True), ("on", True), (True, True),
    ("0", False), ("off", False), ("No", False), (False, False),
    (None, None), ("", None), ("maybe", None),
])
def test_as_bool(value, expected):
    assert as_bool(value) is expected


def test_default_dataclass():
    assert AnalyticsFlags().use_openai is False
