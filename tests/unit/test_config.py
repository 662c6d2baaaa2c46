"""Unit tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from kickabout.config import Settings, get_settings


def test_defaults():
    config = Settings(_env_file=None)

    assert config.fuzzy_match_threshold == 0.4
    assert config.fuzzy_suggestion_threshold == 0.6
    assert config.fuzzy_suggestion_limit == 5
    assert config.alias_match_weight == 0.8
    assert config.default_player_rating == 70
    assert config.squad_size == 6
    assert config.log_level == "INFO"


def test_environment_override(monkeypatch):
    monkeypatch.setenv("FUZZY_MATCH_THRESHOLD", "0.3")
    monkeypatch.setenv("SQUAD_SIZE", "7")

    config = Settings(_env_file=None)
    assert config.fuzzy_match_threshold == 0.3
    assert config.squad_size == 7


def test_log_level_uppercased():
    assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


@pytest.mark.parametrize(
    "overrides",
    [
        {"log_level": "LOUD"},
        {"fuzzy_match_threshold": 1.5},
        {"alias_match_weight": -0.1},
        {"default_player_rating": 101},
        {"squad_size": 0},
        {"fuzzy_suggestion_limit": 0},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
