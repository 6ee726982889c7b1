"""Tests for the configuration module."""
import pytest

from timed_quiz.config import (
    PRESETS,
    SessionConfig,
    build_config,
    get_preset,
    load_config,
    load_config_file,
)
from timed_quiz.errors import ConfigError
from timed_quiz.question_bank import CustomRetention, SelectionPolicy


def test_defaults():
    config = SessionConfig()
    assert config.duration_seconds == 1220
    assert config.pass_threshold == 70
    assert config.hint_penalty == 1
    assert config.option_count == 4
    assert config.min_prompt_length == 10
    assert config.custom_retention is None


def test_enum_fields_accept_strings():
    config = SessionConfig(selection_policy="sequential", custom_retention="discard")
    assert config.selection_policy is SelectionPolicy.SEQUENTIAL
    assert config.custom_retention is CustomRetention.DISCARD


def test_bad_enum_value():
    with pytest.raises(ConfigError):
        SessionConfig(selection_policy="shuffled")


@pytest.mark.parametrize("overrides", [
    {"duration_seconds": -1},
    {"pass_threshold": 101},
    {"hint_penalty": -1},
    {"option_count": 1},
    {"tick_interval": 0},
    {"advance_delay": -0.5},
    {"duration_seconds": "60"},
    {"pass_threshold": True},
])
def test_invalid_values(overrides):
    with pytest.raises(ConfigError):
        SessionConfig(**overrides)


def test_presets():
    assert get_preset("comptia").duration_seconds == 1220
    assert get_preset("comptia").selection_policy is SelectionPolicy.SEQUENTIAL
    assert get_preset("quiz-ninja").duration_seconds == 240
    assert get_preset("quiz-ninja").selection_policy is SelectionPolicy.RANDOM
    assert set(PRESETS) == {"comptia", "quiz-ninja"}


def test_unknown_preset():
    with pytest.raises(ConfigError):
        get_preset("trivia")


def test_build_config_ignores_none():
    config = build_config(get_preset("quiz-ninja"), duration_seconds=None, hint_penalty=2)
    assert config.duration_seconds == 240
    assert config.hint_penalty == 2


def test_build_config_rejects_unknown_keys():
    with pytest.raises(ConfigError):
        build_config(colour="blue")


def test_missing_config_file(tmp_path):
    assert load_config_file(tmp_path / "absent.yaml") == {}


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("quiz: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config_file(path)


def test_non_mapping_config(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config_file(path)


def test_load_config_merges_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "quiz:\n"
        "  preset: quiz-ninja\n"
        "  hint_penalty: 2\n"
        "  custom_retention: discard\n"
        "runner:\n"
        "  advance_delay: 0.5\n"
    )
    config, bank = load_config(path)
    assert config.duration_seconds == 240
    assert config.hint_penalty == 2
    assert config.custom_retention is CustomRetention.DISCARD
    assert config.advance_delay == 0.5
    assert bank == "quiz-ninja"


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("quiz:\n  bank: comptia\n  duration_seconds: 600\n")
    config, bank = load_config(path, duration_seconds=30, bank="my_bank.yaml")
    assert config.duration_seconds == 30
    assert bank == "my_bank.yaml"


def test_preset_argument_overrides_file_preset(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("quiz:\n  preset: comptia\n")
    config, bank = load_config(path, preset="quiz-ninja")
    assert config.duration_seconds == 240
    assert bank == "quiz-ninja"


def test_load_config_without_file(tmp_path):
    config, bank = load_config(tmp_path / "absent.yaml")
    assert config == SessionConfig()
    assert bank is None
