"""Configuration: Session settings, presets and YAML config loading."""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import ConfigError
from .question_bank import CustomRetention, SelectionPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConfig:
    """Tunable parameters of a quiz session."""
    duration_seconds: int = 1220
    pass_threshold: int = 70
    hint_penalty: int = 1
    selection_policy: SelectionPolicy = SelectionPolicy.RANDOM
    option_count: int = 4
    min_prompt_length: int = 10
    # None defers to the policy of the bank the session plays
    custom_retention: Optional[CustomRetention] = None
    tick_interval: float = 1.0
    auto_tick: bool = True
    advance_delay: float = 1.5

    def __post_init__(self):
        # Accept plain strings for the enum fields, as they come out of YAML
        try:
            object.__setattr__(self, "selection_policy", SelectionPolicy(self.selection_policy))
            if self.custom_retention is not None:
                object.__setattr__(self, "custom_retention", CustomRetention(self.custom_retention))
        except ValueError as e:
            raise ConfigError(str(e)) from e
        self.validate()

    def validate(self):
        """Raise ConfigError for out-of-range values."""
        for name in ("duration_seconds", "pass_threshold", "hint_penalty",
                     "option_count", "min_prompt_length"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {type(value).__name__}")
        if self.duration_seconds < 0:
            raise ConfigError("duration_seconds cannot be negative")
        if not 0 <= self.pass_threshold <= 100:
            raise ConfigError("pass_threshold must be between 0 and 100")
        if self.hint_penalty < 0:
            raise ConfigError("hint_penalty cannot be negative")
        if self.option_count < 2:
            raise ConfigError("option_count must be at least 2")
        if self.min_prompt_length < 0:
            raise ConfigError("min_prompt_length cannot be negative")
        for name in ("tick_interval", "advance_delay"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {type(value).__name__}")
        if self.tick_interval <= 0:
            raise ConfigError("tick_interval must be positive")
        if self.advance_delay < 0:
            raise ConfigError("advance_delay cannot be negative")


PRESETS: Dict[str, SessionConfig] = {
    # 20 minutes plus a 20 second grace period, questions in bank order
    "comptia": SessionConfig(duration_seconds=1220, selection_policy=SelectionPolicy.SEQUENTIAL),
    "quiz-ninja": SessionConfig(duration_seconds=240, selection_policy=SelectionPolicy.RANDOM,
                                advance_delay=1.0),
}

CONFIG_FIELDS = {f.name for f in fields(SessionConfig)}


def get_preset(name: str) -> SessionConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigError(f"Unknown preset '{name}' (choose from {', '.join(sorted(PRESETS))})") from None


def build_config(base: Optional[SessionConfig] = None, **overrides) -> SessionConfig:
    """Apply non-None overrides on top of ``base``."""
    unknown = set(overrides) - CONFIG_FIELDS
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    values = {k: v for k, v in overrides.items() if v is not None}
    return replace(base or SessionConfig(), **values)


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw YAML mapping; a missing file gives an empty mapping."""
    path = Path(path)
    if not path.exists():
        logger.debug(f"No config file at {path}, using defaults")
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(path: Union[str, Path] = "config.yaml", preset: Optional[str] = None,
                **overrides) -> tuple:
    """Resolve ``(SessionConfig, bank)`` from preset, config file and overrides.

    Precedence from lowest to highest: defaults, preset, the ``quiz`` and
    ``runner`` sections of the file, keyword overrides. ``bank`` is the bank
    path or bundled bank name to play, or None.
    """
    data = load_config_file(path)
    quiz_cfg = dict(data.get("quiz") or {})
    runner_cfg = dict(data.get("runner") or {})

    file_preset = quiz_cfg.pop("preset", None)
    file_bank = quiz_cfg.pop("bank", None)
    preset = preset or file_preset
    bank = overrides.pop("bank", None) or file_bank

    base = get_preset(preset) if preset else SessionConfig()
    config = build_config(base, **{**quiz_cfg, **runner_cfg})
    config = build_config(config, **overrides)

    if bank is None and preset:
        # Presets share their name with the bundled bank they play
        bank = preset
    logger.debug(f"Resolved config: {config} (bank={bank})")
    return config, bank
