"""Timed quiz engine: question banks, countdown, scoring and session state."""

from .config import PRESETS, SessionConfig, load_config
from .errors import (
    ConfigError,
    InsufficientScoreError,
    InvalidStateError,
    QuizError,
    ValidationError,
)
from .question_bank import CustomRetention, QuestionBank, SelectionPolicy, build_options, load_bank
from .questions import ChoiceQuestion, FreeTextQuestion
from .scorer import Scorer, Verdict
from .session import EndCause, Session, SessionResult, SessionState
from .timer import CountdownTimer

__version__ = "0.1.0"
