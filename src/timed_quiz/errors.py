"""Errors: Exception hierarchy raised by the quiz engine."""

from typing import Optional


class QuizError(Exception):
    """Base exception for quiz engine errors."""


class InvalidStateError(QuizError):
    """Raised when an operation is invoked in a state that forbids it."""

    def __init__(self, operation: str, state, message: Optional[str] = None):
        self.operation = operation
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(message or f"Cannot {operation} while session is {state_name}")


class InsufficientScoreError(QuizError):
    """Raised when a hint is requested with nothing left to deduct."""

    def __init__(self, score: int = 0):
        self.score = score
        super().__init__(f"A hint costs points and the current score is {score}")


class ValidationError(QuizError, ValueError):
    """Raised for malformed questions, bank entries or player identity."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConfigError(QuizError, ValueError):
    """Raised for invalid configuration values, presets or bank names."""
