"""Scorer: Running score, percentage and pass/fail verdict."""

from enum import Enum

DEFAULT_PASS_THRESHOLD = 70


class Verdict(Enum):
    PASS = "pass"
    FAIL = "fail"


class Scorer:
    """Integer score that never drops below zero."""

    def __init__(self):
        self.score = 0

    def increment(self):
        self.score += 1

    def penalize(self, amount: int):
        """Deduct ``amount`` points, flooring the score at zero."""
        self.score = max(0, self.score - amount)

    def reset(self):
        self.score = 0

    def percentage(self, asked_count: int) -> int:
        return percentage(self.score, asked_count)

    @staticmethod
    def verdict(percent: int, pass_threshold: int = DEFAULT_PASS_THRESHOLD) -> Verdict:
        return Verdict.PASS if percent >= pass_threshold else Verdict.FAIL


def percentage(score: int, asked_count: int) -> int:
    """Whole-number percentage of ``score`` over ``asked_count``, rounding halves up."""
    if asked_count <= 0:
        return 0
    # Integer form of floor(100 * score / asked + 0.5)
    return (200 * score + asked_count) // (2 * asked_count)
