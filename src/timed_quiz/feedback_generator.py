"""Feedback Generator: Player-facing text for answers, hints and results."""

import random
from typing import List, Optional

from .questions import Question
from .scorer import Verdict
from .session import EndCause, SessionResult

CORRECT_TEMPLATES = [
    "Correct! {explanation}",
    "Well done, that's right. {explanation}",
    "Spot on! {explanation}",
]

INCORRECT_TEMPLATES = [
    "Wrong! The correct answer is: {answer}. {explanation}",
    "Not quite. The correct answer is: {answer}. {explanation}",
]


def format_clock(seconds: int) -> str:
    """Render seconds as m:ss, the way the quiz clock shows it."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"


class FeedbackGenerator:
    """Builds feedback strings; the engine itself never produces text."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate(self, correct: bool, question: Question) -> str:
        """Feedback shown after an answer to ``question``."""
        explanation = question.explanation or ""
        if correct:
            template = self._rng.choice(CORRECT_TEMPLATES)
            text = template.format(explanation=explanation)
        else:
            template = self._rng.choice(INCORRECT_TEMPLATES)
            text = template.format(answer=question.answer_text, explanation=explanation)
        return text.strip()

    def generate_hint(self, question: Question, penalty: int, score: int) -> str:
        point = "point" if penalty == 1 else "points"
        return f"Hint: {question.answer_text} (-{penalty} {point}, score is now {score})"

    def generate_intro(self, question: Question, question_num: int, total: int,
                       options: Optional[List[str]] = None) -> str:
        """Question header plus numbered options, if any."""
        lines = [f"Question {question_num} of {total}. {question.prompt}"]
        for i, option in enumerate(options or [], start=1):
            lines.append(f"  {i}. {option}")
        return "\n".join(lines)

    def generate_session_summary(self, result: SessionResult, pass_threshold: int = 70) -> str:
        """End-of-session summary for a SessionResult."""
        name = result.identity or "Candidate"
        lines = []
        if result.cause is EndCause.TIMEOUT:
            lines.append("Time's up!")
        if result.verdict is Verdict.PASS:
            lines.append(f"Congratulations, {name}! You passed with a score of {result.percentage}%!")
        else:
            lines.append(f"Thank you, {name}! Your score is {result.percentage}%.")
            lines.append(f"A score of {pass_threshold}% or better is recommended.")
        lines.append(f"You answered {result.score} out of {result.asked_count} questions correctly.")
        lines.append(f"Time taken: {format_clock(result.elapsed_seconds)}")
        if result.hints_used:
            lines.append(f"Hints used: {result.hints_used}")
        if result.new_high_score:
            lines.append(f"New high score: {result.score}!")
        return "\n".join(lines)
