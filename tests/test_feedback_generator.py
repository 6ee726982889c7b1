"""Tests for the FeedbackGenerator module."""
import random

import pytest

from timed_quiz.feedback_generator import FeedbackGenerator, format_clock
from timed_quiz.questions import ChoiceQuestion, FreeTextQuestion
from timed_quiz.scorer import Verdict
from timed_quiz.session import EndCause, SessionResult


CHOICE_QUESTION = ChoiceQuestion(
    "Which port does HTTPS use by default?",
    ["21", "80", "443", "8080"],
    2,
    explanation="HTTPS listens on port 443.",
)
TEXT_QUESTION = FreeTextQuestion("What is Thor's hammer called?", "Mjolnir")


def make_result(**overrides):
    values = dict(score=7, asked_count=10, percentage=70, verdict=Verdict.PASS,
                  cause=EndCause.EXHAUSTED, elapsed_seconds=125, hints_used=0,
                  identity="Alice")
    values.update(overrides)
    return SessionResult(**values)


@pytest.fixture
def generator():
    return FeedbackGenerator(rng=random.Random(0))


@pytest.mark.parametrize("seconds,expected", [
    (0, "0:00"),
    (9, "0:09"),
    (60, "1:00"),
    (1220, "20:20"),
    (-3, "0:00"),
])
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


def test_correct_feedback_includes_explanation(generator):
    feedback = generator.generate(True, CHOICE_QUESTION)
    assert "HTTPS listens on port 443." in feedback


def test_incorrect_feedback_reveals_answer(generator):
    feedback = generator.generate(False, CHOICE_QUESTION)
    assert "The correct answer is: 443" in feedback


def test_feedback_without_explanation_is_trimmed(generator):
    feedback = generator.generate(True, TEXT_QUESTION)
    assert feedback == feedback.strip()
    assert len(feedback) > 0


def test_hint_text(generator):
    assert generator.generate_hint(TEXT_QUESTION, 1, 2) == "Hint: Mjolnir (-1 point, score is now 2)"
    assert "-2 points" in generator.generate_hint(TEXT_QUESTION, 2, 0)


def test_intro_numbers_options(generator):
    intro = generator.generate_intro(CHOICE_QUESTION, 3, 5, CHOICE_QUESTION.options)
    lines = intro.splitlines()
    assert lines[0] == "Question 3 of 5. Which port does HTTPS use by default?"
    assert lines[3] == "  3. 443"
    assert len(lines) == 5


def test_intro_without_options(generator):
    assert generator.generate_intro(TEXT_QUESTION, 1, 10) == "Question 1 of 10. What is Thor's hammer called?"


def test_summary_for_pass(generator):
    summary = generator.generate_session_summary(make_result())
    assert "Congratulations, Alice! You passed with a score of 70%!" in summary
    assert "You answered 7 out of 10 questions correctly." in summary
    assert "Time taken: 2:05" in summary
    assert "Time's up!" not in summary
    assert "Hints used" not in summary


def test_summary_for_fail(generator):
    result = make_result(score=6, percentage=60, verdict=Verdict.FAIL)
    summary = generator.generate_session_summary(result, pass_threshold=70)
    assert "Thank you, Alice! Your score is 60%." in summary
    assert "A score of 70% or better is recommended." in summary


def test_summary_for_timeout(generator):
    summary = generator.generate_session_summary(make_result(cause=EndCause.TIMEOUT))
    assert summary.startswith("Time's up!")


def test_summary_extras(generator):
    summary = generator.generate_session_summary(
        make_result(hints_used=2, new_high_score=True, identity=None)
    )
    assert "Congratulations, Candidate!" in summary
    assert "Hints used: 2" in summary
    assert "New high score: 7!" in summary
