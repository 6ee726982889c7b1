"""Questions: Fixed-choice and free-text question types."""

from dataclasses import dataclass
from typing import List, Optional, Union

Answer = Union[int, str]


def normalize_answer(text) -> str:
    """Case-insensitive, whitespace-trimmed form used for answer comparison."""
    return str(text).strip().lower()


@dataclass(eq=False)
class ChoiceQuestion:
    """A question answered by picking one of a fixed list of options."""
    prompt: str
    options: List[str]
    correct_index: int
    explanation: Optional[str] = None
    custom: bool = False
    asked: bool = False

    def __post_init__(self):
        self.options = list(self.options)
        if len(self.options) < 2:
            raise ValueError("A choice question needs at least two options")
        if isinstance(self.correct_index, bool) or not 0 <= self.correct_index < len(self.options):
            raise ValueError(
                f"correct_index {self.correct_index!r} is out of range for {len(self.options)} options"
            )

    @property
    def answer_text(self) -> str:
        return self.options[self.correct_index]

    def is_correct(self, value: Answer) -> bool:
        """Index equality for ints, option-text equality for strings."""
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return value == self.correct_index
        return normalize_answer(value) == normalize_answer(self.answer_text)


@dataclass(eq=False)
class FreeTextQuestion:
    """A question answered by typing the expected answer."""
    prompt: str
    expected_answer: str
    explanation: Optional[str] = None
    custom: bool = False
    asked: bool = False

    def __post_init__(self):
        if not normalize_answer(self.expected_answer):
            raise ValueError("A free-text question needs a non-empty expected answer")

    @property
    def answer_text(self) -> str:
        return self.expected_answer

    def is_correct(self, value: Answer) -> bool:
        if isinstance(value, bool):
            return False
        return normalize_answer(value) == normalize_answer(self.expected_answer)


Question = Union[ChoiceQuestion, FreeTextQuestion]
