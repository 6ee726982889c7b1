"""Question Bank: Holds, loads and draws from a pool of quiz questions."""

import json
import logging
import random
from enum import Enum
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union

import yaml

from .errors import ConfigError, ValidationError
from .questions import ChoiceQuestion, FreeTextQuestion, Question, normalize_answer

logger = logging.getLogger(__name__)

BANKS_DIR = Path(__file__).parent / "banks"
BUNDLED_BANKS = {
    "comptia": BANKS_DIR / "comptia.yaml",
    "quiz-ninja": BANKS_DIR / "quiz_ninja.yaml",
}

PROMPT_TOO_SHORT = "prompt too short"
ANSWERS_MISSING = "answer(s) missing"
INDEX_OUT_OF_RANGE = "correct answer index out of range"


class SelectionPolicy(Enum):
    """How the next unasked question is picked."""
    RANDOM = "random"
    SEQUENTIAL = "sequential"


class CustomRetention(Enum):
    """What happens to custom questions when the bank is reset."""
    KEEP = "keep"
    DISCARD = "discard"


class QuestionBank:
    """Ordered, append-only pool of questions with per-question asked flags."""

    def __init__(self, questions: Iterable[Question] = (), name: str = "Quiz",
                 custom_retention: CustomRetention = CustomRetention.KEEP,
                 option_count: int = 4, min_prompt_length: int = 10,
                 rng: Optional[random.Random] = None):
        self.name = name
        self.custom_retention = CustomRetention(custom_retention)
        self.option_count = option_count
        self.min_prompt_length = min_prompt_length
        self._rng = rng or random.Random()
        self._seed: List[Question] = []
        self._questions: List[Question] = []
        self.seed(questions)

    def seed(self, questions: Iterable[Question]):
        """Replace the bank contents; every question starts unasked."""
        self._seed = list(questions)
        for q in self._seed:
            q.asked = False
        self._questions = list(self._seed)
        logger.debug(f"Bank '{self.name}' seeded with {len(self._seed)} questions")

    def reset(self, retention: Optional[CustomRetention] = None):
        """Clear asked flags and apply the custom-question retention policy.

        ``retention`` overrides the bank's own policy for this reset only.
        """
        retention = self.custom_retention if retention is None else CustomRetention(retention)
        if retention is CustomRetention.DISCARD:
            dropped = len(self._questions) - len(self._seed)
            self._questions = list(self._seed)
            if dropped:
                logger.info(f"Bank '{self.name}' reset, discarded {dropped} custom questions")
        for q in self._questions:
            q.asked = False

    def add_custom(self, prompt: str, options_or_answer: Union[str, Sequence[str]],
                   correct_index: Optional[int] = None,
                   option_count: Optional[int] = None,
                   min_prompt_length: Optional[int] = None) -> Question:
        """Validate and append a user-authored question.

        A string creates a free-text question, a sequence of strings a choice
        question. Raises ValidationError and leaves the bank unchanged when the
        prompt is too short, an answer is blank or the correct index is invalid.
        """
        option_count = self.option_count if option_count is None else option_count
        min_prompt_length = self.min_prompt_length if min_prompt_length is None else min_prompt_length

        prompt = (prompt or "").strip()
        if len(prompt) < min_prompt_length:
            raise ValidationError(PROMPT_TOO_SHORT)

        if isinstance(options_or_answer, str):
            answer = options_or_answer.strip()
            if not answer:
                raise ValidationError(ANSWERS_MISSING)
            question = FreeTextQuestion(prompt=prompt, expected_answer=answer, custom=True)
        else:
            options = [str(o or "").strip() for o in (options_or_answer or [])]
            if len(options) != option_count or not all(options):
                raise ValidationError(ANSWERS_MISSING)
            index = 0 if correct_index is None else correct_index
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(options):
                raise ValidationError(INDEX_OUT_OF_RANGE)
            question = ChoiceQuestion(
                prompt=prompt,
                options=options,
                correct_index=index,
                explanation=f"The correct answer is: {options[index]}",
                custom=True,
            )

        self._questions.append(question)
        logger.info(f"Custom question added to '{self.name}' ({len(self._questions)} total)")
        return question

    def next_unasked(self, policy: SelectionPolicy = SelectionPolicy.RANDOM) -> Optional[Question]:
        """Draw one unasked question and mark it asked; None when exhausted."""
        unasked = [q for q in self._questions if not q.asked]
        if not unasked:
            return None
        if SelectionPolicy(policy) is SelectionPolicy.RANDOM:
            question = self._rng.choice(unasked)
        else:
            question = unasked[0]
        question.asked = True
        return question

    def unasked_count(self) -> int:
        return sum(1 for q in self._questions if not q.asked)

    @property
    def questions(self) -> tuple:
        return tuple(self._questions)

    @property
    def custom_questions(self) -> tuple:
        return tuple(q for q in self._questions if q.custom)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(list(self._questions))


def build_options(question: Question, pool: Iterable[Question], count: int = 4,
                  rng: Optional[random.Random] = None) -> List[str]:
    """Answer choices to display for a question.

    Choice questions keep their own options. For free-text questions the
    correct answer is mixed with distinct answers from the rest of the pool
    and shuffled; fewer than ``count`` come back if the pool runs short.
    """
    if isinstance(question, ChoiceQuestion):
        return list(question.options)

    rng = rng or random.Random()
    seen = {normalize_answer(question.answer_text)}
    distractors = []
    for other in pool:
        key = normalize_answer(other.answer_text)
        if key not in seen:
            seen.add(key)
            distractors.append(other.answer_text)
    options = [question.answer_text] + rng.sample(distractors, min(count - 1, len(distractors)))
    rng.shuffle(options)
    return options


def _question_from_dict(entry: dict, position: int) -> Question:
    if not isinstance(entry, dict):
        raise ValidationError(f"question #{position} is not a mapping")
    prompt = entry.get("prompt", entry.get("question"))
    if not prompt or not str(prompt).strip():
        raise ValidationError(f"question #{position}: {PROMPT_TOO_SHORT}")
    explanation = entry.get("explanation")
    try:
        if "options" in entry or "choices" in entry:
            options = entry.get("options", entry.get("choices"))
            index = entry.get("correct_index", entry.get("correctAnswer"))
            return ChoiceQuestion(prompt=str(prompt).strip(), options=[str(o) for o in options],
                                  correct_index=index, explanation=explanation)
        if "answer" in entry or "expected_answer" in entry:
            answer = entry.get("answer", entry.get("expected_answer"))
            return FreeTextQuestion(prompt=str(prompt).strip(), expected_answer=str(answer),
                                    explanation=explanation)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"question #{position}: {e}") from e
    raise ValidationError(f"question #{position}: {ANSWERS_MISSING}")


def load_questions(path: Union[str, Path]) -> tuple:
    """Read ``(name, questions)`` from a YAML or JSON bank file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    name = path.stem
    entries = data
    if isinstance(data, dict):
        name = data.get("name", name)
        entries = data.get("questions")
    if not isinstance(entries, list):
        raise ValidationError(f"{path}: expected a list of questions")

    questions = [_question_from_dict(entry, i + 1) for i, entry in enumerate(entries)]
    logger.info(f"Loaded {len(questions)} questions from {path}")
    return name, questions


def resolve_bank_path(path_or_name: Union[str, Path]) -> Path:
    """Map a bundled bank name to its file, or return the path as given."""
    key = str(path_or_name)
    if key in BUNDLED_BANKS:
        return BUNDLED_BANKS[key]
    path = Path(path_or_name)
    if not path.exists():
        raise ConfigError(
            f"Unknown question bank '{key}' (bundled banks: {', '.join(sorted(BUNDLED_BANKS))})"
        )
    return path


def load_bank(path_or_name: Union[str, Path], **kwargs) -> QuestionBank:
    """Build a QuestionBank from a file path or a bundled bank name."""
    name, questions = load_questions(resolve_bank_path(path_or_name))
    kwargs.setdefault("name", name)
    return QuestionBank(questions, **kwargs)
