"""Session: Timed quiz state machine tying the bank, scorer and timer together."""

import logging
import threading
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from .config import SessionConfig
from .errors import InsufficientScoreError, InvalidStateError, ValidationError
from .question_bank import QuestionBank
from .questions import Answer, Question
from .scorer import Scorer, Verdict
from .timer import CountdownTimer

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    ENDED = "ended"


class EndCause(Enum):
    """Why a session ended. Informational only, scoring ignores it."""
    TIMEOUT = "timeout"
    EXHAUSTED = "exhausted"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class SessionResult:
    """Final outcome of a finished session."""
    score: int
    asked_count: int
    percentage: int
    verdict: Verdict
    cause: EndCause
    elapsed_seconds: int
    hints_used: int
    identity: Optional[str]
    new_high_score: bool = False

    @property
    def passed(self) -> bool:
        return self.verdict is Verdict.PASS

    def to_dict(self) -> dict:
        data = asdict(self)
        data["verdict"] = self.verdict.value
        data["cause"] = self.cause.value
        return data


class Session:
    """
    One player's run through a question bank against the clock.

    Lifecycle is IDLE -> ACTIVE -> ENDED, and ``reset()`` returns to IDLE.
    Every operation takes the session lock, so timer ticks arriving on the
    timer thread are serialized with answers and hints from the caller.
    """

    def __init__(
        self,
        bank: QuestionBank,
        config: Optional[SessionConfig] = None,
        on_question_changed: Optional[Callable[[Question], None]] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        on_ended: Optional[Callable[[EndCause, SessionResult], None]] = None,
        timer: Optional[CountdownTimer] = None,
    ):
        self.bank = bank
        self.config = config or SessionConfig()
        self.on_question_changed = on_question_changed
        self.on_tick = on_tick
        self.on_ended = on_ended
        self.session_id = str(uuid.uuid4())
        self._timer = timer or CountdownTimer(interval=self.config.tick_interval,
                                              name=f"quiz-{self.session_id[:8]}")
        self._lock = threading.RLock()
        self._scorer = Scorer()
        self._run = 0
        self._high_score = 0
        self._clear()

    def _clear(self):
        self._state = SessionState.IDLE
        self._scorer.reset()
        self._asked_count = 0
        self._hints_used = 0
        self._time_remaining = self.duration
        self._current_question: Optional[Question] = None
        self._identity: Optional[str] = None
        self._end_cause: Optional[EndCause] = None
        self._result: Optional[SessionResult] = None

    # --- queries ---

    @property
    def duration(self) -> int:
        return max(0, self.config.duration_seconds)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def current_question(self) -> Optional[Question]:
        return self._current_question

    @property
    def asked_count(self) -> int:
        return self._asked_count

    @property
    def hints_used(self) -> int:
        return self._hints_used

    @property
    def hint_penalty(self) -> int:
        return self.config.hint_penalty

    @property
    def end_cause(self) -> Optional[EndCause]:
        return self._end_cause

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def high_score(self) -> int:
        """Best score across runs of this session object. Not persisted."""
        return self._high_score

    # --- commands ---

    def start(self, identity: str) -> Optional[Question]:
        """Begin a run for ``identity`` and return the first question.

        Returns None when the run ends immediately (no time or no questions).
        """
        with self._lock:
            self._require("start", SessionState.IDLE)
            identity = (identity or "").strip()
            if not identity:
                raise ValidationError("identity required")

            self._run += 1
            self._identity = identity
            self._state = SessionState.ACTIVE
            self._time_remaining = self.duration
            logger.info(
                f"Session {self.session_id} started for '{identity}': "
                f"{self.duration}s, {self.bank.unasked_count()} questions available"
            )

            if self.duration <= 0:
                self._finish(EndCause.TIMEOUT)
                return None

            self._advance()
            if self._state is SessionState.ACTIVE and self.config.auto_tick:
                run = self._run
                self._timer.on_tick = lambda remaining: self._on_timer_tick(run)
                self._timer.on_expire = lambda: self._on_timer_expire(run)
                self._timer.start(self.duration)
            return self._current_question

    def submit_answer(self, value: Answer) -> bool:
        """Score an answer to the current question and move on. Returns correctness."""
        with self._lock:
            self._require_active("submit an answer")
            question = self._current_question
            correct = question.is_correct(value)
            if correct:
                self._scorer.increment()
            self._asked_count += 1
            logger.debug(
                f"Answer {'correct' if correct else 'wrong'} "
                f"({self.score}/{self._asked_count}): {question.prompt[:60]}"
            )
            self._advance()
            return correct

    def use_hint(self) -> int:
        """Charge the hint penalty and return the new score.

        Revealing the answer is left to the caller, via
        ``current_question.answer_text``.
        """
        with self._lock:
            self._require_active("use a hint")
            if self.score <= 0:
                raise InsufficientScoreError(self.score)
            self._scorer.penalize(self.hint_penalty)
            self._hints_used += 1
            logger.debug(f"Hint used, score now {self.score}")
            return self.score

    def tick(self) -> int:
        """Advance the countdown by one second; ends the run at zero."""
        with self._lock:
            self._require_active("tick")
            self._time_remaining = max(0, self._time_remaining - 1)
            remaining = self._time_remaining
            try:
                if self.on_tick:
                    self.on_tick(remaining)
            finally:
                # Timeout must not hinge on the listener succeeding
                if remaining == 0:
                    self._finish(EndCause.TIMEOUT)
            return remaining

    def end(self, cause: EndCause = EndCause.ABANDONED) -> Optional[SessionResult]:
        """Force the run to finish. Repeated calls return the same result."""
        with self._lock:
            if self._state is SessionState.ENDED:
                return self._result
            if self._state is SessionState.IDLE:
                logger.debug("end() called on an idle session, nothing to do")
                return None
            self._finish(EndCause(cause))
            return self._result

    def reset(self):
        """Return to IDLE with a fresh score and clock, resetting the bank.

        Custom questions follow ``config.custom_retention`` when it is set and
        the bank's own policy otherwise.
        """
        with self._lock:
            self._timer.stop()
            self._run += 1
            self._clear()
            self.bank.reset(self.config.custom_retention)
            logger.info(f"Session {self.session_id} reset ({len(self.bank)} questions in bank)")

    def result(self) -> SessionResult:
        with self._lock:
            self._require("read the result", SessionState.ENDED)
            return self._result

    def add_custom_question(self, prompt: str, options_or_answer: Union[str, Sequence[str]],
                            correct_index: Optional[int] = None) -> Question:
        """Validate and append a user-authored question to the shared bank."""
        with self._lock:
            return self.bank.add_custom(
                prompt,
                options_or_answer,
                correct_index,
                option_count=self.config.option_count,
                min_prompt_length=self.config.min_prompt_length,
            )

    # --- internals ---

    def _require(self, operation: str, *allowed: SessionState):
        if self._state not in allowed:
            raise InvalidStateError(operation, self._state)

    def _require_active(self, operation: str):
        self._require(operation, SessionState.ACTIVE)

    def _advance(self):
        question = self.bank.next_unasked(self.config.selection_policy)
        if question is None:
            self._current_question = None
            self._finish(EndCause.EXHAUSTED)
            return
        self._current_question = question
        if self.on_question_changed:
            self.on_question_changed(question)

    def _finish(self, cause: EndCause):
        self._timer.stop()
        self._state = SessionState.ENDED
        self._end_cause = cause
        self._current_question = None

        percent = self._scorer.percentage(self._asked_count)
        new_high_score = self.score > self._high_score
        if new_high_score:
            self._high_score = self.score
        self._result = SessionResult(
            score=self.score,
            asked_count=self._asked_count,
            percentage=percent,
            verdict=Scorer.verdict(percent, self.config.pass_threshold),
            cause=cause,
            elapsed_seconds=self.duration - self._time_remaining,
            hints_used=self._hints_used,
            identity=self._identity,
            new_high_score=new_high_score,
        )
        logger.info(
            f"Session {self.session_id} ended ({cause.value}): score {self.score}/"
            f"{self._asked_count}, {percent}% {self._result.verdict.value}"
        )
        if self.on_ended:
            self.on_ended(cause, self._result)

    def _on_timer_tick(self, run: int):
        with self._lock:
            if run != self._run or self._state is not SessionState.ACTIVE:
                logger.debug(f"Discarding late timer tick for run {run}")
                return
            self.tick()

    def _on_timer_expire(self, run: int):
        with self._lock:
            if run == self._run and self._state is SessionState.ACTIVE:
                self._finish(EndCause.TIMEOUT)
