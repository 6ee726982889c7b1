"""Quiz Runner: Plays a session in the terminal and provides the CLI entry point."""

import argparse
import logging
import random
import time
from typing import Callable, List, Optional

from .config import load_config
from .errors import ConfigError, InsufficientScoreError, InvalidStateError, ValidationError
from .feedback_generator import FeedbackGenerator, format_clock
from .question_bank import CustomRetention, build_options, load_bank
from .questions import Answer, ChoiceQuestion, Question
from .session import Session, SessionResult, SessionState

logger = logging.getLogger(__name__)

WARN_AT_SECONDS = (60, 10)


class QuizRunner:
    """
    Drives a Session from line-based input.

    Presentation only: the runner prints questions and feedback, handles the
    hint/time/add/quit commands and pauses briefly after each answer. All
    quiz rules live in the Session.
    """

    def __init__(
        self,
        session: Session,
        feedback_generator: Optional[FeedbackGenerator] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        output_fn: Callable[[str], None] = print,
        sleep_fn: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.session = session
        self.feedback = feedback_generator or FeedbackGenerator()
        self.input_fn = input_fn or input
        self.output_fn = output_fn
        self.sleep_fn = sleep_fn
        self._rng = rng or random.Random()
        if session.on_tick is None:
            session.on_tick = self._warn_time

    def say(self, text: str):
        self.output_fn(text)

    def listen(self, prompt: str = "> ") -> str:
        """Read one line; end of input counts as quitting."""
        try:
            return self.input_fn(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            return "quit"

    def handle_special_commands(self, text: str) -> Optional[str]:
        lower = text.lower().strip().rstrip(".!?")
        if lower in ("quit", "exit", "stop"):
            return "quit"
        if lower in ("hint", "help me"):
            return "hint"
        if lower in ("time", "clock"):
            return "time"
        if lower in ("add", "add question"):
            return "add"
        return None

    def parse_answer(self, text: str, question: Question, options: List[str]) -> Answer:
        """Map a typed option number to what the session expects."""
        if text.isdigit() and 1 <= int(text) <= len(options):
            index = int(text) - 1
            if isinstance(question, ChoiceQuestion):
                return index
            return options[index]
        return text

    def run_question(self, question: Question, question_num: int) -> bool:
        """Ask one question until it is answered. Returns False to end the run."""
        options = build_options(question, self.session.bank,
                                self.session.config.option_count, self._rng)
        self.say(self.feedback.generate_intro(question, question_num, len(self.session.bank), options))

        while True:
            text = self.listen()
            if self.session.state is not SessionState.ACTIVE:
                return True
            if not text:
                self.say("Please enter an answer, or 'hint', 'time', 'add' or 'quit'.")
                continue

            command = self.handle_special_commands(text)
            if command == "quit":
                return False
            if command == "time":
                self.say(f"Time remaining: {format_clock(self.session.time_remaining)}")
                continue
            if command == "hint":
                self._give_hint(question)
                continue
            if command == "add":
                self.add_custom_question()
                continue

            answer = self.parse_answer(text, question, options)
            try:
                correct = self.session.submit_answer(answer)
            except InvalidStateError as e:
                logger.warning(f"Answer not accepted: {e}")
                return True
            self.say(self.feedback.generate(correct, question))
            if self.session.state is SessionState.ACTIVE and self.session.config.advance_delay:
                self.sleep_fn(self.session.config.advance_delay)
            return True

    def add_custom_question(self) -> Optional[Question]:
        """Prompt for a new question; the bank rejects malformed input."""
        prompt = self.listen("Question text: ")
        options = [self.listen(f"Answer {i}: ") for i in range(1, self.session.config.option_count + 1)]
        choice = self.listen("Number of the correct answer: ")
        # Anything but an option number is rejected by the bank as out of range
        correct_index = int(choice) - 1 if choice.isdigit() else -1
        try:
            question = self.session.add_custom_question(prompt, options, correct_index)
        except ValidationError as e:
            logger.warning(f"Custom question rejected: {e.reason}")
            self.say(f"Question not added: {e.reason}.")
            return None
        self.say("Your question has been added to the quiz!")
        return question

    def run(self, identity: str) -> SessionResult:
        """Play one full session and return its result."""
        self.session.start(identity)
        self.say(
            f"Welcome, {self.session.identity}! You have "
            f"{format_clock(self.session.duration)} to answer {len(self.session.bank)} questions."
        )

        question_num = 0
        while self.session.state is SessionState.ACTIVE:
            question = self.session.current_question
            if question is None:
                break
            question_num += 1
            if not self.run_question(question, question_num):
                self.say("Ending quiz early.")
                self.session.end()
                break

        result = self.session.result()
        self.say(self.feedback.generate_session_summary(result, self.session.config.pass_threshold))
        logger.info(f"Run complete: {result.to_dict()}")
        return result

    def _give_hint(self, question: Question):
        try:
            score = self.session.use_hint()
        except InsufficientScoreError:
            self.say("You need at least one point to use a hint.")
            return
        except InvalidStateError as e:
            logger.warning(f"Hint not available: {e}")
            return
        self.say(self.feedback.generate_hint(question, self.session.hint_penalty, score))

    def _warn_time(self, remaining: int):
        if remaining in WARN_AT_SECONDS:
            self.say(f"[{format_clock(remaining)} remaining]")


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Timed quiz in the terminal")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--bank", default=None, help="Question bank file, or 'comptia' / 'quiz-ninja'")
    parser.add_argument("--preset", choices=["comptia", "quiz-ninja"], default=None)
    parser.add_argument("--policy", choices=["random", "sequential"], default=None)
    parser.add_argument("--duration", type=int, default=None, help="Session length in seconds")
    parser.add_argument("--name", default=None, help="Player name")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for question order")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        config, bank_name = load_config(
            args.config,
            preset=args.preset,
            bank=args.bank,
            selection_policy=args.policy,
            duration_seconds=args.duration,
        )
        bank = load_bank(
            bank_name or "comptia",
            custom_retention=config.custom_retention or CustomRetention.KEEP,
            option_count=config.option_count,
            min_prompt_length=config.min_prompt_length,
            rng=random.Random(args.seed),
        )
    except (ConfigError, ValidationError, OSError) as e:
        parser.error(str(e))

    session = Session(bank, config)
    runner = QuizRunner(session, rng=random.Random(args.seed))

    name = args.name or runner.listen("Enter your name: ")
    if not name or name == "quit":
        name = "Candidate"

    while True:
        runner.run(name)
        again = runner.listen("Play again? [y/N] ").lower()
        if again not in ("y", "yes"):
            break
        session.reset()
    runner.say("Goodbye!")


if __name__ == "__main__":
    main()
