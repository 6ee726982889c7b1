"""Countdown Timer: One-second ticks on a background thread."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    """
    Counts down whole seconds and reports each tick through callbacks.

    ``on_tick(remaining)`` runs after every decrement and ``on_expire()`` runs
    once when the count reaches zero. Callbacks execute on the timer thread.
    ``stop()`` may be called from any thread, including from a callback. Once
    it returns no further tick is dispatched; a callback already running on
    the timer thread is allowed to finish.
    """

    def __init__(self, on_tick: Optional[Callable[[int], None]] = None,
                 on_expire: Optional[Callable[[], None]] = None,
                 interval: float = 1.0, name: str = "quiz-timer"):
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.interval = interval
        self.name = name
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._remaining = 0
        self._total = 0

    def start(self, seconds: int):
        """Begin counting down from ``seconds``, replacing any running countdown."""
        self.stop()
        seconds = max(0, int(seconds))
        with self._lock:
            self._remaining = seconds
            self._total = seconds
            thread = None
            if seconds > 0:
                stop_event = threading.Event()
                thread = threading.Thread(target=self._run,
                                          args=(stop_event, self.on_tick, self.on_expire),
                                          name=self.name, daemon=True)
                self._stop_event = stop_event
            self._thread = thread

        if thread is None:
            logger.info(f"Timer '{self.name}' started with no time left, expiring immediately")
            if self.on_expire:
                self.on_expire()
            return
        logger.info(f"Timer '{self.name}' started: {seconds}s")
        thread.start()

    def restart(self, seconds: int):
        self.stop()
        self.start(seconds)

    def stop(self):
        """Cancel ticking. Safe to call repeatedly or on an idle timer."""
        with self._lock:
            stop_event = self._stop_event
            self._stop_event = None
            if stop_event is None or stop_event.is_set():
                return
            stop_event.set()
        logger.info(f"Timer '{self.name}' stopped with {self._remaining}s remaining")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current countdown thread to finish. True if it has."""
        with self._lock:
            thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout)
        return not thread.is_alive()

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        with self._lock:
            return self._stop_event is not None and not self._stop_event.is_set()

    def _run(self, stop_event: threading.Event, on_tick, on_expire):
        try:
            self._countdown(stop_event, on_tick, on_expire)
        except Exception as e:
            logger.error(f"Timer '{self.name}' callback failed: {e}")
            raise
        finally:
            with self._lock:
                stop_event.set()
                if self._stop_event is stop_event:
                    self._stop_event = None

    def _countdown(self, stop_event: threading.Event, on_tick, on_expire):
        while not stop_event.wait(self.interval):
            with self._lock:
                if stop_event.is_set():
                    return
                self._remaining -= 1
                remaining = self._remaining

            if remaining % 10 == 0 or remaining <= 5:
                logger.debug(f"Timer '{self.name}': {remaining}s of {self._total}s remaining")
            if stop_event.is_set():
                return
            if on_tick:
                on_tick(remaining)

            if remaining <= 0:
                with self._lock:
                    expired = not stop_event.is_set()
                    stop_event.set()
                    if self._stop_event is stop_event:
                        self._stop_event = None
                if expired:
                    logger.info(f"Timer '{self.name}' expired after {self._total}s")
                    if on_expire:
                        on_expire()
                return
