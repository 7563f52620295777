from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Sequence
from typing import TextIO

from .models import Problem, QuizResult

logger = logging.getLogger(__name__)

_MAX_WAIT_SECONDS = 3600.0


class Countdown:
    """One-shot deadline shared by every question of a run."""

    __slots__ = ("_deadline", "_clock")

    def __init__(self, limit_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        if limit_seconds < 0:
            raise ValueError("limit_seconds must be >= 0")
        self._clock = clock
        self._deadline = clock() + limit_seconds

    def remaining(self) -> float:
        return max(0.0, self._deadline - self._clock())

    def expired(self) -> bool:
        return self.remaining() <= 0.0


def _read_answer(stream: TextIO) -> str:
    line = stream.readline()
    # readline() returns "" only at end of input
    return line.strip()


class QuizRunner:
    def __init__(
        self,
        problems: Sequence[Problem],
        *,
        stdin: TextIO,
        stdout: TextIO,
        limit_seconds: float | None = None,
        case_sensitive: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit_seconds is not None and limit_seconds < 0:
            raise ValueError("limit_seconds must be >= 0")
        self._problems = list(problems)
        self._input = stdin
        self._output = stdout
        self._limit_seconds = limit_seconds
        self._case_sensitive = case_sensitive
        self._clock = clock

    @property
    def timed(self) -> bool:
        return self._limit_seconds is not None

    def is_correct(self, answer: str, problem: Problem) -> bool:
        given = answer.strip()
        expected = problem.answer.strip()
        if self._case_sensitive:
            return given == expected
        return given.casefold() == expected.casefold()

    def run(self) -> QuizResult:
        countdown: Countdown | None = None
        if self._limit_seconds is not None:
            countdown = Countdown(self._limit_seconds, clock=self._clock)

        correct = 0
        attempted = 0
        total = len(self._problems)

        for i, problem in enumerate(self._problems):
            if countdown is not None and countdown.expired():
                return self._times_up(correct, attempted, total)

            self._output.write(f"{i + 1}> {problem.question} = ")
            self._output.flush()

            if countdown is None:
                answer = _read_answer(self._input)
            else:
                answer = self._race_answer(countdown)
                if answer is None:
                    return self._times_up(correct, attempted, total)

            attempted += 1
            if self.is_correct(answer, problem):
                correct += 1

        return QuizResult(correct=correct, attempted=attempted, total=total)

    def _race_answer(self, countdown: Countdown) -> str | None:
        channel: queue.Queue[str] = queue.Queue(maxsize=1)

        reader = threading.Thread(
            target=lambda: channel.put(_read_answer(self._input)),
            name="quiz-answer-reader",
            daemon=True,
        )
        reader.start()

        # a single blocking wait is capped, so very long limits wait in slices
        while True:
            try:
                return channel.get(timeout=min(countdown.remaining(), _MAX_WAIT_SECONDS))
            except queue.Empty:
                if countdown.expired():
                    # reader is abandoned; it may stay blocked on input until exit
                    return None

    def _times_up(self, correct: int, attempted: int, total: int) -> QuizResult:
        self._output.write("\nTime's up!\n")
        self._output.flush()
        logger.info("Time limit reached after %d of %d problems", attempted, total)
        return QuizResult(correct=correct, attempted=attempted, total=total, timed_out=True)
