from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Problem:
    question: str
    answer: str


@dataclass(frozen=True, slots=True)
class QuizResult:
    correct: int
    attempted: int
    total: int
    timed_out: bool = False
