from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PROBLEMS_FILE = "problems.csv"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True, slots=True)
class QuizConfig:
    file_path: str
    limit_seconds: float | None
    case_sensitive: bool
    seed: int | None
    shuffle: bool
    log_level: str


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {value!r})")


def parse_limit(value: str | float | None, *, name: str = "QUIZ_LIMIT_SECONDS") -> float | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            limit = float(value)
        except ValueError as e:
            raise ValueError(f"{name} must be a number of seconds (got {value!r})") from e
    else:
        limit = float(value)

    if limit != limit or limit < 0:
        raise ValueError(f"{name} must be >= 0")
    return limit


def read_quiz_config_from_env() -> QuizConfig:
    file_path = os.environ.get("QUIZ_FILE", DEFAULT_PROBLEMS_FILE).strip() or DEFAULT_PROBLEMS_FILE
    limit_seconds = parse_limit(os.environ.get("QUIZ_LIMIT_SECONDS"))
    case_sensitive = _parse_bool("QUIZ_CASE_SENSITIVE", os.environ.get("QUIZ_CASE_SENSITIVE", "0"))
    shuffle = _parse_bool("QUIZ_SHUFFLE", os.environ.get("QUIZ_SHUFFLE", "1"))

    seed_raw = os.environ.get("QUIZ_SEED", "").strip()
    seed: int | None = None
    if seed_raw:
        try:
            seed = int(seed_raw)
        except ValueError as e:
            raise ValueError(f"QUIZ_SEED must be an integer (got {seed_raw!r})") from e

    log_level = os.environ.get("QUIZ_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"QUIZ_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")

    return QuizConfig(
        file_path=file_path,
        limit_seconds=limit_seconds,
        case_sensitive=case_sensitive,
        seed=seed,
        shuffle=shuffle,
        log_level=log_level,
    )
