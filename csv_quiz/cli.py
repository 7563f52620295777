from __future__ import annotations

import argparse
import logging
import os
import random
import sys
from typing import NoReturn, Sequence

from .config import QuizConfig, parse_limit, read_quiz_config_from_env
from .csv_source import load_problems, shuffle_problems
from .errors import QuizError
from .models import QuizResult
from .runner import QuizRunner

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s:%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )


def _load_dotenv_if_available(env_file: str) -> None:
    try:
        from dotenv import load_dotenv
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "python-dotenv is required to load configuration from .env. Install it in the local venv."
        ) from exc

    load_dotenv(dotenv_path=env_file, override=False)


def _die(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _build_parser(defaults: QuizConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-quiz",
        description="Run a quiz from a CSV file in the format 'question,answer'.",
    )
    parser.add_argument(
        "--file",
        default=defaults.file_path,
        help="path to a CSV file in format 'question,answer' (default: %(default)s)",
    )
    parser.add_argument(
        "--limit",
        default=None,
        help="time limit for the whole quiz in seconds; enables timed mode",
    )
    parser.add_argument(
        "--case-sensitive",
        action=argparse.BooleanOptionalAction,
        default=defaults.case_sensitive,
        help="require answers to match case exactly",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help="seed for the question shuffle",
    )
    parser.add_argument(
        "--shuffle",
        action=argparse.BooleanOptionalAction,
        default=defaults.shuffle,
        help="shuffle the questions; --no-shuffle keeps file order",
    )
    return parser


def _resolve_config(argv: Sequence[str] | None) -> QuizConfig:
    env_config = read_quiz_config_from_env()
    args = _build_parser(env_config).parse_args(argv)

    limit_seconds = env_config.limit_seconds
    if args.limit is not None:
        limit_seconds = parse_limit(args.limit, name="--limit")

    return QuizConfig(
        file_path=args.file,
        limit_seconds=limit_seconds,
        case_sensitive=args.case_sensitive,
        seed=args.seed,
        shuffle=args.shuffle,
        log_level=env_config.log_level,
    )


def format_score(result: QuizResult, *, timed: bool) -> str:
    if timed:
        return (
            f"Score: {result.correct} correct out of {result.attempted} attempted "
            f"(total questions: {result.total})"
        )
    return f"Score: {result.correct} correct out of {result.total} total"


def main(argv: Sequence[str] | None = None) -> None:
    env_file = os.environ.get("ENV_FILE", ".env").strip() or ".env"
    try:
        _load_dotenv_if_available(env_file)
    except RuntimeError as e:
        _die(str(e))

    try:
        config = _resolve_config(argv)
    except ValueError as e:
        _die(str(e))

    _configure_logging(config.log_level)

    try:
        problems = load_problems(config.file_path)
    except QuizError as e:
        logger.error("%s: %s", type(e).__name__, e)
        _die(str(e))

    if config.shuffle:
        problems = shuffle_problems(problems, random.Random(config.seed))

    runner = QuizRunner(
        problems,
        stdin=sys.stdin,
        stdout=sys.stdout,
        limit_seconds=config.limit_seconds,
        case_sensitive=config.case_sensitive,
    )
    result = runner.run()

    print()
    print(format_score(result, timed=runner.timed))


if __name__ == "__main__":
    main()
