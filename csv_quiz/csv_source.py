from __future__ import annotations

import csv
import logging
import os
import random
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TextIO

from .errors import FileOpenError, ParseError
from .models import Problem

logger = logging.getLogger(__name__)


def _raw_lines(stream: Iterable[str], consumed: list[str]) -> Iterator[str]:
    for line in stream:
        consumed.append(line)
        yield line


def _check_bare_quotes(raw: str, line_num: int) -> None:
    # the strict reader validates quoted fields; a quote inside an unquoted
    # field is only visible in the raw text
    text = raw.rstrip("\r\n")
    n = len(text)
    i = 0
    while i <= n:
        if i < n and text[i] == '"':
            i += 1
            while i < n:
                if text[i] == '"':
                    if i + 1 < n and text[i + 1] == '"':
                        i += 2
                        continue
                    i += 1
                    break
                i += 1
        else:
            end = text.find(",", i)
            if end == -1:
                end = n
            if '"' in text[i:end]:
                raise ParseError(f'line {line_num}: bare " in non-quoted field')
            i = end
        i += 1


def read_records(stream: TextIO) -> list[list[str]]:
    """Tokenize ``stream`` into rows of comma-separated fields.

    The stream is left open. Blank lines are skipped, quoting is strict and
    every row must have as many fields as the first one.
    """
    consumed: list[str] = []
    reader = csv.reader(_raw_lines(stream, consumed), strict=True)
    rows: list[list[str]] = []
    expected: int | None = None

    try:
        for row in reader:
            raw = "".join(consumed)
            consumed.clear()
            if not row:
                continue
            _check_bare_quotes(raw, reader.line_num)
            if expected is None:
                expected = len(row)
            elif len(row) != expected:
                raise ParseError(
                    f"line {reader.line_num}: wrong number of fields (expected {expected}, got {len(row)})"
                )
            rows.append(row)
    except csv.Error as e:
        raise ParseError(f"line {reader.line_num}: {e}") from e

    return rows


def build_problems(rows: Iterable[list[str]]) -> list[Problem]:
    problems: list[Problem] = []

    for idx, row in enumerate(rows, start=1):
        if len(row) < 2:
            raise ParseError(f"row {idx}: missing answer field")
        problems.append(Problem(question=row[0], answer=row[1].strip()))

    return problems


def shuffle_problems(problems: Iterable[Problem], rng: random.Random) -> list[Problem]:
    shuffled = list(problems)
    rng.shuffle(shuffled)
    return shuffled


def load_problems(path: str) -> list[Problem]:
    file_path = Path(path)
    if not file_path.is_absolute():
        file_path = Path(os.getcwd()) / file_path

    try:
        f = file_path.open("r", encoding="utf-8", newline="")
    except OSError as e:
        raise FileOpenError(f"opening file {file_path}: {e.strerror or e}") from e

    with f:
        try:
            rows = read_records(f)
        except UnicodeDecodeError as e:
            raise ParseError(f"reading CSV {file_path}: {e}") from e

    problems = build_problems(rows)
    logger.info("Loaded %d problems from %s", len(problems), file_path)
    return problems
