from __future__ import annotations


class QuizError(RuntimeError):
    pass


class FileOpenError(QuizError):
    pass


class ParseError(QuizError):
    pass
