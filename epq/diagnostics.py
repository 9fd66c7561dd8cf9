"""
Diagnostic records emitted while grading.

Evaluators never call a logger directly. They attach Diagnostic values to
the Verdict they return, and validate_answer() hands every diagnostic to
an observer. The default observer forwards to a stdlib logger with
the record's data under ``extra_data`` so structured formatters can
merge it into the log line.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal

from pydantic import BaseModel, Field

DiagnosticLevel = Literal["debug", "info", "warning", "error"]

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Diagnostic(BaseModel):
    """
    One observation made by the engine.

    Attributes:
        level: Severity, mirrors stdlib logging level names
        event: Machine-readable event name (e.g. ``zone_mismatch``)
        question_type: Question type tag being graded, if any
        data: Free-form context (lengths, truncated inputs, keys)
    """

    level: DiagnosticLevel = "debug"
    event: str
    question_type: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def log_level(self) -> int:
        return _LEVELS[self.level]


DiagnosticObserver = Callable[[Diagnostic], None]


class LoggingObserver:
    """Forward diagnostics to a stdlib logger."""

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter | None = None):
        self.logger = logger or logging.getLogger("epq.answer")

    def __call__(self, diagnostic: Diagnostic) -> None:
        if not self.logger.isEnabledFor(diagnostic.log_level):
            return
        extra_data = {"event": diagnostic.event, **diagnostic.data}
        if diagnostic.question_type is not None:
            extra_data["question_type"] = diagnostic.question_type
        self.logger.log(
            diagnostic.log_level,
            diagnostic.event.replace("_", " "),
            extra={"extra_data": extra_data},
        )


class DiagnosticCollector:
    """Observer that keeps every diagnostic it sees, for tests and batch reports."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def events(self, level: DiagnosticLevel | None = None) -> list[str]:
        """Event names seen so far, optionally filtered by level."""
        return [
            d.event for d in self.diagnostics if level is None or d.level == level
        ]

    def clear(self) -> None:
        self.diagnostics.clear()
