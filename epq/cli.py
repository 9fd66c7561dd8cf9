"""Command line interface for epq-check."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from pydantic import ValidationError

from .answer import DiagnosticCollector, QuestionType, ValidationOptions, check_answer
from .blanks import normalize_question_blanks, validate_blank_configuration


def _read_text(value: str) -> str:
    """Read TEXT arguments, with ``-`` meaning standard input."""
    if value == "-":
        return sys.stdin.read()
    return value


def _load_json(value: str, what: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"--{what} is not valid JSON: {exc}") from exc


def _emit(payload: dict[str, Any], quiet: bool) -> None:
    if not quiet:
        print(json.dumps(payload, indent=2, ensure_ascii=False))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epq-check",
        description="Normalize question blanks and check answers from the command line.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress output; only the exit status reports the result.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    normalize = commands.add_parser(
        "normalize",
        help="Rewrite blank notations in question text to ___.",
    )
    normalize.add_argument("text", help="Question text, or - to read standard input.")

    lint = commands.add_parser(
        "lint",
        help="Check that configured blanks match the blanks in question text.",
    )
    lint.add_argument("text", help="Question text, or - to read standard input.")
    lint.add_argument(
        "--blanks",
        required=True,
        help='JSON array of blank configurations, e.g. \'[{"blank_id": 1}]\'.',
    )

    validate = commands.add_parser(
        "validate",
        help="Check one answer against a correct answer.",
    )
    validate.add_argument("answer", help="The submitted answer.")
    validate.add_argument(
        "--type",
        dest="question_type",
        required=True,
        help=f"Question type ({', '.join(t.value for t in QuestionType)}).",
    )
    validate.add_argument("--correct", required=True, help="The stored correct answer.")
    validate.add_argument(
        "--options",
        default=None,
        help="JSON object of question options (caseSensitive, acceptableAnswers, blanks, dropZones).",
    )
    validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Include grading diagnostics in the output.",
    )
    return parser


def _run_normalize(args: argparse.Namespace) -> int:
    result = normalize_question_blanks(_read_text(args.text))
    _emit(result.model_dump(mode="json"), args.quiet)
    return 0


def _run_lint(args: argparse.Namespace) -> int:
    blanks = _load_json(args.blanks, "blanks")
    if not isinstance(blanks, list):
        raise ValueError("--blanks must be a JSON array")
    report = validate_blank_configuration(_read_text(args.text), blanks)
    _emit(report.model_dump(), args.quiet)
    return 0 if report.is_valid else 1


def _run_validate(args: argparse.Namespace) -> int:
    options = None
    if args.options is not None:
        options = _load_json(args.options, "options")
        try:
            ValidationOptions.coerce(options)
        except ValidationError as exc:
            raise ValueError(f"--options has the wrong shape: {exc.error_count()} error(s)") from exc

    collector = DiagnosticCollector()
    verdict = check_answer(
        args.answer,
        args.correct,
        args.question_type,
        options,
        observer=collector,
    )
    payload: dict[str, Any] = {
        "correct": verdict.correct,
        "question_type": verdict.question_type,
        "reason": verdict.reason,
    }
    if args.verbose:
        payload["diagnostics"] = [d.model_dump() for d in collector.diagnostics]
    _emit(payload, args.quiet)
    return 0 if verdict.correct else 1


_COMMANDS = {
    "normalize": _run_normalize,
    "lint": _run_lint,
    "validate": _run_validate,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        return _COMMANDS[args.command](args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
