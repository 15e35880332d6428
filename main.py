#!/usr/bin/env python3
"""Mythforge - recover and validate a generated mythology response.

Reads raw generative-text output, recovers a complete structured response
from it, runs the completeness, creativity and fidelity gates, and prints a
JSON report.

Usage:
    python main.py response.txt                      # unphased review
    python main.py response.txt --phase phase1       # story + entities gate
    cat response.txt | python main.py - --constraint "cosmology=a world where gods seek power"

Exit codes: 0 accepted, 1 rejected, 2 unreadable input or settings.
"""

import argparse
import dataclasses
import json
import logging
import sys
import time
from typing import Any

from mythforge.memory.myth_response import GenerationPhase
from mythforge.services import RecoveryService, ResponseValidationService
from mythforge.settings import LOG_LEVELS, Settings
from mythforge.utils.logging_config import log_context, setup_logging

logger = logging.getLogger(__name__)

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_UNREADABLE = 2

# CLI option dest -> Thresholds field
_THRESHOLD_OPTIONS = {
    "min_entities": "min_entities",
    "min_locations": "min_locations",
    "min_vocabulary": "min_vocabulary",
    "min_timeline_events": "min_timeline_events",
    "min_story_length": "min_story_length",
    "min_story_words": "min_story_word_count",
}


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def _constraint(value: str) -> tuple[str, str]:
    category, sep, text = value.partition("=")
    if not sep or not category.strip():
        raise argparse.ArgumentTypeError(f"expected CATEGORY=TEXT, got {value!r}")
    return category.strip(), text.strip()


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Mythforge - recover and validate a generated mythology response"
    )
    parser.add_argument(
        "file",
        metavar="FILE",
        help="File holding the raw generated response ('-' reads stdin)",
    )
    parser.add_argument(
        "--phase",
        choices=[phase.value for phase in GenerationPhase],
        help="Generation phase to validate (default: unphased)",
    )
    parser.add_argument(
        "--constraint",
        type=_constraint,
        action="append",
        default=[],
        metavar="CATEGORY=TEXT",
        help="User constraint the story should reflect (repeatable)",
    )
    for option in _THRESHOLD_OPTIONS:
        parser.add_argument(
            f"--{option.replace('_', '-')}",
            dest=option,
            type=_non_negative_int,
            metavar="N",
            help="Override the configured threshold",
        )
    parser.add_argument(
        "--no-response",
        action="store_true",
        help="Leave the recovered response out of the report",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        help="Logging level (default: from settings)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="none",
        help="Log file path ('default' uses logs/mythforge.log, 'none' disables)",
    )
    return parser


def read_input(path: str) -> str:
    """Read raw response text from a file or stdin.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def run(args: argparse.Namespace, settings: Settings, raw_text: str) -> tuple[int, dict[str, Any]]:
    """Recover and review one response.

    Returns:
        (exit code, JSON-serializable report)
    """
    overrides = {
        field_name: getattr(args, option)
        for option, field_name in _THRESHOLD_OPTIONS.items()
        if getattr(args, option) is not None
    }
    thresholds = dataclasses.replace(settings.thresholds(), **overrides)
    phase = GenerationPhase(args.phase) if args.phase else None
    constraints = dict(args.constraint)

    t0 = time.perf_counter()
    outcome = RecoveryService(settings).recover(raw_text, thresholds)
    # Judge what the source produced, not the defaults filled in after it
    verdict = ResponseValidationService(settings).review(
        outcome.recovered, phase=phase, constraints=constraints, thresholds=thresholds
    )
    logger.info("Reviewed response in %.3fs", time.perf_counter() - t0)

    report: dict[str, Any] = {
        "accepted": verdict.accepted,
        "phase": phase.value if phase else None,
        "recovery": {
            "strategy": outcome.strategy,
            "salvaged": outcome.salvaged,
            **dataclasses.asdict(outcome.status),
        },
        "complete": verdict.complete,
        "creative": verdict.creative,
        "fidelity": verdict.fidelity.model_dump(),
        "completeness_issues": verdict.completeness_issues,
        "creativity_issues": verdict.creativity_issues,
        "retry_hint": verdict.retry_hint,
    }
    if not args.no_response:
        report["response"] = outcome.response
    return (EXIT_ACCEPTED if verdict.accepted else EXIT_REJECTED), report


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.load()
    except ValueError as e:
        setup_logging(level=args.log_level or "INFO")
        logger.error("Invalid settings file: %s", e)
        return EXIT_UNREADABLE

    log_file = None if args.log_file.lower() == "none" else args.log_file
    setup_logging(level=args.log_level or settings.log_level, log_file=log_file)

    try:
        raw_text = read_input(args.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read response from %s: %s", args.file, e)
        return EXIT_UNREADABLE

    with log_context():
        exit_code, report = run(args, settings, raw_text)

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
