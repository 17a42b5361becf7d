"""Command line entry point: build a coverage report and check a threshold."""

from __future__ import annotations

import argparse
import os
from typing import Sequence

from goverage.profile import process_profile
from goverage.report.strategy import ReportError

_FILE_DELIMITER = "_GitHubActionsFileCommandDelimeter_"
_RED = "\x1b[31m"
_RESET = "\x1b[0m"


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def set_output(name: str, value: str) -> None:
    """Publish a step output for a CI workflow.

    Appends to the file named by GITHUB_OUTPUT when it is set, otherwise
    prints a workflow command.
    """
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if output_file:
        with open(output_file, "a", encoding="utf-8") as handle:
            handle.write(f"{name}<<{_FILE_DELIMITER}\n{value}\n{_FILE_DELIMITER}\n")
        return
    print(f"::set-output name={_escape_property(name)}::{_escape_data(value)}")


def warning(message: str) -> None:
    """Print a workflow warning command."""
    print(f"::warning::{_escape_data(message)}")


def _uint16(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid uint16 value: {text!r}") from None
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"value out of range: {text!r}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goverage",
        description="A fantastic tool for report profiling Go test coverage",
    )
    parser.add_argument("-p", "--profile", default="", help="coverage profile file")
    parser.add_argument("-o", "--output", default="", help="coverage output directory")
    parser.add_argument(
        "-s", "--strategy", default="html", help="coverage report strategy (html or stdout)"
    )
    parser.add_argument("--threshold", type=_uint16, default=0, help="coverage threshold")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command with ``argv`` (default: the process arguments)."""
    args = _parser().parse_args(argv)
    try:
        coverage_percent = process_profile(args.profile, args.output)
    except (ReportError, OSError) as exc:
        print(f"Error processing profile: {exc}")
        return 0

    below = coverage_percent < args.threshold
    message = (
        f"Coverage percentage {coverage_percent:.2f} is below the threshold of {args.threshold}%"
    )
    try:
        set_output("percent", f"{coverage_percent:.2f}")
        if below:
            warning(message)
    except OSError:
        if below:
            print(f"{_RED}{message}{_RESET}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())