"""
Correlation Calculator CLI.

Usage
-----
correlation-calculator                          # prompts for the file and both columns
correlation-calculator data.csv                 # prompts for both columns
correlation-calculator data.csv --first 1 --second Height --kendall a --places 6
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional, Sequence, Tuple

import pandas as pd

from config_utils import ValidationError, get_settings
from correlation_utils import CorrelationError, calculate_correlations, format_correlation_report
from data_utils import DataFileError, load_csv_columns, validate_csv_path
from logging_utils import setup_logging

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


# ──────────────────────────────────────────────
#  FILE SELECTION
# ──────────────────────────────────────────────

def prompt_for_file(input_fn: InputFn = input, output_fn: OutputFn = print) -> str:
    """Ask for a file path until it names an existing .csv file."""
    while True:
        output_fn("Please enter the file path of your data file. Hit ENTER to confirm.")
        path = input_fn("> ")
        try:
            validate_csv_path(path)
        except DataFileError as exc:
            output_fn(str(exc))
            continue
        return path


# ──────────────────────────────────────────────
#  COLUMN SELECTION
# ──────────────────────────────────────────────

def list_columns(headers: Sequence[str], output_fn: OutputFn = print) -> None:
    for number, header in enumerate(headers, start=1):
        output_fn(f"\t{number})\t{header}")
    output_fn("")


def choose_column_index(
    headers: Sequence[str],
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> int:
    """Read a 1-based column number until it is valid; return the 0-based index."""
    while True:
        output_fn("Please enter the corresponding number and press ENTER to select a column.")
        text = input_fn("> ").strip()
        try:
            number = int(text)
        except ValueError:
            continue
        if 1 <= number <= len(headers):
            break

    index = number - 1
    output_fn(f"Chosen field: {headers[index]}\n")
    return index


def select_columns(
    headers: Sequence[str],
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> Tuple[int, int]:
    """
    Interactively pick two distinct columns.

    Returns the 0-based indices of the first and second column.
    """
    if len(headers) < 2:
        raise DataFileError(
            "The file contains a single column. At least two columns are needed to calculate correlations."
        )

    output_fn("Please enter the corresponding number to select the first data column to calculate statistics:")
    list_columns(headers, output_fn)
    first = choose_column_index(headers, input_fn, output_fn)

    output_fn("Please enter the corresponding number to select the second data column to calculate statistics:")
    list_columns(headers, output_fn)
    second = choose_column_index(headers, input_fn, output_fn)

    while first == second:
        output_fn("Cannot select the same column twice. Please re-select the second column.")
        list_columns(headers, output_fn)
        second = choose_column_index(headers, input_fn, output_fn)

    return first, second


def resolve_column(headers: Sequence[str], token: str) -> int:
    """Map a 1-based column number or a header name to a 0-based index."""
    if token in headers:
        return list(headers).index(token)
    try:
        number = int(token)
    except ValueError:
        raise ValueError(f"Unknown column: {token!r}") from None
    if not 1 <= number <= len(headers):
        raise ValueError(f"Column number {number} is out of range (1-{len(headers)})")
    return number - 1


# ──────────────────────────────────────────────
#  ENTRY POINT
# ──────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="correlation-calculator",
        description="Pearson, Spearman and Kendall correlation between two CSV columns.",
    )
    parser.add_argument("path", nargs="?", help="CSV file (prompted for when omitted)")
    parser.add_argument("--first", help="First column: 1-based number or header name")
    parser.add_argument("--second", help="Second column: 1-based number or header name")
    parser.add_argument("--kendall", choices=["a", "b"], default=None, help="Kendall's tau variant")
    parser.add_argument("--places", type=int, default=None, help="Decimal places in the report")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON logs")
    return parser


def _pick_columns(
    data: pd.DataFrame,
    args: argparse.Namespace,
    input_fn: InputFn,
    output_fn: OutputFn,
) -> Tuple[int, int]:
    headers: List[str] = [str(col) for col in data.columns]
    if args.first is None or args.second is None:
        return select_columns(headers, input_fn, output_fn)

    first = resolve_column(headers, args.first)
    second = resolve_column(headers, args.second)
    if first == second:
        raise ValueError("Cannot select the same column twice.")
    return first, second


def run(
    args: argparse.Namespace,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> int:
    """Load the file, select two columns and print the report. Returns the exit status."""
    settings = get_settings()
    places = args.places if args.places is not None else settings.report.decimal_places

    try:
        path = args.path or prompt_for_file(input_fn, output_fn)
        data = load_csv_columns(path)
        first, second = _pick_columns(data, args, input_fn, output_fn)
    except DataFileError as exc:
        logger.error("Could not load data: %s", exc)
        output_fn(f"Error: {exc}")
        return 1
    except ValueError as exc:
        output_fn(f"Error: {exc}")
        return 2
    except EOFError:
        output_fn("Error: input ended before a selection was made.")
        return 1

    label_x = str(data.columns[first])
    label_y = str(data.columns[second])

    try:
        result = calculate_correlations(
            label_x,
            data.iloc[:, first].tolist(),
            label_y,
            data.iloc[:, second].tolist(),
            kendall_variant=args.kendall,
        )
    except CorrelationError as exc:
        logger.error("Correlation failed for %s and %s: %s", label_x, label_y, exc)
        output_fn(f"Error: {exc}")
        return 1

    output_fn(format_correlation_report(result, places) + "\n")
    return 0


def _describe_validation_error(exc: ValidationError) -> str:
    """Failing settings on one line, e.g. `engine.decimal_precision: <reason>`."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.places is not None and args.places < 0:
        parser.error("--places must be zero or positive")

    try:
        get_settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration: {_describe_validation_error(exc)}")
        return 2

    setup_logging(level=args.log_level, json_logs=args.json_logs)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
