"""Tests for the interactive and scripted command line."""

from __future__ import annotations

import logging

import pytest

from correlation_cli import build_parser, main, resolve_column, run, select_columns

DATA = "Height,Weight,Age\n1.5,55,30\n1.7,70,41\n1.6,62,25\n1.9,90,52\n"


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)


class FakeConsole:
    """Feeds scripted answers to the prompts and records everything printed."""

    def __init__(self, answers):
        self._answers = list(answers)
        self.lines: list[str] = []

    def input(self, prompt: str = "") -> str:
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)

    def output(self, text: str = "") -> None:
        self.lines.extend(str(text).splitlines() or [""])

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def _run(argv, answers=()):
    console = FakeConsole(answers)
    status = run(build_parser().parse_args(argv), console.input, console.output)
    return status, console


def test_main_with_named_columns(write_csv, capsys) -> None:
    path = write_csv(DATA)

    status = main([str(path), "--first", "Height", "--second", "3", "--places", "4"])

    out = capsys.readouterr().out
    assert status == 0
    assert "Calculating statistics for Height and Age" in out
    assert "The Pearson Coefficient is: " in out
    assert "The Kendall (tau-b) Coefficient is: 0.6667" in out


def test_main_with_tau_a(write_csv, capsys) -> None:
    path = write_csv(DATA)

    status = main([str(path), "--first", "1", "--second", "2", "--kendall", "a"])

    assert status == 0
    assert "The Kendall (tau-a) Coefficient is: 1.00000000" in capsys.readouterr().out


def test_interactive_session(write_csv) -> None:
    path = write_csv(DATA)

    status, console = _run([], ["missing.csv", str(path), "x", "1", "1", "2"])

    assert status == 0
    assert "There is no file at the specified path. Please try again." in console.lines
    assert "\t1)\tHeight" in console.lines
    assert "\t3)\tAge" in console.lines
    assert "Chosen field: Height" in console.lines
    assert "Cannot select the same column twice. Please re-select the second column." in console.lines
    assert "Chosen field: Weight" in console.lines
    assert "Calculating statistics for Height and Weight" in console.lines


def test_out_of_range_selection_is_asked_again(write_csv) -> None:
    path = write_csv(DATA)

    status, console = _run([str(path)], ["0", "4", "3", "1"])

    assert status == 0
    assert "Calculating statistics for Age and Height" in console.lines


def test_select_columns_returns_indices() -> None:
    console = FakeConsole(["2", "1"])
    assert select_columns(["A", "B"], console.input, console.output) == (1, 0)


def test_single_column_file(write_csv) -> None:
    path = write_csv("Only\n1\n2\n3\n")

    status, console = _run([str(path)])

    assert status == 1
    assert "At least two columns are needed" in console.text


def test_malformed_file(write_csv) -> None:
    path = write_csv("A,B\n1,2\n3,oops\n")

    status, console = _run([str(path), "--first", "1", "--second", "2"])

    assert status == 1
    assert "Cannot parse 'oops'" in console.text


def test_constant_column(write_csv) -> None:
    path = write_csv("A,B\n1,5\n2,5\n3,5\n")

    status, console = _run([str(path), "--first", "A", "--second", "B"])

    assert status == 1
    assert "'B' has zero variance" in console.text


def test_unknown_column_name(write_csv) -> None:
    path = write_csv(DATA)

    status, console = _run([str(path), "--first", "Height", "--second", "Shoe"])

    assert status == 2
    assert "Unknown column" in console.text


def test_same_column_twice_from_options(write_csv) -> None:
    path = write_csv(DATA)

    status, _ = _run([str(path), "--first", "1", "--second", "Height"])

    assert status == 2


def test_input_ends_early(write_csv) -> None:
    path = write_csv(DATA)

    status, console = _run([str(path)], ["1"])

    assert status == 1
    assert "input ended" in console.text


def test_negative_places_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["data.csv", "--places", "-1"])
    assert excinfo.value.code == 2


def test_resolve_column() -> None:
    headers = ["A", "B", "C"]
    assert resolve_column(headers, "B") == 1
    assert resolve_column(headers, "3") == 2
    with pytest.raises(ValueError, match="out of range"):
        resolve_column(headers, "4")
    with pytest.raises(ValueError, match="Unknown column"):
        resolve_column(headers, "D")


def test_invalid_setting_is_reported_without_traceback(write_csv, capsys, monkeypatch) -> None:
    path = write_csv(DATA)
    monkeypatch.setenv("ENGINE__DECIMAL_PRECISION", "abc")

    status = main([str(path), "--first", "1", "--second", "2"])

    out = capsys.readouterr().out
    assert status == 2
    assert out.startswith("Error: invalid configuration: engine.decimal_precision")
    assert len(out.strip().splitlines()) == 1
