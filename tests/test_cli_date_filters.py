"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from sparkreceipt.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from sparkreceipt.utils.date_parser import get_report_period


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period="month",
        )

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "cannot be combined" in err


def test_resolve_cli_date_range_custom_needs_both_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period="custom",
        )

    assert excinfo.value.exit_code == 1
    assert "needs both" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    result = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period="quarter",
    )
    assert result == get_report_period("quarter")


def test_resolve_cli_date_range_custom_dates():
    result = resolve_cli_date_range(
        _ctx(),
        start_date="2024-01-01",
        end_date="2024-03-31",
        period="custom",
    )
    assert result == (date(2024, 1, 1), date(2024, 3, 31))


def test_resolve_cli_date_range_uses_default_period():
    result = resolve_cli_date_range(
        _ctx(),
        start_date=None,
        end_date=None,
        period=None,
        default_period="year",
    )
    assert result == get_report_period("year")


def test_resolve_cli_date_range_open_ended():
    result = resolve_cli_date_range(
        _ctx(),
        start_date="2024-02-01",
        end_date=None,
        period=None,
    )
    assert result == (date(2024, 2, 1), None)


def test_resolve_cli_date_range_rejects_reversed_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-03-01",
            end_date="2024-02-01",
            period=None,
        )

    assert excinfo.value.exit_code == 1
    assert "before start date" in capsys.readouterr().err


def test_parse_date_or_exit_invalid(capsys):
    with pytest.raises(click.exceptions.Exit):
        parse_date_or_exit(_ctx(), "someday", "start date")
    assert "Invalid start date" in capsys.readouterr().err


def test_parse_date_or_exit_empty():
    assert parse_date_or_exit(_ctx(), None) is None
    assert parse_date_or_exit(_ctx(), "") is None
