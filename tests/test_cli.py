"""
Tests for the command line interface.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from dayfinder.cli.app import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"""
database_url: sqlite:///{tmp_path / 'dayfinder.db'}
country_code: BR
groups:
  - id: trip
    name: Beach trip
    owner: ana
    members: [bob]
""",
        encoding="utf-8",
    )
    return path


def invoke(*args: str):
    return runner.invoke(app, list(args))


def test_add_merges_and_lists(config_path):
    assert invoke("add", "ana", "trip", "2025-01-10", "2025-01-12", "-c", str(config_path)).exit_code == 0
    result = invoke("add", "ana", "trip", "2025-01-13", "2025-01-13", "-c", str(config_path))

    assert result.exit_code == 0
    assert "2025-01-10 - 2025-01-13" in result.output

    listing = invoke("list", "ana", "trip", "-c", str(config_path))
    assert listing.exit_code == 0
    assert "Total: 4 day(s)" in listing.output


def test_reversed_range_fails(config_path):
    result = invoke("add", "ana", "trip", "2025-01-12", "2025-01-10", "-c", str(config_path))

    assert result.exit_code == 1
    assert "End date must be after or equal to start date" in result.output


def test_unparseable_date_fails(config_path):
    result = invoke("add", "ana", "trip", "tomorrow", "2025-01-10", "-c", str(config_path))

    assert result.exit_code == 1
    assert "Could not parse start date" in result.output


def test_remove_then_results(config_path):
    invoke("add", "ana", "trip", "2025-03-01", "2025-03-10", "-c", str(config_path))
    invoke("add", "bob", "trip", "2025-03-05", "2025-03-05", "-c", str(config_path))
    assert invoke("remove", "ana", "trip", "2025-03-02", "2025-03-09", "-c", str(config_path)).exit_code == 0

    listing = invoke("list", "ana", "trip", "-c", str(config_path))
    assert "Total: 2 day(s)" in listing.output

    result = invoke("results", "trip", "-c", str(config_path))
    assert result.exit_code == 0
    assert "2025-03-01" in result.output
    assert "2025-03-05" in result.output


def test_unknown_group_in_results(config_path):
    result = invoke("results", "nope", "-c", str(config_path))

    assert result.exit_code == 1
    assert "Unknown group" in result.output


def test_calendar(config_path):
    invoke("add", "ana", "trip", "2025-01-10", "2025-01-12", "-c", str(config_path))

    result = invoke("calendar", "trip", "--month", "2025-01", "--viewer", "ana", "-c", str(config_path))

    assert result.exit_code == 0
    assert "January 2025" in result.output


def test_groups(config_path):
    result = invoke("groups", "-c", str(config_path))

    assert result.exit_code == 0
    assert "trip" in result.output


def test_missing_config(tmp_path):
    result = invoke("groups", "-c", str(tmp_path / "missing.yaml"))

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_version():
    result = invoke("version")

    assert result.exit_code == 0
    assert "dayfinder" in result.output
