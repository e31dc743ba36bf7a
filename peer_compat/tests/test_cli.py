"""Tests for the peer-compat command line."""

from __future__ import annotations

from typer.testing import CliRunner

from peer_compat.cli.main import app

runner = CliRunner()


def test_current_prints_wire_string():
    result = runner.invoke(app, ["current"])
    assert result.exit_code == 0
    assert result.stdout.strip().splitlines()[-1] == "1.0.0;1.2.5;2.0.0-beta"


def test_parse_lists_absent_features():
    result = runner.invoke(app, ["parse", "1.0.0;1.2.0"])
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[-3:] == ["root=1.0.0", "translations=1.2.0", "emojis=absent"]


def test_check_compatible_peer():
    result = runner.invoke(app, ["check", "1.0.0;1.2.9;2.0.0", "--feature", "translations"])
    assert result.exit_code == 0
    assert "compatible" in result.stdout
    assert "incompatible" not in result.stdout


def test_check_incompatible_peer_exits_nonzero():
    result = runner.invoke(app, ["check", "1.0.0;1.3.0", "--feature", "translations"])
    assert result.exit_code == 1
    assert "incompatible" in result.stdout


def test_check_honours_range():
    result = runner.invoke(
        app, ["check", "1.0.0;1.2.1", "--feature", "translations", "--range", "[1.2.3,2.0)"]
    )
    assert result.exit_code == 1


def test_check_rejects_unknown_feature():
    result = runner.invoke(app, ["check", "1.0.0", "--feature", "telepathy"])
    assert result.exit_code == 2


def test_check_rejects_bad_range():
    result = runner.invoke(app, ["check", "1.0.0", "--range", "1.0"])
    assert result.exit_code == 2
