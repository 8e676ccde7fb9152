"""Tests for dbtuner CLI parser wiring."""

from __future__ import annotations

import pytest

from dbtuner.cli.main import build_parser, cmd_config_set, cmd_config_show, cmd_schema, cmd_sections


def test_schema_defaults() -> None:
    args = build_parser().parse_args(["schema"])
    assert args.func is cmd_schema
    assert args.target_db is None
    assert args.safe_mode is None
    assert args.no_schema is False


def test_schema_flags() -> None:
    args = build_parser().parse_args(
        ["schema", "--target-db", "Sales", "--no-safe-mode", "--no-schema", "--port", "1500"]
    )
    assert args.target_db == "Sales"
    assert args.safe_mode is False
    assert args.no_schema is True
    assert args.port == 1500


def test_safe_mode_flags_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["schema", "--safe-mode", "--no-safe-mode"])


def test_sections_and_config_commands() -> None:
    parser = build_parser()
    assert parser.parse_args(["sections", "--json"]).func is cmd_sections
    assert parser.parse_args(["config", "show"]).func is cmd_config_show
    args = parser.parse_args(["config", "set", "--safe-mode", "false"])
    assert args.func is cmd_config_set
    assert args.safe_mode == "false"


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("dbtuner ")
