"""Tests for the section catalog."""

from __future__ import annotations

import pytest

from dbtuner.core.catalog_queries import CATALOG_QUERIES
from dbtuner.report.sections import SCHEMA_SECTIONS, Section, get_section, select_sections


def test_section_order() -> None:
    keys = [s.key for s in SCHEMA_SECTIONS]
    assert len(keys) == 24
    assert len(set(keys)) == 24
    assert keys[:4] == ["schemas", "modules", "triggers", "tables"]
    assert keys[-1] == "extended_properties"


def test_definition_sections() -> None:
    sql_keys = {s.key for s in SCHEMA_SECTIONS if s.kind == "sql"}
    assert sql_keys == {
        "modules",
        "triggers",
        "check_constraints",
        "default_constraints",
        "computed_columns",
    }
    assert get_section("computed_columns").definition_columns.name == "name_path"


def test_every_section_has_a_catalog_query() -> None:
    assert {s.key for s in SCHEMA_SECTIONS} == set(CATALOG_QUERIES)


def test_preamble_includes_notes_and_gate() -> None:
    assert get_section("schemas").preamble == [
        "Source: sys.schemas; sys.database_principals",
        "Why: Database schemas and owners.",
    ]
    assert get_section("columns").preamble[-1].startswith("Notes: vector_*")
    assert get_section("sequences").preamble[-1].startswith("Gate: sys.sequences")


def test_get_section_unknown_key() -> None:
    with pytest.raises(KeyError, match="nope"):
        get_section("nope")


def test_select_sections_respects_export_flag() -> None:
    assert select_sections() == SCHEMA_SECTIONS
    assert select_sections(export_schema=False) == ()


def test_section_validates_kind() -> None:
    with pytest.raises(ValueError, match="Unsupported"):
        Section(key="x", title="X", source="s", why="w", kind="json")
    with pytest.raises(ValueError, match="no definition columns"):
        Section(key="x", title="X", source="s", why="w", kind="sql")
