"""Tests for the SQL Server metadata provider against a fake connection."""

from __future__ import annotations

import pytest

from dbtuner.core.config import Settings
from dbtuner.core.providers import MetadataProvider, get_metadata_provider
from dbtuner.core.sqlserver_provider import SqlServerMetadataProvider
from dbtuner.report.renderers import REDACTED_BODY, REDACTED_VALUE


def _responder(available=(), objects=(), server_row=None):
    def respond(sql, params):
        if sql.startswith("SELECT COL_LENGTH"):
            view, column = params
            return None, [(1,) if f"{view}.{column}" in available else (None,)]
        if sql.startswith("SELECT OBJECT_ID"):
            return None, [(1,) if params[0] in objects else (None,)]
        if "SERVERPROPERTY" in sql:
            return None, [server_row] if server_row else []
        if sql.startswith("SET "):
            return None, []
        return [("RowNumber", None), ("value", None)], [(1, "x")]

    return respond


def _catalog_calls(conn):
    return [
        (sql, params)
        for sql, params in conn.executed
        if not sql.startswith(("SELECT COL_LENGTH", "SELECT OBJECT_ID", "SET "))
    ]


class TestProviderInterface:
    def test_metadata_provider_is_abstract(self):
        with pytest.raises(TypeError):
            MetadataProvider()  # type: ignore

    def test_provider_id(self, fake_conn):
        assert SqlServerMetadataProvider(fake_conn(_responder())).provider_id == "sqlserver"


class TestCapabilities:
    def test_probes_once_at_construction(self, fake_conn):
        conn = fake_conn(_responder(available={"sys.tables.temporal_type_desc"}))
        provider = SqlServerMetadataProvider(conn)
        assert provider.capabilities == frozenset({"sys.tables.temporal_type_desc"})
        assert len(conn.executed) == 6

    def test_tables_query_follows_capabilities(self, fake_conn):
        conn = fake_conn(_responder(available={"sys.tables.temporal_type_desc"}))
        SqlServerMetadataProvider(conn).fetch("tables")
        sql, params = _catalog_calls(conn)[0]
        assert "t.temporal_type_desc AS temporal_type_desc" in sql
        assert "CAST(NULL AS bit) AS is_memory_optimized" in sql
        assert params is None


class TestSafeMode:
    def test_definition_query_gets_redaction_params(self, fake_conn):
        conn = fake_conn(_responder())
        SqlServerMetadataProvider(conn, safe_mode=True).fetch("modules")
        _, params = _catalog_calls(conn)[0]
        assert params == {
            "safe_mode": 1,
            "redacted_body": REDACTED_BODY,
            "redacted_value": REDACTED_VALUE,
        }

    def test_safe_mode_off(self, fake_conn):
        conn = fake_conn(_responder())
        SqlServerMetadataProvider(conn, safe_mode=False).fetch("extended_properties")
        _, params = _catalog_calls(conn)[0]
        assert params["safe_mode"] == 0


class TestFetch:
    def test_fetch_returns_result_set(self, fake_conn):
        rs = SqlServerMetadataProvider(fake_conn(_responder())).fetch("schemas")
        assert rs is not None
        assert rs.column_names == ["RowNumber", "value"]

    def test_unknown_section_returns_none(self, fake_conn):
        assert SqlServerMetadataProvider(fake_conn(_responder())).fetch("nope") is None

    def test_sequences_unavailable_returns_empty_result_set(self, fake_conn):
        conn = fake_conn(_responder())
        rs = SqlServerMetadataProvider(conn).fetch("sequences")
        assert rs is not None
        assert len(rs) == 0
        assert rs.column_names[:3] == ["RowNumber", "schema_name", "sequence_name"]
        assert _catalog_calls(conn) == []

    def test_sequences_available_runs_query(self, fake_conn):
        conn = fake_conn(_responder(objects={"sys.sequences"}))
        rs = SqlServerMetadataProvider(conn).fetch("sequences")
        assert len(rs) == 1
        assert "FROM sys.sequences AS seq" in _catalog_calls(conn)[0][0]

    def test_server_info_is_cached(self, fake_conn):
        row = ("Sales", "SQL01", "15.0.2000.5", 150, "2024-05-01T10:00:00")
        conn = fake_conn(_responder(server_row=row))
        provider = SqlServerMetadataProvider(conn)
        first = provider.server_info()
        assert provider.server_info() is first
        assert sum("SERVERPROPERTY" in sql for sql, _ in conn.executed) == 1

    def test_close_closes_connection(self, fake_conn):
        conn = fake_conn(_responder())
        with SqlServerMetadataProvider(conn):
            pass
        assert conn.closed


class TestFactory:
    def test_factory_applies_session_options(self, fake_conn, monkeypatch):
        conn = fake_conn(_responder())
        monkeypatch.setattr("dbtuner.core.database.get_connection", lambda settings: conn)
        settings = Settings(_env_file=None, TARGET_DB="Sales", SAFE_MODE=False, LOCK_TIMEOUT_MS=500)
        provider = get_metadata_provider(settings)
        assert isinstance(provider, SqlServerMetadataProvider)
        assert provider.safe_mode is False
        assert ("SET LOCK_TIMEOUT 500", None) in conn.executed

    def test_factory_closes_connection_on_failure(self, fake_conn, monkeypatch):
        def respond(sql, params):
            raise RuntimeError("probe failed")

        conn = fake_conn(respond)
        monkeypatch.setattr("dbtuner.core.database.get_connection", lambda settings: conn)
        with pytest.raises(RuntimeError, match="probe failed"):
            get_metadata_provider(Settings(_env_file=None, TARGET_DB="Sales"))
        assert conn.closed
