"""Unit tests for SQL Server helper utilities."""

from __future__ import annotations

import pymssql
import pytest

from dbtuner.core.config import Settings
from dbtuner.core.database import (
    PreconditionError,
    apply_session_options,
    check_prerequisites,
    column_exists,
    column_type_from_code,
    fetch_result_set,
    fetch_server_info,
    get_connection,
    normalize_target_db,
    object_exists,
    parse_product_major_version,
    probe_columns,
)
from dbtuner.core.providers import ServerInfo
from dbtuner.report.resultset import ColumnType


def _info(major: int = 15, compat: int = 150) -> ServerInfo:
    return ServerInfo(
        database_name="Sales",
        server_name="SQL01",
        product_version=f"{major}.0.1000.1",
        product_major_version=major,
        compat_level=compat,
        server_time="",
    )


def test_normalize_target_db_strips_whitespace() -> None:
    assert normalize_target_db("  Sales ") == "Sales"


@pytest.mark.parametrize("name", ["", "   ", "Sa]les", "[Sales]", "a;b", "a\nb"])
def test_normalize_target_db_rejects_invalid(name: str) -> None:
    with pytest.raises(ValueError, match="TARGET_DB"):
        normalize_target_db(name)


def test_parse_product_major_version() -> None:
    assert parse_product_major_version("15.0.2000.5") == 15
    assert parse_product_major_version("10.50.6000.34") == 10


def test_parse_product_major_version_invalid() -> None:
    with pytest.raises(ValueError, match="Unrecognized"):
        parse_product_major_version("abc")


def test_check_prerequisites_accepts_2008() -> None:
    check_prerequisites(_info(major=10, compat=100))


def test_check_prerequisites_rejects_old_server() -> None:
    with pytest.raises(PreconditionError, match="10.x"):
        check_prerequisites(_info(major=9, compat=100))


def test_check_prerequisites_rejects_low_compat_level() -> None:
    with pytest.raises(PreconditionError, match="Compatibility Level 100"):
        check_prerequisites(_info(compat=90))


def test_fetch_server_info(fake_conn) -> None:
    conn = fake_conn(lambda sql, params: (None, [("Sales", "SQL01", "16.0.1000.6", 160, "2024-05-01T10:00:00")]))
    info = fetch_server_info(conn)
    assert info.database_name == "Sales"
    assert info.product_major_version == 16
    assert info.compat_level == 160
    assert all(c.closed for c in conn.cursors)


def test_fetch_server_info_missing_row(fake_conn) -> None:
    with pytest.raises(RuntimeError, match="sys.databases"):
        fetch_server_info(fake_conn())


def test_apply_session_options(fake_conn) -> None:
    conn = fake_conn()
    apply_session_options(conn, lock_timeout_ms=15000)
    assert [sql for sql, _ in conn.executed] == [
        "SET NOCOUNT ON",
        "SET TRANSACTION ISOLATION LEVEL READ UNCOMMITTED",
        "SET LOCK_TIMEOUT 15000",
    ]


def test_apply_session_options_rejects_negative_timeout(fake_conn) -> None:
    with pytest.raises(ValueError):
        apply_session_options(fake_conn(), lock_timeout_ms=-1)


def test_column_and_object_probes(fake_conn) -> None:
    def respond(sql, params):
        if sql.startswith("SELECT COL_LENGTH"):
            return None, [(2,) if params == ("sys.tables", "temporal_type_desc") else (None,)]
        return None, [(42,) if params == ("sys.sequences",) else (None,)]

    conn = fake_conn(respond)
    assert column_exists(conn, "sys.tables", "temporal_type_desc") is True
    assert column_exists(conn, "sys.columns", "vector_dimensions") is False
    assert object_exists(conn, "sys.sequences") is True
    assert object_exists(conn, "sys.nothing") is False
    assert probe_columns(
        conn,
        {"sys.tables": ["temporal_type_desc", "is_memory_optimized"]},
    ) == frozenset({"sys.tables.temporal_type_desc"})


def test_column_type_from_code() -> None:
    assert column_type_from_code(pymssql.STRING) is ColumnType.TEXT
    assert column_type_from_code(pymssql.NUMBER) is ColumnType.NUMBER
    assert column_type_from_code(object()) is ColumnType.UNKNOWN


def test_fetch_result_set_uses_description_order(fake_conn) -> None:
    description = [("RowNumber", None), ("name", None)]
    conn = fake_conn(lambda sql, params: (description, [(1, "a"), (2, "b")]))
    rs = fetch_result_set(conn, "SELECT 1")
    assert rs.column_names == ["RowNumber", "name"]
    assert [row["name"] for row in rs.rows] == ["a", "b"]
    assert conn.executed == [("SELECT 1", None)]


def test_fetch_result_set_passes_params(fake_conn) -> None:
    conn = fake_conn(lambda sql, params: ([("v", None)], []))
    rs = fetch_result_set(conn, "SELECT %(safe_mode)s AS v", {"safe_mode": 1})
    assert len(rs) == 0
    assert conn.executed[0][1] == {"safe_mode": 1}


def test_fetch_result_set_without_columns(fake_conn) -> None:
    conn = fake_conn()
    with pytest.raises(RuntimeError, match="no result columns"):
        fetch_result_set(conn, "SET NOCOUNT ON")
    assert conn.cursors[0].closed


def test_get_connection_passes_bounded_timeouts(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def _connect(**kwargs):
        captured.update(kwargs)
        return "conn"

    monkeypatch.setattr(pymssql, "connect", _connect)
    settings = Settings(_env_file=None, TARGET_DB="Sales", DB_HOST="db.local", DB_PORT=1444)
    assert get_connection(settings) == "conn"
    assert captured["server"] == "db.local"
    assert captured["port"] == "1444"
    assert captured["database"] == "Sales"
    assert captured["login_timeout"] == 15
    assert captured["timeout"] == 60
    assert captured["user"] is None


def test_get_connection_rejects_empty_target() -> None:
    with pytest.raises(ValueError, match="TARGET_DB is empty"):
        get_connection(Settings(_env_file=None, TARGET_DB=""))
