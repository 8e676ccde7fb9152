"""SQL Server connection and catalog data-access helpers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

import pymssql

from dbtuner.core.config import Settings, get_settings
from dbtuner.core.providers import ServerInfo
from dbtuner.report.resultset import Column, ColumnType, ResultSet

logger = logging.getLogger(__name__)

MIN_PRODUCT_MAJOR_VERSION = 10
MIN_COMPAT_LEVEL = 100
INVALID_TARGET_CHARS = re.compile(r"[\[\];\x00-\x1f]")

_TYPE_CODES: tuple[tuple[Any, ColumnType], ...] = (
    (pymssql.STRING, ColumnType.TEXT),
    (pymssql.NUMBER, ColumnType.NUMBER),
    (pymssql.DECIMAL, ColumnType.NUMBER),
    (pymssql.DATETIME, ColumnType.DATE),
    (pymssql.BINARY, ColumnType.BINARY),
)


class PreconditionError(RuntimeError):
    """The target server or database is too old to be profiled."""


# ---------------------------------------------------------------------------
# Connection helpers
# ---------------------------------------------------------------------------


def normalize_target_db(name: str) -> str:
    """Validate the target database name."""
    normalized = (name or "").strip()
    if not normalized:
        raise ValueError("TARGET_DB is empty. Set it to the database to profile.")
    if INVALID_TARGET_CHARS.search(normalized):
        raise ValueError(
            f"TARGET_DB is invalid (received {normalized!r}). "
            "Use the plain database name without brackets or separators."
        )
    return normalized


def get_connection(settings: Settings | None = None) -> Any:
    """Open a read-only profiling connection to the target database."""
    s = settings or get_settings()
    database = normalize_target_db(s.target_db)
    logger.info(
        "connecting to target",
        extra={"extra_fields": {"host": s.db_host, "port": s.db_port, "database": database}},
    )
    return pymssql.connect(
        server=s.db_host,
        port=str(s.db_port),
        user=s.db_user or None,
        password=s.db_password or None,
        database=database,
        login_timeout=s.login_timeout_seconds,
        timeout=s.query_timeout_seconds,
        appname="dbtuner",
        autocommit=True,
    )


def apply_session_options(conn: Any, *, lock_timeout_ms: int) -> None:
    """Make the session read-only friendly: dirty reads and a bounded lock wait."""
    if int(lock_timeout_ms) < 0:
        raise ValueError("lock_timeout_ms must be zero or a positive integer")
    cursor = conn.cursor()
    try:
        cursor.execute("SET NOCOUNT ON")
        cursor.execute("SET TRANSACTION ISOLATION LEVEL READ UNCOMMITTED")
        cursor.execute(f"SET LOCK_TIMEOUT {int(lock_timeout_ms)}")
    finally:
        cursor.close()


# ---------------------------------------------------------------------------
# Server identity and prerequisites
# ---------------------------------------------------------------------------


def parse_product_major_version(product_version: str) -> int:
    """Parse the major version from strings like '15.0.2000.5'."""
    head = (product_version or "").strip().split(".", 1)[0]
    if not head.isdigit():
        raise ValueError(f"Unrecognized product version: {product_version!r}")
    return int(head)


def fetch_server_info(conn: Any) -> ServerInfo:
    """Read database name, server name, version and compatibility level."""
    cursor = conn.cursor()
    try:
        cursor.execute(
            """
            SELECT
                DB_NAME() AS database_name,
                CONVERT(nvarchar(128), SERVERPROPERTY('ServerName')) AS server_name,
                CONVERT(varchar(30), SERVERPROPERTY('ProductVersion')) AS product_version,
                d.compatibility_level AS compat_level,
                CONVERT(nvarchar(30), SYSDATETIME(), 126) AS server_time
            FROM sys.databases AS d
            WHERE d.name = DB_NAME()
            """
        )
        row = cursor.fetchone()
    finally:
        cursor.close()
    if not row:
        raise RuntimeError("Target database is not visible in sys.databases")

    database_name, server_name, product_version, compat_level, server_time = row
    return ServerInfo(
        database_name=str(database_name),
        server_name=str(server_name or ""),
        product_version=str(product_version),
        product_major_version=parse_product_major_version(str(product_version)),
        compat_level=int(compat_level),
        server_time=str(server_time or ""),
    )


def check_prerequisites(info: ServerInfo) -> None:
    """Raise PreconditionError when the server or database is unsupported."""
    if info.product_major_version < MIN_PRODUCT_MAJOR_VERSION:
        raise PreconditionError(
            "Database Tuner Schema requires SQL Server 2008 / 2008 R2 (10.x) minimum "
            f"(found {info.product_version})."
        )
    if info.compat_level < MIN_COMPAT_LEVEL:
        raise PreconditionError(
            "Database Tuner Schema requires Database Compatibility Level 100 or higher "
            f"(found {info.compat_level})."
        )


# ---------------------------------------------------------------------------
# Capability probes
# ---------------------------------------------------------------------------


def column_exists(conn: Any, view: str, column: str) -> bool:
    """True when ``view.column`` exists on this server (``COL_LENGTH`` probe)."""
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT COL_LENGTH(%s, %s)", (view, column))
        row = cursor.fetchone()
    finally:
        cursor.close()
    return bool(row) and row[0] is not None


def object_exists(conn: Any, name: str) -> bool:
    """True when ``OBJECT_ID(name)`` resolves (catalog view or user object)."""
    cursor = conn.cursor()
    try:
        cursor.execute("SELECT OBJECT_ID(%s)", (name,))
        row = cursor.fetchone()
    finally:
        cursor.close()
    return bool(row) and row[0] is not None


def probe_columns(conn: Any, wanted: Mapping[str, Iterable[str]]) -> frozenset[str]:
    """Return the ``view.column`` names from ``wanted`` that exist."""
    found: set[str] = set()
    for view, columns in wanted.items():
        for column in columns:
            if column_exists(conn, view, column):
                found.add(f"{view}.{column}")
    logger.debug(
        "capability probe complete",
        extra={"extra_fields": {"available": sorted(found)}},
    )
    return frozenset(found)


# ---------------------------------------------------------------------------
# Result materialization
# ---------------------------------------------------------------------------


def column_type_from_code(type_code: Any) -> ColumnType:
    """Map a DB-API ``cursor.description`` type code to a ColumnType."""
    for dbapi_type, column_type in _TYPE_CODES:
        if dbapi_type == type_code:
            return column_type
    return ColumnType.UNKNOWN


def fetch_result_set(
    conn: Any,
    query: str,
    params: Mapping[str, Any] | None = None,
) -> ResultSet:
    """Execute a catalog query and materialize it with its declared column order."""
    cursor = conn.cursor()
    try:
        if params:
            cursor.execute(query, dict(params))
        else:
            cursor.execute(query)
        description = cursor.description or ()
        records = cursor.fetchall()
    finally:
        cursor.close()

    if not description:
        raise RuntimeError("Catalog query returned no result columns")
    columns = [Column(d[0], column_type_from_code(d[1])) for d in description]
    return ResultSet.from_records(columns, records)
