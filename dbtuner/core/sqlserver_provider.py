"""Catalog metadata provider for SQL Server (pymssql)."""

from __future__ import annotations

import logging
from typing import Any

from dbtuner.core.catalog_queries import CATALOG_QUERIES, CatalogQuery, optional_column_probes
from dbtuner.core.database import fetch_result_set, fetch_server_info, object_exists, probe_columns
from dbtuner.core.providers import MetadataProvider, ServerInfo
from dbtuner.report.renderers import REDACTED_BODY, REDACTED_VALUE
from dbtuner.report.resultset import ResultSet

logger = logging.getLogger(__name__)


class SqlServerMetadataProvider(MetadataProvider):
    """Runs one read-only catalog query per report section.

    Optional columns are probed once at construction. With ``safe_mode`` on,
    definition bodies and extended property values are replaced by markers
    inside the query, so the stored text never leaves the server.
    """

    PROVIDER = "sqlserver"

    def __init__(
        self,
        conn: Any,
        *,
        safe_mode: bool = True,
        queries: dict[str, CatalogQuery] | None = None,
    ):
        self.conn = conn
        self.safe_mode = bool(safe_mode)
        self.queries = queries if queries is not None else CATALOG_QUERIES
        self.capabilities = probe_columns(conn, optional_column_probes())
        self._info: ServerInfo | None = None

    def server_info(self) -> ServerInfo:
        if self._info is None:
            self._info = fetch_server_info(self.conn)
        return self._info

    def query_params(self) -> dict[str, Any]:
        return {
            "safe_mode": 1 if self.safe_mode else 0,
            "redacted_body": REDACTED_BODY,
            "redacted_value": REDACTED_VALUE,
        }

    def fetch(self, section_key: str) -> ResultSet | None:
        query = self.queries.get(section_key)
        if query is None:
            logger.info(
                "no catalog query for section",
                extra={"extra_fields": {"section": section_key}},
            )
            return None

        if query.requires_object and not object_exists(self.conn, query.requires_object):
            logger.info(
                "catalog view unavailable",
                extra={"extra_fields": {"section": section_key, "object": query.requires_object}},
            )
            if not query.columns_when_unavailable:
                return None
            return ResultSet.from_records(query.columns_when_unavailable, [])

        params = self.query_params() if query.uses_safe_mode else None
        return fetch_result_set(self.conn, query.render(self.capabilities), params)

    def close(self) -> None:
        self.conn.close()
