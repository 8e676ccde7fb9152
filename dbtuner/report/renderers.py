"""Fenced CSV and SQL-definition rendering of result sets."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from dbtuner.report.emitter import TextEmitter
from dbtuner.report.resultset import ResultSet, format_scalar

logger = logging.getLogger(__name__)

NO_RESULTS_NOTICE = "> No results available for this section."
NO_ROWS_NOTICE = "> No rows."
MISSING_BODY_NOTICE = "> Definitions: body column [{%1}] not found in {%2}."
REDACTED_BODY = "-- [Redacted]"
REDACTED_VALUE = "[Redacted]"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def encode_csv_field(value: Any) -> str:
    """Always-quoted CSV field: quotes doubled, CR/LF removed, None -> ``""``."""
    text = format_scalar(value)
    text = text.replace('"', '""').replace("\r", "").replace("\n", "")
    return f'"{text}"'


def encode_csv_row(values: Sequence[Any]) -> str:
    return ",".join(encode_csv_field(v) for v in values)


def render_csv(emitter: TextEmitter, result_set: ResultSet | None) -> None:
    """Emit a result set as a fenced ``csv`` block, or a notice if it does not exist."""
    if result_set is None:
        emitter.emit(NO_RESULTS_NOTICE)
        emitter.blank()
        return

    names = result_set.column_names
    emitter.fence("csv")
    emitter.emit(encode_csv_row(names))
    for row in result_set.ordered_rows():
        emitter.emit(encode_csv_row([row.get(name) for name in names]))
    emitter.fence()


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DefinitionColumns:
    """Which result columns hold the body and the optional title parts."""

    body: str
    type: str | None = None
    schema: str | None = None
    name: str | None = None


def compose_title(type_label: Any, schema: Any, name: Any) -> str:
    """Build ``<type> [schema].[name]`` from whichever parts are present."""
    prefix = f"{format_scalar(type_label)} " if type_label is not None else ""
    if schema is not None and name is not None:
        target = f"[{format_scalar(schema)}].[{format_scalar(name)}]"
    elif name is not None:
        target = f"[{format_scalar(name)}]"
    else:
        target = format_scalar(schema)
    return prefix + target


def prepare_body(body: Any, *, redact: bool) -> str:
    """Apply the empty-body redaction marker and strip trailing CR/LF."""
    text = None if body is None else format_scalar(body)
    if redact and not text:
        text = REDACTED_BODY
    return (text or "").rstrip("\r\n")


def _field(row: Mapping[str, Any], result_set: ResultSet, column: str | None) -> Any:
    if column is None or not result_set.has_column(column):
        return None
    return row.get(column)


def render_definitions(
    emitter: TextEmitter,
    result_set: ResultSet | None,
    columns: DefinitionColumns,
    *,
    redact: bool,
    source_name: str = "",
) -> None:
    """Emit one fenced ``sql`` block per row, each with an optional ``###`` title.

    A missing result set emits nothing. ``redact`` only guarantees a marker in
    place of an empty body; non-empty bodies must be redacted by the provider.
    """
    if result_set is None:
        logger.info(
            "definition result set missing",
            extra={"extra_fields": {"source": source_name}},
        )
        return

    if not result_set.has_column(columns.body):
        logger.warning(
            "definition body column missing",
            extra={"extra_fields": {"source": source_name, "column": columns.body}},
        )
        emitter.emit(MISSING_BODY_NOTICE, columns.body, source_name)
        emitter.blank()
        return

    rows = result_set.ordered_rows()
    if not rows:
        emitter.emit(NO_ROWS_NOTICE)
        emitter.blank()
        return

    for row in rows:
        type_label = _field(row, result_set, columns.type)
        schema = _field(row, result_set, columns.schema)
        name = _field(row, result_set, columns.name)
        if type_label is not None or schema is not None or name is not None:
            title = compose_title(type_label, schema, name)
            if title.strip():
                emitter.emit("### {%1}", title)

        emitter.fence("sql")
        emitter.emit(prepare_body(row.get(columns.body), redact=redact))
        emitter.fence()
        emitter.blank()
