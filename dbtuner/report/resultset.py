"""In-memory tabular results handed from the metadata provider to the renderers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

ROW_NUMBER_COLUMN = "RowNumber"


class ColumnType(str, Enum):
    """Declared semantic type of a result column. Every type is null-capable."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    BINARY = "binary"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType = ColumnType.TEXT


@dataclass(frozen=True)
class ResultSet:
    """Ordered columns plus ordered rows; column order drives CSV field order."""

    columns: tuple[Column, ...]
    rows: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("ResultSet requires at least one column")
        names = [c.name for c in self.columns]
        if len(set(names)) != len(names):
            raise ValueError(f"ResultSet has duplicate column names: {names}")

    @classmethod
    def from_records(
        cls,
        columns: Sequence[Column | str],
        records: Iterable[Sequence[Any]],
    ) -> ResultSet:
        """Build a ResultSet from positional records aligned with ``columns``."""
        cols = tuple(c if isinstance(c, Column) else Column(c) for c in columns)
        names = [c.name for c in cols]
        rows: list[dict[str, Any]] = []
        for idx, record in enumerate(records, start=1):
            values = list(record)
            if len(values) != len(names):
                raise ValueError(
                    f"Row {idx} has {len(values)} values, expected {len(names)}"
                )
            rows.append(dict(zip(names, values)))
        return cls(columns=cols, rows=tuple(rows))

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def has_column(self, name: str) -> bool:
        return any(c.name == name for c in self.columns)

    def __len__(self) -> int:
        return len(self.rows)

    def ordered_rows(self) -> list[Mapping[str, Any]]:
        """Rows in ascending RowNumber order when that column exists, else as provided.

        The sort is stable and puts null RowNumbers last.
        """
        if not self.has_column(ROW_NUMBER_COLUMN):
            return list(self.rows)
        return sorted(
            self.rows,
            key=lambda row: (row.get(ROW_NUMBER_COLUMN) is None, row.get(ROW_NUMBER_COLUMN) or 0),
        )


def format_scalar(value: Any) -> str:
    """Convert a scalar catalog value to report text. ``None`` becomes ``""``.

    Booleans render as ``1``/``0`` and binary values as ``0x``-prefixed hex,
    matching how SQL Server converts ``bit`` and ``varbinary`` to text.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex().upper()
    return str(value)
