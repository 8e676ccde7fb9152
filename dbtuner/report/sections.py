"""Ordered catalog of report sections and their provenance notes."""

from __future__ import annotations

from dataclasses import dataclass

from dbtuner.report.renderers import DefinitionColumns

REPORT_VERSION = "0.01"
REPORT_TITLE = "Database Tuner Schema Report"

_OBJECT_DEFINITION = DefinitionColumns(
    body="definition",
    type="object_type",
    schema="schema_name",
    name="object_name",
)


@dataclass(frozen=True)
class Section:
    """One labeled unit of the report."""

    key: str
    title: str
    source: str
    why: str
    kind: str = "csv"  # csv | sql
    notes: str | None = None
    gate: str | None = None
    definition_columns: DefinitionColumns | None = None

    def __post_init__(self) -> None:
        if self.kind not in {"csv", "sql"}:
            raise ValueError(f"Unsupported section kind '{self.kind}'")
        if self.kind == "sql" and self.definition_columns is None:
            raise ValueError(f"Section '{self.key}' renders definitions but has no definition columns")

    @property
    def preamble(self) -> list[str]:
        """Metadata lines shown in the section's ``text`` block."""
        lines = [f"Source: {self.source}", f"Why: {self.why}"]
        if self.notes:
            lines.append(f"Notes: {self.notes}")
        if self.gate:
            lines.append(f"Gate: {self.gate}")
        return lines


SCHEMA_SECTIONS: tuple[Section, ...] = (
    Section(
        key="schemas",
        title="Schemas",
        source="sys.schemas; sys.database_principals",
        why="Database schemas and owners.",
    ),
    Section(
        key="modules",
        title="Programmability - Module definitions",
        source="sys.objects (P, V, FN, TF, IF); sys.sql_modules; sys.schemas",
        why="Source code of stored procedures, views, and user-defined functions.",
        kind="sql",
        definition_columns=_OBJECT_DEFINITION,
    ),
    Section(
        key="triggers",
        title="Triggers - Definitions",
        source="sys.triggers; sys.sql_modules; sys.objects; sys.schemas",
        why="Definition of DML triggers (on tables) and DDL triggers (on database).",
        kind="sql",
        definition_columns=_OBJECT_DEFINITION,
    ),
    Section(
        key="tables",
        title="Tables",
        source="sys.tables; sys.schemas",
        why="All user tables with temporal and memory-optimized flags.",
    ),
    Section(
        key="columns",
        title="Columns",
        source="sys.columns; sys.tables; sys.computed_columns; sys.schemas",
        why="Columns of user tables with data types and properties (nullability, identity, computed).",
        notes="vector_* columns populate on SQL Server 2025+; NULL on earlier versions.",
    ),
    Section(
        key="types",
        title="Types (User-Defined)",
        source="sys.types; sys.schemas; sys.assemblies",
        why="User-defined types with base system type and CLR/TVP flags.",
    ),
    Section(
        key="table_types",
        title="Table Types",
        source="sys.table_types; sys.schemas",
        why="Table-valued parameter types and their properties (memory-optimized).",
    ),
    Section(
        key="table_type_columns",
        title="Table Type Columns",
        source="sys.table_types; sys.columns; sys.computed_columns; sys.schemas",
        why="Columns of user-defined table types (TVPs) with data types and properties.",
    ),
    Section(
        key="constraints",
        title="Constraints - Inventory",
        source="sys.objects (constraints by type PK, UQ, F, C, D); sys.schemas",
        why="Inventory of primary key, unique, foreign key, check, and default constraints on tables.",
    ),
    Section(
        key="check_constraints",
        title="Constraint definitions - CHECK",
        source="sys.check_constraints",
        why="Definition of CHECK constraint expressions.",
        kind="sql",
        definition_columns=_OBJECT_DEFINITION,
    ),
    Section(
        key="default_constraints",
        title="Constraint definitions - DEFAULT",
        source="sys.default_constraints",
        why="Definition of DEFAULT constraint expressions.",
        kind="sql",
        definition_columns=_OBJECT_DEFINITION,
    ),
    Section(
        key="computed_columns",
        title="Computed columns - Expressions",
        source="sys.computed_columns; sys.columns; sys.tables; sys.schemas",
        why="Definitions of computed column expressions.",
        kind="sql",
        definition_columns=DefinitionColumns(
            body="definition",
            type="object_type",
            schema="schema_name",
            name="name_path",
        ),
    ),
    Section(
        key="indexes",
        title="Indexes",
        source="sys.indexes; sys.tables; sys.schemas",
        why="Indexes on user tables with type, uniqueness, and filter (if any).",
    ),
    Section(
        key="index_columns",
        title="Index Columns",
        source="sys.index_columns; sys.columns; sys.indexes; sys.tables; sys.schemas",
        why="Index key columns and included columns with order and sort direction.",
    ),
    Section(
        key="foreign_keys",
        title="Foreign Keys",
        source="sys.foreign_keys; sys.foreign_key_columns; sys.tables; sys.columns; sys.schemas",
        why="Foreign key constraints with referencing and referenced columns and actions.",
    ),
    Section(
        key="sequences",
        title="Sequences",
        source="sys.sequences; sys.schemas",
        why="User-defined sequences and their parameters (data type, start, increment, min/max, cycle, cache).",
        gate="sys.sequences must exist (SQL Server 2012+); empty otherwise.",
    ),
    Section(
        key="synonyms",
        title="Synonyms",
        source="sys.synonyms; sys.schemas",
        why="Synonyms and their referenced base object (which can be in other databases/servers).",
    ),
    Section(
        key="partition_functions",
        title="Partition Functions",
        source="sys.partition_functions; sys.partition_parameters; sys.partition_range_values",
        why="Boundary type, data type, boundary values, and partition count for partition functions.",
    ),
    Section(
        key="partition_schemes",
        title="Partition Schemes",
        source="sys.partition_schemes; sys.partition_functions; sys.destination_data_spaces; sys.filegroups",
        why="Mapping of partition schemes to partition functions and filegroups.",
    ),
    Section(
        key="table_partitions",
        title="Table Partitions",
        source=(
            "sys.indexes (joined to sys.partition_schemes/functions); sys.partitions; "
            "sys.columns; sys.tables; sys.schemas"
        ),
        why="Partitioned tables and indexes with their partition scheme, function, key, and number of partitions.",
    ),
    Section(
        key="fulltext_indexes",
        title="Full-Text Indexes",
        source=(
            "sys.fulltext_indexes; sys.fulltext_catalogs; sys.fulltext_index_columns; "
            "sys.indexes; sys.tables; sys.schemas"
        ),
        why="Full-text indexes with unique key index, catalog name, change tracking mode, and indexed columns.",
    ),
    Section(
        key="xml_schema_collections",
        title="XML Schema Collections",
        source="sys.xml_schema_collections; sys.schemas",
        why="XML schema collections created in the database.",
    ),
    Section(
        key="assemblies",
        title="Assemblies",
        source="sys.assemblies; sys.assembly_files",
        why="CLR assemblies loaded in the database with visibility flags, dates, and file count.",
    ),
    Section(
        key="extended_properties",
        title="Extended Properties",
        source=(
            "sys.extended_properties; sys.objects / sys.columns / sys.parameters / sys.indexes; "
            "sys.schemas / sys.database_principals / sys.types"
        ),
        why="Extended properties (e.g., descriptive comments) defined on various objects.",
    ),
)

_SECTIONS_BY_KEY = {section.key: section for section in SCHEMA_SECTIONS}


def get_section(key: str) -> Section:
    """Look a section up by key."""
    try:
        return _SECTIONS_BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown report section '{key}'") from None


def select_sections(*, export_schema: bool = True) -> tuple[Section, ...]:
    """Sections included in a run, in report order."""
    return SCHEMA_SECTIONS if export_schema else ()
