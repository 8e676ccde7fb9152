"""SQL Server catalog queries, one per report section.

Every query returns ``RowNumber`` as its first column. Columns that only
exist on newer servers are written as ``{placeholders}`` and resolved from
the capability probe: the real column when present, a typed NULL otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class OptionalColumn:
    """A catalog column that may be missing on older servers."""

    view: str
    column: str
    expr: str
    fallback: str

    @property
    def probe(self) -> str:
        return f"{self.view}.{self.column}"


@dataclass(frozen=True)
class CatalogQuery:
    sql: str
    optional: Mapping[str, OptionalColumn] = field(default_factory=dict)
    requires_object: str | None = None
    columns_when_unavailable: tuple[str, ...] = ()
    uses_safe_mode: bool = False

    def render(self, capabilities: frozenset[str]) -> str:
        """Resolve optional-column placeholders against the probed capabilities."""
        if not self.optional:
            return self.sql
        resolved = {
            name: opt.expr if opt.probe in capabilities else opt.fallback
            for name, opt in self.optional.items()
        }
        return self.sql.format(**resolved)


def _numbered(select: str, order_by: str) -> str:
    return (
        f"SELECT ROW_NUMBER() OVER (ORDER BY {order_by}) AS RowNumber, src.*\n"
        f"FROM (\n{select}\n) AS src\n"
        "ORDER BY RowNumber"
    )


_SAFE_DEFINITION = "CASE WHEN %(safe_mode)s = 0 THEN {source} ELSE %(redacted_body)s END"


def _safe_definition(source: str) -> str:
    return _SAFE_DEFINITION.replace("{source}", source)


_TABLES_TEMPORAL = OptionalColumn(
    "sys.tables", "temporal_type_desc", "t.temporal_type_desc", "CAST(NULL AS nvarchar(120))"
)
_TABLES_MEMOPT = OptionalColumn(
    "sys.tables", "is_memory_optimized", "t.is_memory_optimized", "CAST(NULL AS bit)"
)
_COLUMNS_VECTOR_TYPE = OptionalColumn(
    "sys.columns", "vector_base_type", "c.vector_base_type", "CAST(NULL AS tinyint)"
)
_COLUMNS_VECTOR_TYPE_DESC = OptionalColumn(
    "sys.columns", "vector_base_type_desc", "c.vector_base_type_desc", "CAST(NULL AS nvarchar(20))"
)
_COLUMNS_VECTOR_DIMENSIONS = OptionalColumn(
    "sys.columns", "vector_dimensions", "c.vector_dimensions", "CAST(NULL AS int)"
)
_TABLE_TYPES_MEMOPT = OptionalColumn(
    "sys.table_types", "is_memory_optimized", "tt.is_memory_optimized", "CAST(NULL AS bit)"
)


CATALOG_QUERIES: dict[str, CatalogQuery] = {
    "schemas": CatalogQuery(
        _numbered(
            """
            SELECT
                s.schema_id AS schema_id,
                s.name AS schema_name,
                dp.name AS owner_name
            FROM sys.schemas AS s
            LEFT JOIN sys.database_principals AS dp ON dp.principal_id = s.principal_id
            """,
            "schema_name",
        )
    ),
    "modules": CatalogQuery(
        _numbered(
            f"""
            SELECT
                CASE o.type
                    WHEN 'P' THEN 'PROCEDURE'
                    WHEN 'V' THEN 'VIEW'
                    WHEN 'FN' THEN 'FUNCTION'
                    WHEN 'TF' THEN 'FUNCTION'
                    WHEN 'IF' THEN 'FUNCTION'
                    ELSE o.type_desc
                END AS object_type,
                s.name AS schema_name,
                o.name AS object_name,
                {_safe_definition("m.definition")} AS definition
            FROM sys.objects AS o
            JOIN sys.schemas AS s ON s.schema_id = o.schema_id
            JOIN sys.sql_modules AS m ON m.object_id = o.object_id
            WHERE o.type IN ('P', 'V', 'FN', 'TF', 'IF')
              AND OBJECTPROPERTY(o.object_id, 'IsEncrypted') = 0
            """,
            "object_type, schema_name, object_name",
        ),
        uses_safe_mode=True,
    ),
    "triggers": CatalogQuery(
        _numbered(
            f"""
            SELECT
                'TRIGGER' AS object_type,
                s.name AS schema_name,
                tr.name AS object_name,
                {_safe_definition("m.definition")} AS definition
            FROM sys.triggers AS tr
            JOIN sys.objects AS o ON o.object_id = tr.object_id
            JOIN sys.schemas AS s ON s.schema_id = o.schema_id
            JOIN sys.sql_modules AS m ON m.object_id = tr.object_id
            """,
            "schema_name, object_name",
        ),
        uses_safe_mode=True,
    ),
    "tables": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                t.object_id AS object_id,
                {temporal_type_desc} AS temporal_type_desc,
                {is_memory_optimized} AS is_memory_optimized
            FROM sys.tables AS t
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            WHERE t.is_ms_shipped = 0
            """,
            "schema_name, table_name",
        ),
        optional={
            "temporal_type_desc": _TABLES_TEMPORAL,
            "is_memory_optimized": _TABLES_MEMOPT,
        },
    ),
    "columns": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                c.name AS column_name,
                c.column_id AS ordinal_position,
                TYPE_NAME(c.user_type_id) AS data_type,
                c.max_length AS max_length,
                c.precision AS precision,
                c.scale AS scale,
                c.is_nullable AS is_nullable,
                c.is_identity AS is_identity,
                c.is_computed AS is_computed,
                cc.is_persisted AS is_persisted,
                {vector_base_type} AS vector_base_type,
                {vector_base_type_desc} AS vector_base_type_desc,
                {vector_dimensions} AS vector_dimensions
            FROM sys.tables AS t
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            JOIN sys.columns AS c ON c.object_id = t.object_id
            LEFT JOIN sys.computed_columns AS cc
                ON cc.object_id = c.object_id AND cc.column_id = c.column_id
            WHERE t.is_ms_shipped = 0
            """,
            "schema_name, table_name, ordinal_position",
        ),
        optional={
            "vector_base_type": _COLUMNS_VECTOR_TYPE,
            "vector_base_type_desc": _COLUMNS_VECTOR_TYPE_DESC,
            "vector_dimensions": _COLUMNS_VECTOR_DIMENSIONS,
        },
    ),
    "types": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS type_name,
                TYPE_NAME(t.system_type_id) AS base_system_type,
                t.max_length AS max_length,
                t.precision AS precision,
                t.scale AS scale,
                t.is_table_type AS is_table_type,
                t.is_assembly_type AS is_assembly_type,
                asm.name AS assembly_name
            FROM sys.types AS t
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            LEFT JOIN sys.assembly_types AS at
                ON at.user_type_id = t.user_type_id AND t.is_assembly_type = 1
            LEFT JOIN sys.assemblies AS asm
                ON asm.assembly_id = at.assembly_id AND t.is_assembly_type = 1
            WHERE t.is_user_defined = 1
            """,
            "schema_name, type_name",
        )
    ),
    "table_types": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                tt.name AS table_type_name,
                {is_memory_optimized} AS is_memory_optimized
            FROM sys.table_types AS tt
            JOIN sys.schemas AS s ON s.schema_id = tt.schema_id
            WHERE tt.is_user_defined = 1
            """,
            "schema_name, table_type_name",
        ),
        optional={"is_memory_optimized": _TABLE_TYPES_MEMOPT},
    ),
    "table_type_columns": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                tt.name AS table_type_name,
                c.name AS column_name,
                c.column_id AS column_id,
                TYPE_NAME(c.user_type_id) AS data_type,
                c.max_length AS max_length,
                c.precision AS precision,
                c.scale AS scale,
                c.is_nullable AS is_nullable,
                c.is_identity AS is_identity,
                c.is_computed AS is_computed,
                cc.is_persisted AS is_persisted
            FROM sys.table_types AS tt
            JOIN sys.schemas AS s ON s.schema_id = tt.schema_id
            JOIN sys.columns AS c ON c.object_id = tt.type_table_object_id
            LEFT JOIN sys.computed_columns AS cc
                ON cc.object_id = c.object_id AND cc.column_id = c.column_id
            WHERE tt.is_user_defined = 1
            """,
            "schema_name, table_type_name, column_id",
        )
    ),
    "constraints": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                kc.name AS constraint_name,
                CASE kc.type
                    WHEN 'PK' THEN 'PRIMARY KEY'
                    WHEN 'UQ' THEN 'UNIQUE'
                    WHEN 'F' THEN 'FOREIGN KEY'
                    WHEN 'C' THEN 'CHECK'
                    WHEN 'D' THEN 'DEFAULT'
                    ELSE kc.type_desc
                END AS constraint_type
            FROM sys.objects AS t
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            JOIN sys.objects AS kc ON kc.parent_object_id = t.object_id
            WHERE t.type = 'U' AND kc.type IN ('PK', 'UQ', 'F', 'C', 'D')
            """,
            "schema_name, table_name, constraint_type, constraint_name",
        )
    ),
    "check_constraints": CatalogQuery(
        _numbered(
            f"""
            SELECT
                'CHECK CONSTRAINT' AS object_type,
                OBJECT_SCHEMA_NAME(c.parent_object_id) AS schema_name,
                c.name AS object_name,
                {_safe_definition("c.definition")} AS definition
            FROM sys.check_constraints AS c
            """,
            "schema_name, object_name",
        ),
        uses_safe_mode=True,
    ),
    "default_constraints": CatalogQuery(
        _numbered(
            f"""
            SELECT
                'DEFAULT CONSTRAINT' AS object_type,
                OBJECT_SCHEMA_NAME(d.parent_object_id) AS schema_name,
                d.name AS object_name,
                {_safe_definition("d.definition")} AS definition
            FROM sys.default_constraints AS d
            """,
            "schema_name, object_name",
        ),
        uses_safe_mode=True,
    ),
    "computed_columns": CatalogQuery(
        _numbered(
            f"""
            SELECT
                'COLUMN COMPUTED' AS object_type,
                s.name AS schema_name,
                t.name AS object_name,
                t.name + '].[' + c.name AS name_path,
                {_safe_definition("cc.definition")} AS definition
            FROM sys.tables AS t
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            JOIN sys.columns AS c ON c.object_id = t.object_id
            JOIN sys.computed_columns AS cc
                ON cc.object_id = c.object_id AND cc.column_id = c.column_id
            """,
            "schema_name, object_name, name_path",
        ),
        uses_safe_mode=True,
    ),
    "indexes": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                i.name AS index_name,
                i.type_desc AS index_type_desc,
                i.is_unique AS is_unique,
                i.is_primary_key AS is_primary_key,
                i.is_unique_constraint AS is_unique_constraint,
                i.has_filter AS has_filter,
                i.filter_definition AS filter_definition
            FROM sys.indexes AS i
            JOIN sys.tables AS t ON t.object_id = i.object_id
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            WHERE i.index_id > 0 AND t.is_ms_shipped = 0
            """,
            "schema_name, table_name, index_name",
        )
    ),
    "index_columns": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                i.name AS index_name,
                c.name AS column_name,
                ic.is_included_column AS is_included,
                ic.key_ordinal AS key_ordinal,
                ic.is_descending_key AS is_descending
            FROM sys.indexes AS i
            JOIN sys.index_columns AS ic
                ON ic.object_id = i.object_id AND ic.index_id = i.index_id
            JOIN sys.columns AS c
                ON c.object_id = ic.object_id AND c.column_id = ic.column_id
            JOIN sys.tables AS t ON t.object_id = i.object_id
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            WHERE i.index_id > 0 AND t.is_ms_shipped = 0
            """,
            "schema_name, table_name, index_name, is_included, key_ordinal, column_name",
        )
    ),
    "foreign_keys": CatalogQuery(
        _numbered(
            """
            SELECT
                sp.name AS schema_name,
                p.name AS table_name,
                fk.name AS constraint_name,
                sr.name AS referenced_schema_name,
                r.name AS referenced_table_name,
                fk.delete_referential_action_desc AS delete_referential_action_desc,
                fk.update_referential_action_desc AS update_referential_action_desc,
                STUFF((
                    SELECT ', ' + c_p.name
                    FROM sys.foreign_key_columns AS fkc
                    JOIN sys.columns AS c_p
                        ON c_p.object_id = fkc.parent_object_id
                       AND c_p.column_id = fkc.parent_column_id
                    WHERE fkc.constraint_object_id = fk.object_id
                    ORDER BY fkc.constraint_column_id
                    FOR XML PATH(''), TYPE
                ).value('(text())[1]', 'nvarchar(max)'), 1, 2, '') AS column_names,
                STUFF((
                    SELECT ', ' + c_r.name
                    FROM sys.foreign_key_columns AS fkc
                    JOIN sys.columns AS c_r
                        ON c_r.object_id = fkc.referenced_object_id
                       AND c_r.column_id = fkc.referenced_column_id
                    WHERE fkc.constraint_object_id = fk.object_id
                    ORDER BY fkc.constraint_column_id
                    FOR XML PATH(''), TYPE
                ).value('(text())[1]', 'nvarchar(max)'), 1, 2, '') AS referenced_column_names
            FROM sys.foreign_keys AS fk
            JOIN sys.tables AS p ON p.object_id = fk.parent_object_id
            JOIN sys.schemas AS sp ON sp.schema_id = p.schema_id
            JOIN sys.tables AS r ON r.object_id = fk.referenced_object_id
            JOIN sys.schemas AS sr ON sr.schema_id = r.schema_id
            WHERE p.is_ms_shipped = 0
            """,
            "schema_name, table_name, constraint_name",
        )
    ),
    "sequences": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                seq.name AS sequence_name,
                TYPE_NAME(seq.user_type_id) AS data_type,
                CONVERT(nvarchar(100), seq.start_value) AS start_value,
                CONVERT(nvarchar(100), seq.increment) AS increment,
                CONVERT(nvarchar(100), seq.minimum_value) AS min_value,
                CONVERT(nvarchar(100), seq.maximum_value) AS max_value,
                seq.is_cycling AS is_cycling,
                CONVERT(nvarchar(100), seq.cache_size) AS cache_size
            FROM sys.sequences AS seq
            JOIN sys.schemas AS s ON s.schema_id = seq.schema_id
            WHERE seq.is_ms_shipped = 0
            """,
            "schema_name, sequence_name",
        ),
        requires_object="sys.sequences",
        columns_when_unavailable=(
            "RowNumber",
            "schema_name",
            "sequence_name",
            "data_type",
            "start_value",
            "increment",
            "min_value",
            "max_value",
            "is_cycling",
            "cache_size",
        ),
    ),
    "synonyms": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                syn.name AS synonym_name,
                syn.base_object_name AS base_object_name
            FROM sys.synonyms AS syn
            JOIN sys.schemas AS s ON s.schema_id = syn.schema_id
            """,
            "schema_name, synonym_name",
        )
    ),
    "partition_functions": CatalogQuery(
        _numbered(
            """
            SELECT
                pf.name AS function_name,
                CASE WHEN pf.boundary_value_on_right = 1 THEN 'RIGHT' ELSE 'LEFT' END AS boundary_type,
                TYPE_NAME(pp.user_type_id) AS data_type,
                pp.max_length AS max_length,
                pp.precision AS precision,
                pp.scale AS scale,
                STUFF((
                    SELECT ', ' + CONVERT(nvarchar(4000), prv.value)
                    FROM sys.partition_range_values AS prv
                    WHERE prv.function_id = pf.function_id
                    ORDER BY prv.boundary_id
                    FOR XML PATH(''), TYPE
                ).value('(text())[1]', 'nvarchar(max)'), 1, 2, '') AS boundary_values,
                pf.fanout AS partition_count
            FROM sys.partition_functions AS pf
            JOIN sys.partition_parameters AS pp ON pp.function_id = pf.function_id
            """,
            "function_name",
        )
    ),
    "partition_schemes": CatalogQuery(
        _numbered(
            """
            SELECT
                ps.name AS scheme_name,
                pf.name AS function_name,
                STUFF((
                    SELECT ', ' + fg.name
                    FROM sys.destination_data_spaces AS dds
                    JOIN sys.filegroups AS fg ON fg.data_space_id = dds.data_space_id
                    WHERE dds.partition_scheme_id = ps.data_space_id
                    ORDER BY dds.destination_id
                    FOR XML PATH(''), TYPE
                ).value('(text())[1]', 'nvarchar(max)'), 1, 2, '') AS filegroups
            FROM sys.partition_schemes AS ps
            JOIN sys.partition_functions AS pf ON pf.function_id = ps.function_id
            """,
            "scheme_name",
        )
    ),
    "table_partitions": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                ISNULL(i.name, '(HEAP)') AS index_name,
                ps.name AS partition_scheme_name,
                pf.name AS partition_function_name,
                (
                    SELECT c.name
                    FROM sys.index_columns AS ic2
                    JOIN sys.columns AS c
                        ON c.object_id = ic2.object_id AND c.column_id = ic2.column_id
                    WHERE ic2.object_id = i.object_id
                      AND ic2.index_id = i.index_id
                      AND ic2.partition_ordinal = 1
                ) AS partition_column,
                (
                    SELECT COUNT(*)
                    FROM sys.partitions AS p
                    WHERE p.object_id = i.object_id AND p.index_id = i.index_id
                ) AS partition_count
            FROM sys.indexes AS i
            JOIN sys.partition_schemes AS ps ON i.data_space_id = ps.data_space_id
            JOIN sys.partition_functions AS pf ON pf.function_id = ps.function_id
            JOIN sys.tables AS t ON t.object_id = i.object_id
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            WHERE t.is_ms_shipped = 0
            """,
            "schema_name, table_name, index_name",
        )
    ),
    "fulltext_indexes": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                t.name AS table_name,
                ftc.name AS fulltext_catalog_name,
                ui.name AS unique_index_name,
                CASE fti.change_tracking_state
                    WHEN 0 THEN 'OFF'
                    WHEN 1 THEN 'MANUAL'
                    WHEN 2 THEN 'AUTO'
                END AS change_tracking_desc,
                STUFF((
                    SELECT ', ' + c.name
                    FROM sys.fulltext_index_columns AS fic
                    JOIN sys.columns AS c
                        ON c.object_id = fic.object_id AND c.column_id = fic.column_id
                    WHERE fic.object_id = t.object_id
                    ORDER BY c.name
                    FOR XML PATH(''), TYPE
                ).value('(text())[1]', 'nvarchar(max)'), 1, 2, '') AS column_names
            FROM sys.fulltext_indexes AS fti
            JOIN sys.tables AS t ON t.object_id = fti.object_id
            JOIN sys.schemas AS s ON s.schema_id = t.schema_id
            LEFT JOIN sys.fulltext_catalogs AS ftc
                ON ftc.fulltext_catalog_id = fti.fulltext_catalog_id
            LEFT JOIN sys.indexes AS ui
                ON ui.object_id = t.object_id AND ui.index_id = fti.unique_index_id
            WHERE t.is_ms_shipped = 0
            """,
            "schema_name, table_name",
        )
    ),
    "xml_schema_collections": CatalogQuery(
        _numbered(
            """
            SELECT
                s.name AS schema_name,
                x.name AS xml_collection_name
            FROM sys.xml_schema_collections AS x
            JOIN sys.schemas AS s ON s.schema_id = x.schema_id
            """,
            "schema_name, xml_collection_name",
        )
    ),
    "assemblies": CatalogQuery(
        _numbered(
            """
            SELECT
                a.name AS assembly_name,
                a.clr_name AS clr_name,
                a.permission_set_desc AS permission_set,
                a.is_visible AS is_visible,
                a.create_date AS create_date,
                a.modify_date AS modify_date,
                a.is_user_defined AS is_user_defined,
                (
                    SELECT COUNT(*)
                    FROM sys.assembly_files AS af
                    WHERE af.assembly_id = a.assembly_id
                ) AS file_count
            FROM sys.assemblies AS a
            WHERE a.is_user_defined = 1
            """,
            "assembly_name",
        )
    ),
    # Sort keys are expressions outside the select list, so this one numbers
    # rows directly instead of going through _numbered.
    "extended_properties": CatalogQuery(
        """
        SELECT
            ROW_NUMBER() OVER (ORDER BY
                CASE WHEN ep.class IN (2, 7) THEN 1 ELSE ep.class END,
                COALESCE(sc_obj.name, sc_schema.name, sc_type.name, dp.name, ''),
                CASE
                    WHEN ep.class = 1 AND ep.minor_id <> 0 THEN 1
                    WHEN ep.class = 2 THEN 1
                    WHEN ep.class = 7 THEN 1
                    ELSE 0
                END,
                CASE
                    WHEN ep.class_desc = 'DATABASE' THEN DB_NAME()
                    WHEN ep.class_desc = 'SCHEMA' THEN sc_schema.name
                    WHEN ep.class_desc = 'DATABASE_PRINCIPAL' THEN dp.name
                    WHEN ep.class_desc = 'TYPE' THEN typ.name
                    ELSE o.name
                END,
                CASE
                    WHEN ep.class = 1 AND ep.minor_id <> 0 THEN col.name
                    WHEN ep.class = 2 THEN par.name
                    WHEN ep.class = 7 THEN ix.name
                    ELSE ''
                END,
                ep.name
            ) AS RowNumber,
            ep.class_desc AS class_desc,
            COALESCE(sc_obj.name, sc_schema.name, sc_type.name, NULL) AS schema_name,
            CASE
                WHEN ep.class_desc = 'DATABASE' THEN DB_NAME()
                WHEN ep.class_desc = 'SCHEMA' THEN sc_schema.name
                WHEN ep.class_desc = 'DATABASE_PRINCIPAL' THEN dp.name
                WHEN ep.class_desc = 'TYPE' THEN typ.name
                ELSE o.name
            END AS object_name,
            CASE
                WHEN ep.class_desc = 'OBJECT_OR_COLUMN' AND ep.minor_id <> 0 THEN col.name
                WHEN ep.class_desc = 'PARAMETER' THEN '@' + par.name
                WHEN ep.class_desc = 'INDEX' THEN ix.name
                ELSE NULL
            END AS subobject_name,
            ep.name AS property_name,
            CASE WHEN %(safe_mode)s = 0 THEN CONVERT(nvarchar(max), ep.value)
                 ELSE %(redacted_value)s END AS property_value
        FROM sys.extended_properties AS ep
        LEFT JOIN sys.objects AS o ON ep.class IN (1, 2, 7) AND ep.major_id = o.object_id
        LEFT JOIN sys.columns AS col
            ON ep.class = 1 AND ep.minor_id <> 0
           AND col.object_id = o.object_id AND col.column_id = ep.minor_id
        LEFT JOIN sys.parameters AS par
            ON ep.class = 2 AND par.object_id = o.object_id AND par.parameter_id = ep.minor_id
        LEFT JOIN sys.indexes AS ix
            ON ep.class = 7 AND ix.object_id = o.object_id AND ix.index_id = ep.minor_id
        LEFT JOIN sys.schemas AS sc_obj ON ep.class IN (1, 2, 7) AND o.schema_id = sc_obj.schema_id
        LEFT JOIN sys.schemas AS sc_schema ON ep.class = 3 AND ep.major_id = sc_schema.schema_id
        LEFT JOIN sys.database_principals AS dp ON ep.class = 4 AND ep.major_id = dp.principal_id
        LEFT JOIN sys.types AS typ ON ep.class = 6 AND ep.major_id = typ.user_type_id
        LEFT JOIN sys.schemas AS sc_type ON ep.class = 6 AND typ.schema_id = sc_type.schema_id
        WHERE (
            ep.class_desc NOT IN ('DATABASE', 'DATABASE_PRINCIPAL', 'TYPE', 'SCHEMA')
            OR ep.major_id IS NOT NULL
        )
        ORDER BY RowNumber
        """,
        uses_safe_mode=True,
    ),
}


def optional_column_probes() -> dict[str, list[str]]:
    """All optional columns referenced by the queries, grouped by catalog view."""
    wanted: dict[str, list[str]] = {}
    for query in CATALOG_QUERIES.values():
        for opt in query.optional.values():
            columns = wanted.setdefault(opt.view, [])
            if opt.column not in columns:
                columns.append(opt.column)
    return wanted
