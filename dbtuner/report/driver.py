"""Section driver: header, assistant brief, and one rendered block per section."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from dbtuner.core.database import check_prerequisites
from dbtuner.core.logging import timed_section
from dbtuner.report.emitter import ReportDocument, TextEmitter
from dbtuner.report.output import report_filename, write_report
from dbtuner.report.renderers import render_csv, render_definitions
from dbtuner.report.sections import REPORT_TITLE, REPORT_VERSION, Section, select_sections

if TYPE_CHECKING:
    from dbtuner.core.config import Settings
    from dbtuner.core.providers import MetadataProvider, ServerInfo

logger = logging.getLogger(__name__)


class SectionError(RuntimeError):
    """The metadata provider failed while materializing a section."""

    def __init__(self, section_key: str, cause: BaseException):
        super().__init__(f"Section '{section_key}' failed: {cause}")
        self.section_key = section_key


@dataclass
class ReportResult:
    """Outcome of a report run."""

    document: ReportDocument
    path: Path | None
    sections: list[str] = field(default_factory=list)

    @property
    def sink(self) -> str:
        return "file" if self.path is not None else "console"


class SectionDriver:
    """Renders report sections in order through a single emitter."""

    def __init__(self, emitter: TextEmitter, provider: MetadataProvider, *, safe_mode: bool):
        self.emitter = emitter
        self.provider = provider
        self.safe_mode = safe_mode

    def render_header(self, info: ServerInfo) -> None:
        emit = self.emitter.emit
        emit("# {%1}", REPORT_TITLE)
        emit("")
        emit("- **Version:** {%1}", REPORT_VERSION)
        emit("- **Target DB:** [{%1}]", info.database_name)
        emit("- **Server:** {%1}", info.server_name)
        emit("- **Generated (local):** {%1}", info.server_time)
        emit("- **Product Major Version:** {%1}", info.product_major_version)
        emit("- **DB Compat:** {%1}", info.compat_level)
        emit("- **Safe Mode:** {%1}", "On" if self.safe_mode else "Off")
        emit("")

    def render_brief(self, *, export_schema: bool) -> None:
        emit = self.emitter.emit
        emit("## Assistant Brief")
        emit("")
        if not export_schema:
            emit("Schema export was disabled for this run; no sections follow.")
            emit("")
            return
        emit("This export contains schema only.")
        emit("")
        emit(
            "- Use it to review tables, views, procedures, functions, relationships, "
            "indexes, and module/trigger definitions."
        )
        emit(
            "- If Safe Mode is On, module/trigger/constraint definitions are redacted "
            "(shown as -- [Redacted]) and extended property values as [Redacted]."
        )
        emit("")

    def render_section(self, section: Section) -> int | None:
        """Render one section; returns its row count, or None if it had no result set."""
        with timed_section(logger, section.key, kind=section.kind) as fields:
            try:
                result_set = self.provider.fetch(section.key)
            except Exception as exc:
                logger.error(
                    "section fetch failed",
                    extra={"extra_fields": {"section": section.key}},
                    exc_info=True,
                )
                raise SectionError(section.key, exc) from exc

            emit = self.emitter.emit
            emit("## {%1}", section.title)
            self.emitter.fence("text")
            for line in section.preamble:
                emit(line)
            self.emitter.fence()

            if section.kind == "sql":
                assert section.definition_columns is not None
                render_definitions(
                    self.emitter,
                    result_set,
                    section.definition_columns,
                    redact=self.safe_mode,
                    source_name=section.key,
                )
            else:
                render_csv(self.emitter, result_set)
            emit("")

            row_count = None if result_set is None else len(result_set)
            fields["rows"] = row_count
        return row_count

    def run(self, sections: Iterable[Section]) -> list[str]:
        rendered: list[str] = []
        for section in sections:
            self.render_section(section)
            rendered.append(section.key)
        return rendered


def build_report(
    provider: MetadataProvider,
    *,
    safe_mode: bool,
    export_schema: bool,
) -> tuple[ReportDocument, list[str]]:
    """Check prerequisites, then render the whole report into a new document."""
    info = provider.server_info()
    check_prerequisites(info)

    document = ReportDocument()
    driver = SectionDriver(TextEmitter(document), provider, safe_mode=safe_mode)
    driver.render_header(info)
    driver.render_brief(export_schema=export_schema)
    rendered = driver.run(select_sections(export_schema=export_schema))
    return document, rendered


def generate_report(
    settings: Settings,
    provider: MetadataProvider,
    *,
    fallback: TextIO | None = None,
) -> ReportResult:
    """Render the report for ``settings.target_db`` and write it out."""
    logger.info(
        "report started",
        extra={
            "extra_fields": {
                "target_db": settings.target_db,
                "provider": provider.provider_id,
                "safe_mode": settings.safe_mode,
                "export_schema": settings.export_schema,
            }
        },
    )
    document, rendered = build_report(
        provider,
        safe_mode=settings.safe_mode,
        export_schema=settings.export_schema,
    )
    path = write_report(
        document,
        settings.output_dir,
        report_filename(settings.target_db),
        fallback=fallback,
    )
    logger.info(
        "report complete",
        extra={"extra_fields": {"sections": len(rendered), "lines": len(document)}},
    )
    return ReportResult(document=document, path=path, sections=rendered)
