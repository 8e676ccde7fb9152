"""Report file naming and writing, with console fallback."""

from __future__ import annotations

import contextlib
import logging
import os
import re
import sys
from pathlib import Path
from typing import TextIO

from dbtuner.report.emitter import ReportDocument, StreamSink
from dbtuner.report.sections import REPORT_VERSION

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def report_filename(target_db: str, version: str = REPORT_VERSION) -> str:
    """Return ``dt_schema_report (<TargetDB> - <version>).md``."""
    safe_name = UNSAFE_FILENAME_CHARS.sub("_", target_db.strip()) or "database"
    return f"dt_schema_report ({safe_name} - {version}).md"


def write_to_stream(document: ReportDocument, stream: TextIO) -> None:
    """Write every line chunk by chunk to a text stream."""
    sink = StreamSink(stream)
    for chunks in document.chunked_lines:
        sink.write_line(list(chunks))
    stream.flush()


def write_report(
    document: ReportDocument,
    output_dir: str | Path | None,
    filename: str,
    *,
    fallback: TextIO | None = None,
) -> Path | None:
    """Write the report atomically into ``output_dir``.

    Returns the file path, or ``None`` when the directory is unset or
    unusable and the report went to the fallback stream (stdout by default).
    """
    stream = fallback or sys.stdout
    target_dir = Path(output_dir).expanduser() if output_dir else None
    if target_dir is None or not target_dir.is_dir():
        logger.warning(
            "output directory unavailable; writing report to console",
            extra={"extra_fields": {"output_dir": str(output_dir or "")}},
        )
        write_to_stream(document, stream)
        return None

    path = target_dir / filename
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(document.render())
        os.replace(tmp_path, path)
    except OSError as exc:
        logger.warning(
            "report write failed; writing report to console",
            extra={"extra_fields": {"path": str(path), "error": str(exc)}},
        )
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        write_to_stream(document, stream)
        return None

    logger.info("report written", extra={"extra_fields": {"path": str(path)}})
    return path
