"""Tests for JSON logging and section timing."""

from __future__ import annotations

import io
import json
import logging

from dbtuner.core.logging import get_run_id, set_run_id, setup_logging, timed_section


def test_setup_logging_emits_json_with_extras() -> None:
    stream = io.StringIO()
    setup_logging("DEBUG", stream=stream)
    set_run_id("run-1")
    logging.getLogger("dbtuner.test").info(
        "report started",
        extra={"extra_fields": {"target_db": "Sales"}},
    )
    entry = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert entry["message"] == "report started"
    assert entry["level"] == "INFO"
    assert entry["run_id"] == "run-1"
    assert entry["target_db"] == "Sales"


def test_set_run_id_generates_uuid() -> None:
    rid = set_run_id()
    assert len(rid) == 36
    assert get_run_id() == rid


def test_timed_section_logs_elapsed_and_fields() -> None:
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    with timed_section(logging.getLogger("dbtuner.test"), "tables", kind="csv") as fields:
        fields["rows"] = 3
    entry = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert entry["message"] == "section rendered"
    assert entry["section"] == "tables"
    assert entry["kind"] == "csv"
    assert entry["rows"] == 3
    assert entry["elapsed_ms"] >= 0
