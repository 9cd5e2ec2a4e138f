"""Tests for the loguru sinks in hopfviz.core.logging."""

import json

from hopfviz.core.logging import logger, set_console_level, setup_json_logfile, setup_logfile


def test_file_sinks_receive_records(tmp_path):
    text_log = tmp_path / "run.log"
    json_log = tmp_path / "run.jsonl"
    ids = [setup_logfile(str(text_log), level="DEBUG"), setup_json_logfile(str(json_log), level="DEBUG")]
    try:
        logger.debug("fiber rebuild marker")
    finally:
        for handler_id in ids:
            logger.remove(handler_id)

    assert "fiber rebuild marker" in text_log.read_text()
    records = [json.loads(line) for line in json_log.read_text().splitlines()]
    assert any(r["record"]["message"] == "fiber rebuild marker" for r in records)


def test_console_level_replaces_previous_sink(capsys):
    first = set_console_level("WARNING")
    second = set_console_level("INFO")
    assert first != second
    logger.info("visible at info")
    assert "visible at info" in capsys.readouterr().err
    set_console_level("WARNING")
    logger.info("hidden at warning")
    assert "hidden at warning" not in capsys.readouterr().err
