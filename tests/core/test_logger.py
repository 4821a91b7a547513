"""Tests for loguru setup."""

import logging

from loguru import logger

from athletix.core.logger import setup_logger


def test_stdlib_server_logs_reach_loguru(tmp_path):
    log_file = tmp_path / "logs" / "athletix.log"
    setup_logger(level="INFO", log_file=str(log_file))
    captured = []
    sink_id = logger.add(captured.append, format="{message}", level="INFO")
    try:
        logging.getLogger("uvicorn.error").warning("port already in use")
    finally:
        logger.remove(sink_id)
        setup_logger(level="INFO")

    assert any("port already in use" in str(message) for message in captured)
    assert log_file.parent.is_dir()
