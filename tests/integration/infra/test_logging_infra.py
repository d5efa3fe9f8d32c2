from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the asynchronous QueueListener architecture, idempotency
of configuration, log file rotation and clean shutdown.
"""

import logging
import time
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

import pytest

from tinymerge.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    shutdown_logging,
)
from tinymerge.infra.logging.core import _CONFIGURED_FLAG_ATTR, _QUEUE_LISTENER_ATTR
from tinymerge.infra.logging.handlers import _HANDLER_TAG_ATTR


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Clean up our root logger handlers before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, _HANDLER_TAG_ATTR, False)]


def test_logging_idempotency() -> None:
    """TC-01: Verify that multiple config calls do not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    initial = len(_our_handlers())
    configure_logging(cfg)

    assert initial == 1
    assert len(_our_handlers()) == initial, "Handlers were duplicated."
    assert isinstance(_our_handlers()[0], QueueHandler)


def test_force_reconfigures_listener() -> None:
    configure_logging(LoggingConfig(level="INFO"))
    first = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)

    configure_logging(LoggingConfig(level="DEBUG"), force=True)
    second = getattr(logging.getLogger(), _QUEUE_LISTENER_ATTR)

    assert isinstance(second, QueueListener)
    assert second is not first
    assert logging.getLogger().level == logging.DEBUG


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: Verify file rotation when size limit is exceeded."""
    log_file = tmp_path / "test_rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1,
    )

    configure_logging(cfg)
    logger = logging.getLogger("tinymerge.test_rotate")
    for _ in range(10):
        logger.debug("This is a long log message to trigger rotation." * 5)

    # Give time for the QueueListener to process
    time.sleep(0.5)
    shutdown_logging()

    assert log_file.exists()
    assert (tmp_path / "test_rotate.log.1").exists()


def test_file_records_debug_while_console_is_quiet(tmp_path: Path, capsys) -> None:
    """TC-03: The log file keeps the full trace of a quiet run."""
    log_file = tmp_path / "trace.log"
    configure_logging(LoggingConfig.from_flags(quiet=True, log_file=str(log_file)))

    logging.getLogger("tinymerge.test").info("Processing...")
    shutdown_logging()

    assert "Processing..." in log_file.read_text(encoding="utf-8")
    assert "Processing..." not in capsys.readouterr().err


def test_shutdown_removes_state() -> None:
    configure_logging(LoggingConfig())
    shutdown_logging()

    root = logging.getLogger()
    assert not _our_handlers()
    assert not hasattr(root, _CONFIGURED_FLAG_ATTR)
    assert getattr(root, _QUEUE_LISTENER_ATTR, None) is None


def test_from_flags_levels() -> None:
    assert LoggingConfig.from_flags().level == "INFO"
    assert LoggingConfig.from_flags(debug=True).level == "DEBUG"
    assert LoggingConfig.from_flags(quiet=True).level == "WARNING"
    assert LoggingConfig.from_flags(debug=True, quiet=True).level == "DEBUG"


def test_default_log_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("tinymerge.infra.logging.core.get_user_data_dir", lambda: str(tmp_path))

    assert get_default_log_path() == str(tmp_path / "logs" / "tinymerge.log")
