"""Unit tests for logging utilities."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import pytest

from ideaflow.utils import create_cli_logger
from ideaflow.utils._logging import _create_logger, _get_log_level

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestCreateLogger:
    def test_creates_log_directory_if_missing(self, fs: FakeFilesystem) -> None:
        log_path = Path("/logs/test.log")
        assert not log_path.parent.exists()

        _ = _create_logger(str(log_path))

        assert log_path.parent.exists()

    def test_default_format_is_json(self, fs: FakeFilesystem) -> None:
        logger = _create_logger("/logs/test.log")

        logger.info("draft_saved", key="wheel99_idea_refinement_data")

        line = Path("/logs/test.log").read_text().strip()
        record = orjson.loads(line)
        assert record["event"] == "draft_saved"
        assert record["key"] == "wheel99_idea_refinement_data"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_text_format(self, fs: FakeFilesystem) -> None:
        logger = _create_logger("/logs/test.log", log_format="text")

        logger.info("step_changed", step=2)

        content = Path("/logs/test.log").read_text()
        assert "step_changed" in content
        assert "step=2" in content


class TestCreateLoggerRotation:
    def test_with_rotation_uses_stdlib_handler(self, fs: FakeFilesystem) -> None:
        _ = _create_logger("/logs/rotating.log", max_bytes=1000, backup_count=3)

        handlers = [
            handler
            for name in logging.root.manager.loggerDict
            if name.startswith("ideaflow.rotating.")
            for handler in logging.getLogger(name).handlers
        ]
        assert any(
            isinstance(h, RotatingFileHandler) and h.maxBytes == 1000 and h.backupCount == 3
            for h in handlers
        )


class TestLogLevel:
    def test_debug_env_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDEAFLOW_DEBUG", "1")
        monkeypatch.setenv("IDEAFLOW_LOG_LEVEL", "error")

        assert _get_log_level() == logging.DEBUG

    def test_level_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDEAFLOW_LOG_LEVEL", "warning")

        assert _get_log_level() == logging.WARNING

    def test_defaults_to_info(self) -> None:
        assert _get_log_level() == logging.INFO


class TestCreateCliLogger:
    def test_binds_command_name(self, fs: FakeFilesystem) -> None:
        logger = create_cli_logger(log_file="/logs/cli.log", command="refine next")

        logger.info("advance_blocked", step=0)

        record = orjson.loads(Path("/logs/cli.log").read_text().strip())
        assert record["command"] == "refine next"
        assert record["event"] == "advance_blocked"

    def test_respects_level(self, fs: FakeFilesystem) -> None:
        logger = create_cli_logger(level="error", log_file="/logs/cli.log")

        logger.debug("debug_level_message")
        logger.error("error_level_message")

        content = Path("/logs/cli.log").read_text()
        assert "debug_level_message" not in content
        assert "error_level_message" in content

    def test_debug_env_overrides_level(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("IDEAFLOW_DEBUG", "1")
        logger = create_cli_logger(level="error", log_file="/logs/cli.log")

        logger.debug("debug_level_message")

        assert "debug_level_message" in Path("/logs/cli.log").read_text()
