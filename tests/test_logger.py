"""
Logging setup: terminal-safe formatting, file output and level control.
"""

import logging

import pytest

from hela.logger import LogManager, TerminalSafeFormatter, get_logger, set_log_level


class TestTerminalSafeFormatter:

    def test_strips_ansi_and_control_characters(self):
        raw = "\x1b[31mRPC error\x1b[0m: bad\rnode\x07"
        assert TerminalSafeFormatter.sanitize(raw) == "RPC error: badnode"

    def test_keeps_tabs_and_newlines(self):
        assert TerminalSafeFormatter.sanitize("a\tb\nc") == "a\tb\nc"

    def test_format_sanitizes_record(self):
        formatter = TerminalSafeFormatter(fmt="%(message)s")
        record = logging.LogRecord("x", logging.INFO, "", 0, "hi\x1b[2J there", (), None)
        assert formatter.format(record) == "hi there"


class TestLogManager:

    @pytest.fixture
    def saved_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield root
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_file_output(self, tmp_path, saved_root):
        log_file = tmp_path / "logs" / "hela.log"
        LogManager().configure(log_level="info", log_file=log_file, file_output=True)

        get_logger("hela.test").info("Submitted \x1b[31mtransaction\x1b[0m")
        for handler in saved_root.handlers:
            handler.flush()

        assert saved_root.level == logging.INFO
        assert "Submitted transaction" in log_file.read_text()

    def test_configures_once(self, tmp_path, saved_root):
        manager = LogManager()
        manager.configure(file_output=False)
        attached = saved_root.handlers[:]
        manager.configure(log_file=tmp_path / "hela.log", file_output=True)

        assert saved_root.handlers == attached
        assert not (tmp_path / "hela.log").exists()

    def test_set_level(self, saved_root):
        set_log_level("DEBUG")
        assert saved_root.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in saved_root.handlers)

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid log level"):
            set_log_level("LOUD")

    def test_get_logger_is_named(self):
        assert get_logger("hela.client").name == "hela.client"
