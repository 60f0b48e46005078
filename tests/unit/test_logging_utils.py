#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for tidymd.logging_utils."""

import logging

import pytest

from tidymd.logging_utils import configure_logging, log_document


@pytest.mark.unit
class TestConfigureLogging:
    """Test handler setup on the package logger."""

    def test_root_logger_untouched(self):
        """Only the tidymd logger gets handlers."""
        root_handlers = list(logging.getLogger().handlers)
        package_logger = configure_logging(logging.INFO)
        assert package_logger.name == "tidymd"
        assert package_logger.level == logging.INFO
        assert package_logger.propagate is False
        assert len(package_logger.handlers) == 1
        assert logging.getLogger().handlers == root_handlers

    def test_level_name(self):
        """Level names are accepted as well as numbers."""
        assert configure_logging("debug").level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self):
        """Configuring twice does not duplicate output."""
        configure_logging(logging.INFO)
        package_logger = configure_logging(logging.WARNING)
        assert len(package_logger.handlers) == 1

    def test_records_tagged_with_document(self, tmp_path):
        """Messages from the tidymd modules name the document being tidied."""
        log_file = tmp_path / "tidymd.log"
        configure_logging(logging.DEBUG, log_file=str(log_file))
        with log_document("docs/intro.md"):
            logging.getLogger("tidymd.headings").debug("Rewriting heading h%d -> h%d", 3, 2)
        logging.getLogger("tidymd.engine").warning("outside")

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert "DEBUG: docs/intro.md: Rewriting heading h3 -> h2" in lines
        assert "WARNING: -: outside" in lines

    def test_trace_format(self, tmp_path):
        """Trace mode adds timestamps and logger names."""
        log_file = tmp_path / "trace.log"
        configure_logging(logging.DEBUG, log_file=str(log_file), trace_mode=True)
        with log_document("a.md"):
            logging.getLogger("tidymd.parsing").debug("rendered")

        text = log_file.read_text(encoding="utf-8")
        assert "[DEBUG] [tidymd.parsing] [a.md] rendered" in text

    def test_invalid_log_file(self, tmp_path, capsys):
        """An unusable log file is reported and console logging still works."""
        package_logger = configure_logging(logging.INFO, log_file=str(tmp_path / "missing" / "x.log"))
        assert len(package_logger.handlers) == 1
        assert "Could not create log file" in capsys.readouterr().err


@pytest.mark.unit
class TestLogDocument:
    """Test the document context."""

    def test_previous_name_restored(self, tmp_path):
        """Nested documents restore the outer name, even after an error."""
        log_file = tmp_path / "nested.log"
        configure_logging(logging.INFO, log_file=str(log_file))
        log = logging.getLogger("tidymd.cli")

        with log_document("outer.md"):
            with pytest.raises(ValueError):
                with log_document("inner.md"):
                    log.info("inside")
                    raise ValueError("boom")
            log.info("back")

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert lines[-2:] == ["INFO: inner.md: inside", "INFO: outer.md: back"]

    def test_timing_logged(self, tmp_path):
        """Finishing a document logs how long it took at DEBUG level."""
        log_file = tmp_path / "timing.log"
        configure_logging(logging.DEBUG, log_file=str(log_file))
        with log_document("a.md"):
            pass
        assert "DEBUG: a.md: Finished in " in log_file.read_text(encoding="utf-8")
