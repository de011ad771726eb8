"""
Unit tests for logger configuration.
"""

import logging

import pytest
from colorlog import ColoredFormatter

from diagnostics_deployer import logger as deployer_logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    deployer_logger.configure_logger("")


class TestConfigureLogger:
    """Tests for configure_logger()."""

    def test_default_is_info(self):
        configured = deployer_logger.configure_logger("")

        assert configured.level == logging.INFO
        assert deployer_logger.get_debug_mode() is False

    @pytest.mark.parametrize("mode", ["DEBUG", "debug", "Debug"])
    def test_debug_mode(self, mode):
        configured = deployer_logger.configure_logger(mode)

        assert configured.level == logging.DEBUG
        assert deployer_logger.get_debug_mode() is True

    def test_single_colored_handler(self):
        deployer_logger.configure_logger("DEBUG")
        deployer_logger.configure_logger("")

        handlers = logging.getLogger("diagnostics_deployer").handlers
        assert handlers == [deployer_logger._console]
        assert isinstance(handlers[0].formatter, ColoredFormatter)

    def test_debug_format_names_module(self):
        deployer_logger.configure_logger("DEBUG")
        assert "%(name)s" in deployer_logger._console.formatter._fmt

        deployer_logger.configure_logger("")
        assert "%(name)s" not in deployer_logger._console.formatter._fmt

    def test_module_loggers_propagate_to_package_logger(self):
        child = logging.getLogger("diagnostics_deployer.core.executor")

        assert child.getEffectiveLevel() == logging.getLogger("diagnostics_deployer").level


class TestPrintStackTrace:
    """Tests for print_stack_trace()."""

    def test_silent_outside_debug_mode(self):
        with pytest.MonkeyPatch.context() as mp:
            calls = []
            mp.setattr(deployer_logger.logger, "error", calls.append)
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                deployer_logger.print_stack_trace()

        assert calls == []

    def test_logs_traceback_in_debug_mode(self):
        deployer_logger.configure_logger("DEBUG")
        with pytest.MonkeyPatch.context() as mp:
            calls = []
            mp.setattr(deployer_logger.logger, "error", calls.append)
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                deployer_logger.print_stack_trace()

        assert len(calls) == 1
        assert "RuntimeError: boom" in calls[0]
