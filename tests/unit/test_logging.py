"""Unit tests for the logging helpers."""

import logging

import pytest

from regwatch.utils.logging import (
    CheckContextFormatter,
    configure_logging,
    get_check_logger,
    get_logger,
)


@pytest.fixture(autouse=True)
def restore_logger():
    """Put the package logger back the way it was."""
    logger = logging.getLogger("regwatch")
    level, handlers, propagate = logger.level, list(logger.handlers), logger.propagate
    yield
    logger.setLevel(level)
    logger.handlers = handlers
    logger.propagate = propagate


@pytest.fixture
def lines():
    """Capture formatted regwatch log lines."""
    captured = []

    class Capture(logging.Handler):
        def emit(self, record):
            captured.append(self.format(record))

    handler = Capture()
    handler.setFormatter(CheckContextFormatter("%(levelname)s: %(message)s"))
    logger = logging.getLogger("regwatch")
    logger.handlers = [handler]
    logger.setLevel(logging.INFO)
    return captured


class TestGetLogger:
    """Tests for logger lookup."""

    def test_prefixes_name(self):
        """Test module names are placed under the package logger."""
        assert get_logger("registry.tags").name == "regwatch.registry.tags"

    def test_keeps_package_names(self):
        """Test names already under the package are untouched."""
        assert get_logger("regwatch.core.resolver").name == "regwatch.core.resolver"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_and_single_handler(self):
        """Test the level is set and repeated calls do not stack handlers."""
        configure_logging(level="debug")
        configure_logging(level="WARNING")

        logger = logging.getLogger("regwatch")
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, CheckContextFormatter)
        assert logger.propagate is False


class TestCheckLogger:
    """Tests for check context in log lines."""

    def test_image_context(self, lines):
        """Test the image a check is about follows the message."""
        log = get_check_logger("core.resolver", image="ghcr.io/owner/name:1.0.0")
        log.info("Update available: %s -> %s", "1.0.0", "1.1.0")

        assert lines == ["INFO: Update available: 1.0.0 -> 1.1.0 image=ghcr.io/owner/name:1.0.0"]

    def test_registry_context(self, lines):
        """Test batch group messages carry the registry."""
        get_check_logger("core.resolver", registry="ghcr.io").warning("Authentication failed")
        assert lines == ["WARNING: Authentication failed registry=ghcr.io"]

    def test_no_context(self, lines):
        """Test plain module loggers add nothing."""
        get_logger("registry.tags").info("hello")
        assert lines == ["INFO: hello"]

    def test_call_extra_kept(self, lines):
        """Test extra fields given at the call site are merged in."""
        log = get_check_logger("core.resolver", image="ghcr.io/owner/name:1.0.0")
        log.info("checked", extra={"registry": "ghcr.io"})
        assert lines == ["INFO: checked registry=ghcr.io image=ghcr.io/owner/name:1.0.0"]
