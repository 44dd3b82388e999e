"""Tests for utility functions."""

import importlib.metadata
import logging
import re
from unittest.mock import patch

from dotctl.utils import get_version, setup_logging, timestamp


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_verbose_enables_debug(self):
        """Verbose mode logs debug records."""
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_default_shows_warnings_only(self):
        """Default mode hides info and debug."""
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.WARNING


class TestGetVersion:
    """Tests for get_version function."""

    def test_returns_version_string(self):
        version = get_version()
        assert isinstance(version, str)
        assert len(version) > 0

    def test_returns_development_when_not_installed(self):
        """Returns '(development)' when package not found."""
        with patch("dotctl.utils.importlib.metadata.version") as mock:
            mock.side_effect = importlib.metadata.PackageNotFoundError()
            assert get_version() == "(development)"


class TestTimestamp:
    """Tests for timestamp."""

    def test_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", timestamp())
