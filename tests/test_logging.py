"""Tests for logging configuration."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

from ghstats.core.logging import setup_logging


class TestSetupLogging:
    def test_default_level_is_warning(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GHSTATS_LOG_LEVEL", None)
            setup_logging()
        assert logging.getLogger("ghstats").level == logging.WARNING

    def test_verbose_is_debug(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GHSTATS_LOG_LEVEL", None)
            setup_logging(verbose=True)
        assert logging.getLogger("ghstats").level == logging.DEBUG

    def test_env_level_wins(self):
        with patch.dict(os.environ, {"GHSTATS_LOG_LEVEL": "error", "GHSTATS_LOG_FORMAT": "json"}):
            setup_logging(verbose=True)
        assert logging.getLogger("ghstats").level == logging.ERROR

    def test_request_lines_only_when_verbose(self):
        setup_logging()
        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging(verbose=True)
        assert logging.getLogger("httpx").level == logging.INFO
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_third_party_loggers_stay_quiet(self):
        with patch.dict(os.environ, {"GHSTATS_LOG_LEVEL": "debug"}):
            setup_logging()
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("ghstats").level == logging.DEBUG
