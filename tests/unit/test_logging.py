# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for structured logging setup."""

import logging

import structlog

from src.core.config.settings import Settings
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_installs_single_root_handler(self) -> None:
        """Test that repeated setup does not stack handlers."""
        settings = Settings(log_level="INFO")

        setup_logging(settings)
        setup_logging(settings)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.INFO

    def test_quiets_sqlalchemy(self) -> None:
        """Test that engine logging is raised to WARNING."""
        setup_logging(Settings(log_level="DEBUG"))

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestContext:
    """Tests for context binding."""

    def test_bind_and_clear(self) -> None:
        """Test that bound values reach the context and can be cleared."""
        bind_context(student_id="S1")
        assert structlog.contextvars.get_contextvars()["student_id"] == "S1"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger(self) -> None:
        """Test that a logger can be obtained and used."""
        logger = get_logger("src.tests")
        logger.info("logger_ready")
