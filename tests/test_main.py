#!/usr/bin/env python3
"""
Pytest tests for the bootstrap script and logging setup
"""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

import main
from topbanana.core.exceptions import StoreError
from topbanana.core.logging_config import build_logging_config, setup_logging


class TestBootstrap:
    """Test the startup sequence with the database mocked out"""

    @patch("main.seed_quizzes")
    @patch("main.QuizRepository")
    @patch("main.MigrationRunner")
    @patch("main.setup_logging")
    def test_migrates_pings_and_seeds(
        self, mock_logging, mock_runner, mock_repository, mock_seed
    ):
        """Test the full startup with --seed"""
        assert main.main(["--seed"]) == 0

        mock_logging.assert_called_once_with(main.settings.LOG_LEVEL)
        mock_runner.assert_called_once_with(
            main.settings.DATABASE_URL, main.settings.MIGRATIONS_PATH
        )
        mock_runner.return_value.upgrade.assert_called_once_with()
        mock_repository.return_value.ping.assert_called_once_with()
        mock_seed.assert_called_once_with(mock_repository.return_value)

    @patch("main.seed_quizzes")
    @patch("main.QuizRepository")
    @patch("main.MigrationRunner")
    @patch("main.setup_logging")
    def test_skips_seed_by_default(
        self, mock_logging, mock_runner, mock_repository, mock_seed
    ):
        """Test that seeding only happens on request"""
        assert main.main([]) == 0

        mock_seed.assert_not_called()

    @patch("main.QuizRepository")
    @patch("main.MigrationRunner")
    @patch("main.setup_logging")
    def test_unreachable_database(self, mock_logging, mock_runner, mock_repository):
        """Test that a failed ping gives a non-zero exit code"""
        error = StoreError("failed to ping database")
        error.__cause__ = OperationalError("SELECT 1", {}, Exception("unable to open"))
        mock_repository.return_value.ping.side_effect = error

        assert main.main([]) == 1


class TestLoggingConfig:
    """Test the logging dictConfig"""

    def test_level_applies_to_package_logger(self):
        """Test that the requested level reaches handler and package logger"""
        config = build_logging_config("DEBUG")

        assert config["loggers"]["topbanana"]["level"] == "DEBUG"
        assert config["handlers"]["console"]["level"] == "DEBUG"
        assert config["disable_existing_loggers"] is False

    @patch("topbanana.core.logging_config.logging.config.dictConfig")
    def test_setup_logging_normalises_level(self, mock_dict_config):
        """Test that lower-case levels are accepted"""
        setup_logging("info")

        config = mock_dict_config.call_args[0][0]
        assert config["loggers"]["topbanana"]["level"] == "INFO"
