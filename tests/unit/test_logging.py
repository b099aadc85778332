"""Unit tests for logging configuration."""

import os
import pytest
from loguru import logger
from meshnode.utils.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
    log_validation_result,
)
from meshnode.utils.settings import Settings
from meshnode.validation.profile import ValidationIssue
from unittest.mock import patch


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added by a test so later tests start clean."""
    yield
    logger.remove()


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_default(self, tmp_path):
        """Test default logging configuration."""
        log_file = tmp_path / 'test.log'

        configure_logging(str(log_file))
        get_logger('profile-1').info('Test message')

        assert log_file.exists()

    def test_configure_logging_with_console(self, tmp_path):
        """Test logging configuration with console output."""
        configure_logging(str(tmp_path / 'test.log'), include_console=True)

        # Should not raise any errors
        get_logger('profile-1').info('Test console message')

    def test_profile_id_is_bound(self, tmp_path):
        """Test the profile ID appears in the serialized record."""
        log_file = tmp_path / 'test.log'
        configure_logging(str(log_file))

        get_logger('abc-123').info('Bound message')

        assert 'abc-123' in log_file.read_text()

    def test_log_levels(self, tmp_path):
        """Test different log levels."""
        log_file = tmp_path / 'test.log'
        configure_logging(str(log_file), log_level='WARNING')

        test_logger = get_logger('test')
        test_logger.debug('Debug message')
        test_logger.info('Info message')
        test_logger.warning('Warning message')
        test_logger.error('Error message')

        log_content = log_file.read_text()
        assert 'Warning message' in log_content
        assert 'Error message' in log_content
        assert 'Debug message' not in log_content
        assert 'Info message' not in log_content

    def test_debug_mode_from_env(self, tmp_path):
        """Test debug mode activation from environment."""
        with patch.dict(os.environ, {'MESHNODE_DEBUG': '1'}):
            configure_logging(str(tmp_path / 'test.log'), include_console=False)

            get_logger().info('Debug mode test')


class TestSettingsDrivenLogging:
    """Test log location and levels taken from Settings."""

    def test_default_location_from_settings(self, tmp_path):
        """Test the log directory comes from settings when no file is given."""
        log_dir = tmp_path / 'nested' / 'logs'

        configure_logging(settings=Settings(log_dir=log_dir))
        get_logger('profile-1').info('Directory message')

        log_file = log_dir / 'meshnode.log'
        assert log_file.exists()
        assert 'Directory message' in log_file.read_text()

    def test_explicit_file_wins(self, tmp_path):
        """Test an explicit log file overrides the settings directory."""
        log_file = tmp_path / 'explicit.log'

        configure_logging(str(log_file), settings=Settings(log_dir=tmp_path / 'unused'))
        get_logger().info('Explicit message')

        assert log_file.exists()
        assert not (tmp_path / 'unused').exists()

    def test_configure_from_settings(self, tmp_path):
        """Test the CLI entry point honours the configured level."""
        log_file = tmp_path / 'cli.log'
        settings = Settings(log_file=str(log_file), log_level='WARNING')

        configure_from_settings(settings)
        get_logger().info('Quiet message')
        get_logger().warning('Loud message')

        log_content = log_file.read_text()
        assert 'Loud message' in log_content
        assert 'Quiet message' not in log_content

    def test_debug_overrides_level(self, tmp_path):
        """Test debug mode logs at DEBUG whatever the configured level."""
        log_file = tmp_path / 'cli.log'

        configure_from_settings(Settings(log_file=str(log_file), log_level='ERROR'), debug=True)
        get_logger().debug('Debug detail')

        assert 'Debug detail' in log_file.read_text()


class TestValidationLogging:
    """Test validation result logging."""

    def test_log_issues(self, tmp_path):
        """Test issue summary is logged with field names."""
        log_file = tmp_path / 'test.log'
        configure_logging(str(log_file), log_level='DEBUG')

        issue = ValidationIssue(field='mtu', message='MTU out of range', code='OUT_OF_RANGE')
        log_validation_result('profile-1', [issue])

        log_content = log_file.read_text()
        assert 'Profile validation found issues' in log_content
        assert 'mtu' in log_content

    def test_log_passed(self, tmp_path):
        """Test a clean validation is logged."""
        log_file = tmp_path / 'test.log'
        configure_logging(str(log_file), log_level='DEBUG')

        log_validation_result('profile-1', [])

        assert 'Profile validation passed' in log_file.read_text()
