"""
Module: test_settings.py
Description: Unit tests for environment configuration.
"""

import pytest
from pydantic import ValidationError

from ya_sqs.config.settings import QueueSettings


class TestQueueSettings:
    """Test cases for QueueSettings."""

    def test_test_settings_defaults(self, test_settings):
        assert test_settings.log_level == "DEBUG"
        assert test_settings.wait_time == 0
        assert test_settings.max_messages == 10

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("YA_SQS_WAIT_TIME", "5")
        monkeypatch.setenv("YA_SQS_AWS_REGION", "eu-central-1")
        monkeypatch.setenv("YA_SQS_LOG_LEVEL", "warning")

        settings = QueueSettings(_env_file=None)

        assert settings.wait_time == 5
        assert settings.aws_region == "eu-central-1"
        assert settings.log_level == "WARNING"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="log_level must be one of"):
            QueueSettings(_env_file=None, log_level="LOUD")

    def test_wait_time_limit(self):
        with pytest.raises(ValidationError):
            QueueSettings(_env_file=None, wait_time=21)

    def test_endpoint_url(self):
        assert QueueSettings(_env_file=None, endpoint_url="").endpoint_url is None
        assert QueueSettings(_env_file=None, endpoint_url="http://localhost:9324").endpoint_url == "http://localhost:9324"

        with pytest.raises(ValidationError, match="endpoint_url"):
            QueueSettings(_env_file=None, endpoint_url="localhost:9324")
