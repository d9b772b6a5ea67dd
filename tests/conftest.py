"""
Module: conftest.py
Description: Shared pytest fixtures for ya-sqs tests.

Provides an in-memory transport, queue factories and an event recorder
so the consumer loop can be exercised without AWS.
"""

import pytest
from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ya_sqs.config.settings import QueueSettings
from ya_sqs.models.events import QueueEventType
from ya_sqs.sqs_queue.memory import InMemoryTransport
from ya_sqs.sqs_queue.queue import Queue


class TestSettings(QueueSettings):
    """Test settings that don't read environment variables or .env files."""

    model_config = SettingsConfigDict(
        env_prefix="YA_SQS_TEST_",
        env_file=None,
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="DEBUG", description="Logging level")
    wait_time: int = Field(default=0, ge=0, le=20)
    retry_attempts: int = Field(default=2, ge=1, le=10)


class EventRecorder:
    """Collects every event a queue emits, in order."""

    def __init__(self, queue: Queue):
        self.events = []
        for event_type in QueueEventType:
            queue.on(event_type, self.events.append)

    def types(self):
        return [event.type.value for event in self.events]

    def of(self, event_type):
        return [event for event in self.events if event.type == QueueEventType(event_type)]


@pytest.fixture
def test_settings():
    """Provide test configuration settings."""
    return TestSettings()


@pytest.fixture
def transport():
    """Provide a fresh in-memory transport."""
    return InMemoryTransport()


@pytest.fixture
def make_queue(transport):
    """
    Build queues bound to the in-memory transport.

    Defaults to resolving `jobs` by name with no long-poll wait.
    """
    def factory(**options):
        options.setdefault("client", transport)
        options.setdefault("wait_time", 0)
        if "url" not in options:
            options.setdefault("name", "jobs")
        return Queue(**options)

    return factory


@pytest.fixture
def recorder():
    """Attach an EventRecorder to a queue."""
    return EventRecorder
