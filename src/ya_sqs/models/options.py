"""
Module: options.py
Description: Construction options for a queue handle.

Validates the options accepted by Queue/create_queue. Exactly one of
`name` (resolved lazily through CreateQueue) or `url` (pre-resolved)
identifies the remote queue.
"""

import re
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config.settings import settings


class QueueOptions(BaseModel):
    """
    Options recognised when constructing a queue.

    Attributes:
        name: Logical queue name, created or looked up on first use
        url: Pre-resolved queue URL
        wait_time: Long-poll wait in seconds for each receive call
        max_messages: Maximum messages fetched per receive call
        queue_attributes: Attributes passed to CreateQueue when resolving by name
        formatter: Pluggable formatter (defaults to JsonFormatter)
        client: Pluggable transport (defaults to SQSTransport)
        remote_config: aioboto3 session/client settings (region, credentials, endpoint)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid", populate_by_name=True)

    name: Optional[str] = Field(default=None, description="Queue name")
    url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("url", "queue_url", "queueUrl"),
        description="Queue URL"
    )
    wait_time: int = Field(
        default_factory=lambda: settings.wait_time,
        validation_alias=AliasChoices("wait_time", "waitTime"),
        ge=0,
        le=20,
        description="Long-poll wait in seconds"
    )
    max_messages: int = Field(
        default_factory=lambda: settings.max_messages,
        ge=1,
        le=10,
        description="Messages per receive call"
    )
    queue_attributes: Dict[str, str] = Field(default_factory=dict)
    formatter: Optional[Any] = None
    client: Optional[Any] = Field(default=None, validation_alias=AliasChoices("client", "sqs"))
    remote_config: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("remote_config", "remoteConfig", "aws")
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Validate SQS queue naming rules."""
        if v is None:
            return v
        if not re.match(r'^[a-zA-Z0-9_-]{1,80}(\.fifo)?$', v):
            raise ValueError(
                "name must be 1-80 letters, numbers, hyphens or underscores"
            )
        return v

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("url must be a non-empty string")
        return v

    @model_validator(mode='after')
    def validate_identity(self) -> "QueueOptions":
        """Exactly one of name/url identifies the queue."""
        if not self.name and not self.url:
            raise ValueError("Missing queue option: name or url")
        if self.name and self.url:
            raise ValueError("Queue options name and url are mutually exclusive")
        return self
