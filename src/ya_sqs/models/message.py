"""
Module: message.py
Description: Message envelope models for SQS publication and consumption.

Defines the outgoing envelope produced by formatters, the received
envelope handed to the consumer loop, and the entry/result models used
by batch publication.

Key Components:
- OutgoingMessage: Body plus optional attributes and delay
- ReceivedMessage: Body plus the single-use receipt handle
- BatchEntry: Outgoing message with its positional batch id
- BatchResult: Per-entry outcome of a SendMessageBatch call

Dependencies: pydantic, typing
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutgoingMessage(BaseModel):
    """
    Envelope for a message about to be sent.

    Attributes:
        body: Encoded message body
        attributes: Optional SQS message attributes
        delay_seconds: Optional delivery delay (0-900 seconds)
    """

    model_config = ConfigDict(frozen=True)

    body: str = Field(..., description="Encoded message body")
    attributes: Optional[Dict[str, Any]] = Field(
        default=None,
        description="SQS MessageAttributes mapping"
    )
    delay_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        le=900,
        description="Delivery delay in seconds"
    )

    def to_sqs(self) -> Dict[str, Any]:
        """Render the SQS request fields for this envelope."""
        params: Dict[str, Any] = {"MessageBody": self.body}
        if self.attributes:
            params["MessageAttributes"] = self.attributes
        if self.delay_seconds is not None:
            params["DelaySeconds"] = self.delay_seconds
        return params


class ReceivedMessage(BaseModel):
    """
    Envelope for a message returned by a receive call.

    The receipt handle is required to delete (acknowledge) the message and
    is only valid for this delivery.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(..., description="Transport message id")
    body: str = Field(..., description="Raw message body")
    receipt_handle: str = Field(..., min_length=1, description="Single-use delivery handle")
    attributes: Dict[str, Any] = Field(default_factory=dict)
    message_attributes: Dict[str, Any] = Field(default_factory=dict)
    raw: Dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_sqs(cls, raw: Dict[str, Any]) -> "ReceivedMessage":
        """Build from one entry of a ReceiveMessage response."""
        return cls(
            message_id=raw.get("MessageId", ""),
            body=raw.get("Body", ""),
            receipt_handle=raw["ReceiptHandle"],
            attributes=raw.get("Attributes", {}),
            message_attributes=raw.get("MessageAttributes", {}),
            raw=raw,
        )

    @property
    def receive_count(self) -> int:
        """Approximate number of times this message has been delivered."""
        return int(self.attributes.get("ApproximateReceiveCount", 1))


class BatchEntry(BaseModel):
    """Outgoing message tagged with its id inside one batch call."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., pattern=r"^batch_\d+$")
    message: OutgoingMessage

    @property
    def index(self) -> int:
        """Submission position encoded in the id."""
        return int(self.id.split("_", 1)[1])

    def to_sqs(self) -> Dict[str, Any]:
        return {"Id": self.id, **self.message.to_sqs()}


class BatchEntryFailure(BaseModel):
    """One entry the transport refused in a batch call."""

    id: str
    code: str = ""
    message: str = ""
    sender_fault: bool = False


class BatchResult(BaseModel):
    """
    Outcome of a batch publication.

    Attributes:
        successful: Entry id to transport message id, for accepted entries
        failed: Entries the transport refused; not retried by the publisher
    """

    successful: Dict[str, str] = Field(default_factory=dict)
    failed: List[BatchEntryFailure] = Field(default_factory=list)

    @classmethod
    def from_sqs(cls, response: Dict[str, Any]) -> "BatchResult":
        """Build from a SendMessageBatch response."""
        return cls(
            successful={
                item["Id"]: item.get("MessageId", "")
                for item in response.get("Successful", [])
            },
            failed=[
                BatchEntryFailure(
                    id=item["Id"],
                    code=item.get("Code", ""),
                    message=item.get("Message", ""),
                    sender_fault=bool(item.get("SenderFault", False)),
                )
                for item in response.get("Failed", [])
            ],
        )

    @property
    def all_successful(self) -> bool:
        return not self.failed
