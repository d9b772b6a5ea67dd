"""
Module: client.py
Description: aioboto3 transport for Amazon SQS.

Performs the create, send, batch-send, receive and delete calls the
queue core needs. Transient failures are retried; everything else is
logged and re-raised to the caller.
"""

from typing import Any, Dict, List, Optional, Sequence

from aioboto3 import Session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config.settings import settings
from ..models.message import BatchEntry, BatchResult, OutgoingMessage, ReceivedMessage
from ..utils.logger import get_logger
from .retry import call_with_retry

logger = get_logger(__name__)

# Keys of remote_config that configure the session rather than the client
SESSION_KEYS = {
    "aws_access_key_id",
    "aws_secret_access_key",
    "aws_session_token",
    "region_name",
    "profile_name",
}


def _error_fields(e: Exception) -> Dict[str, Any]:
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        return {"error_code": error.get("Code"), "error_message": error.get("Message")}
    return {"error": str(e), "error_type": type(e).__name__}


class SQSTransport:
    """
    SQS transport backed by aioboto3.

    Attributes:
        session: aioboto3 session built from the remote configuration
        retry_attempts: Attempts for transient failures per call

    Example:
        >>> transport = SQSTransport({"region_name": "eu-west-1"})
        >>> url = await transport.create_queue("jobs")
    """

    def __init__(
        self,
        remote_config: Optional[Dict[str, Any]] = None,
        *,
        retry_attempts: Optional[int] = None
    ):
        """
        Initialize SQS transport.

        Args:
            remote_config: Session settings (region_name, credentials, profile_name)
                and client settings (endpoint_url, ...). Missing region and
                endpoint fall back to settings.
            retry_attempts: Attempts for transient failures (default from settings)
        """
        config = dict(remote_config or {})
        config.setdefault("region_name", settings.aws_region)
        if settings.endpoint_url:
            config.setdefault("endpoint_url", settings.endpoint_url)

        session_kwargs = {k: v for k, v in config.items() if k in SESSION_KEYS}
        self.client_kwargs = {k: v for k, v in config.items() if k not in SESSION_KEYS}
        self.session = Session(**session_kwargs)
        self.retry_attempts = retry_attempts or settings.retry_attempts
        self.client_config = Config(
            retries={"max_attempts": 0, "mode": "standard"},
            read_timeout=70,  # > 20s long-poll
            connect_timeout=3,
        )

        logger.info(
            "SQS transport initialized",
            region=session_kwargs.get("region_name"),
            endpoint_url=self.client_kwargs.get("endpoint_url")
        )

    def _client(self):
        return self.session.client("sqs", config=self.client_config, **self.client_kwargs)

    async def _call(self, operation: str, **params: Any) -> Dict[str, Any]:
        async def invoke() -> Dict[str, Any]:
            async with self._client() as sqs:
                return await getattr(sqs, operation)(**params)

        try:
            return await call_with_retry(invoke, attempts=self.retry_attempts)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "SQS call failed",
                operation=operation,
                queue_url=params.get("QueueUrl"),
                **_error_fields(e)
            )
            raise

    async def create_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> str:
        """
        Create the queue (or return the existing one with the same attributes).

        Args:
            name: Queue name
            attributes: Optional CreateQueue attributes

        Returns:
            Queue URL
        """
        if not name or not isinstance(name, str):
            raise ValueError("name must be a non-empty string")

        params: Dict[str, Any] = {"QueueName": name}
        if attributes:
            params["Attributes"] = attributes

        response = await self._call("create_queue", **params)
        queue_url = response["QueueUrl"]

        logger.info("Queue resolved", queue_name=name, queue_url=queue_url)
        return queue_url

    async def send_message(self, queue_url: str, message: OutgoingMessage) -> str:
        """Send one message; returns the SQS message id."""
        response = await self._call("send_message", QueueUrl=queue_url, **message.to_sqs())
        message_id = response.get("MessageId", "")

        logger.debug("Message sent to SQS", queue_url=queue_url, message_id=message_id)
        return message_id

    async def send_message_batch(self, queue_url: str, entries: Sequence[BatchEntry]) -> BatchResult:
        """
        Send up to 10 entries in one call.

        Entries refused by SQS are reported in the result, not raised.
        """
        response = await self._call(
            "send_message_batch",
            QueueUrl=queue_url,
            Entries=[entry.to_sqs() for entry in entries]
        )
        result = BatchResult.from_sqs(response)

        if result.failed:
            logger.warning(
                "Batch entries rejected by SQS",
                queue_url=queue_url,
                failed=[f.id for f in result.failed],
                codes=[f.code for f in result.failed]
            )
        else:
            logger.debug("Batch sent to SQS", queue_url=queue_url, count=len(entries))

        return result

    async def receive_messages(
        self,
        queue_url: str,
        max_messages: int,
        wait_seconds: int
    ) -> List[ReceivedMessage]:
        """Long-poll for messages; returns an empty list when none arrive."""
        response = await self._call(
            "receive_message",
            QueueUrl=queue_url,
            MaxNumberOfMessages=max(1, min(int(max_messages), 10)),
            WaitTimeSeconds=max(0, min(int(wait_seconds), 20)),
            AttributeNames=["All"],
            MessageAttributeNames=["All"]
        )
        return [ReceivedMessage.from_sqs(raw) for raw in response.get("Messages", [])]

    async def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """Delete (acknowledge) a received message."""
        if not receipt_handle or not isinstance(receipt_handle, str):
            raise ValueError("receipt_handle must be a non-empty string")

        await self._call("delete_message", QueueUrl=queue_url, ReceiptHandle=receipt_handle)
        logger.debug("Message deleted from SQS", queue_url=queue_url)
