import asyncio
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from messages_api.aws.clients import AWSClientManager
from messages_api.config.settings import Settings
from messages_api.errors import PublishError
from messages_api.schemas import Message

if TYPE_CHECKING:
    from mypy_boto3_sqs import SQSClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedMessage:
    """One delivery received from the queue, not yet acknowledged."""
    body: str
    receipt_handle: str
    message_id: Optional[str] = None

    def to_message(self) -> Message:
        return Message.model_validate_json(self.body)


class BaseQueue:
    """Base class for queue handling (to be extended by specific implementations)"""
    async def add_task(self, task: Dict[str, Any]) -> str:
        raise NotImplementedError

    async def get_task(self) -> Optional[QueuedMessage]:
        raise NotImplementedError

    async def ack(self, receipt_handle: str) -> None:
        raise NotImplementedError

    async def publish(self, queue_name: str, message: Message) -> str:
        raise NotImplementedError


class SQSQueue(BaseQueue):
    """Handles AWS SQS queue"""
    def __init__(
        self,
        sqs_client: "SQSClient",
        queue_name: str,
        queue_url: Optional[str] = None,
        wait_time_seconds: int = 5,
    ):
        self.sqs = sqs_client
        self.queue_name = queue_name
        self.wait_time_seconds = wait_time_seconds
        self._queue_urls: Dict[str, str] = {}
        if queue_url:
            self._queue_urls[queue_name] = queue_url

        logger.info("SQSQueue initialized")
        logger.info(f"  Queue name: {self.queue_name}")
        logger.info(f"  Queue URL: {queue_url or '(resolved on first use)'}")

    def resolve_queue_url(self, queue_name: Optional[str] = None) -> str:
        """Look up and cache the URL of a queue by name."""
        queue_name = queue_name or self.queue_name
        if queue_name not in self._queue_urls:
            response = self.sqs.get_queue_url(QueueName=queue_name)
            self._queue_urls[queue_name] = response["QueueUrl"]
        return self._queue_urls[queue_name]

    @property
    def queue_url(self) -> str:
        return self.resolve_queue_url()

    async def publish(self, queue_name: str, message: Message) -> str:
        """Send a message to the named queue as a JSON record."""
        return self._send(queue_name, message.model_dump_json())

    async def add_task(self, task: Dict[str, Any]) -> str:
        """Add a task to the SQS queue."""
        return self._send(self.queue_name, json.dumps(task))

    def _send(self, queue_name: str, body: str) -> str:
        try:
            response = self.sqs.send_message(
                QueueUrl=self.resolve_queue_url(queue_name),
                MessageBody=body,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error sending message to SQS queue '{queue_name}': {str(e)}")
            raise PublishError(f"Failed to publish to queue '{queue_name}': {e}") from e
        message_id = response.get("MessageId")
        logger.info(f"Message sent to SQS queue '{queue_name}' with ID: {message_id}")
        return message_id

    async def get_task(self) -> Optional[QueuedMessage]:
        """Long-poll one delivery. The caller acks it once processed."""
        # receive_message blocks for up to wait_time_seconds
        response = await asyncio.to_thread(
            self.sqs.receive_message,
            QueueUrl=self.queue_url,
            MaxNumberOfMessages=1,
            WaitTimeSeconds=self.wait_time_seconds,
        )
        if "Messages" in response and response["Messages"]:
            message = response["Messages"][0]
            logger.info(f"Received message {message.get('MessageId')} from SQS queue '{self.queue_name}'")
            return QueuedMessage(
                body=message["Body"],
                receipt_handle=message["ReceiptHandle"],
                message_id=message.get("MessageId"),
            )
        return None

    async def ack(self, receipt_handle: str) -> None:
        self.sqs.delete_message(
            QueueUrl=self.queue_url,
            ReceiptHandle=receipt_handle,
        )


class QueueFactory:
    """Factory to initialize the queue handler for the configured deployment"""

    queue_classes = {
        "local-dev": SQSQueue,
        "aws-mock": SQSQueue,
        "aws-prod": SQSQueue,
    }

    @staticmethod
    def get_queue_handler(settings: Settings, clients: AWSClientManager) -> SQSQueue:
        deployment_mode = settings.deployment_mode
        if deployment_mode not in QueueFactory.queue_classes:
            raise ValueError(
                f"Invalid deployment_mode: {deployment_mode}. "
                f"Choose from {list(QueueFactory.queue_classes.keys())}"
            )

        logger.info(f"Creating queue handler for mode: {deployment_mode}")
        return QueueFactory.queue_classes[deployment_mode](
            sqs_client=clients.get_sqs_client(),
            queue_name=settings.sqs_queue_name,
            queue_url=settings.sqs_queue_url,
            wait_time_seconds=settings.sqs_wait_time_seconds,
        )
