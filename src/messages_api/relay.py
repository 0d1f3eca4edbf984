"""Message relay: turns create requests into queue publishes and store writes."""
import logging
from enum import Enum
from uuid import UUID

from messages_api.adapters.queue import BaseQueue
from messages_api.adapters.storage import ObjectStore
from messages_api.config.settings import RelayConfig
from messages_api.schemas import Message
from messages_api.utils.decorators import async_log_execution_time, log_execution_time

logger = logging.getLogger(__name__)


class RelayMode(str, Enum):
    """Where the content upload happens for a created message."""
    DIRECT = "direct"
    DELEGATED = "delegated"


class MessageRelay:
    """
    Publishes created messages and serves stored content back by uuid.

    In direct mode the content is uploaded before ``create`` returns. In
    delegated mode ``create`` only publishes and the queue consumer performs
    the upload, so a ``get`` right after ``create`` may not find the message yet.
    """

    def __init__(
        self,
        publisher: BaseQueue,
        store: ObjectStore,
        config: RelayConfig,
        mode: RelayMode = RelayMode.DIRECT,
    ):
        self.publisher = publisher
        self.store = store
        self.config = config
        self.mode = RelayMode(mode)
        logger.info(
            f"MessageRelay initialized in {self.mode.value} mode "
            f"(queue: {config.queue_name}, bucket: {config.bucket_name})"
        )

    @async_log_execution_time
    async def create(self, message: Message) -> UUID:
        """
        Publish the message and, in direct mode, store its content.

        A publish failure raises PublishError before any upload is attempted.
        An upload failure raises UploadError even though the message was
        already published; nothing is rolled back.
        """
        await self.publisher.publish(self.config.queue_name, message)
        if self.mode is RelayMode.DIRECT:
            self.store.upload(
                self.config.bucket_name,
                message.key,
                message.content.encode("utf-8"),
            )
        logger.info(f"Created message {message.uuid} ({self.mode.value})")
        return message.uuid

    @log_execution_time
    def get(self, uuid: UUID) -> Message:
        """Read the stored content for uuid. Raises MessageNotFoundError if absent."""
        content = self.store.download_as_string(self.config.bucket_name, str(uuid))
        return Message(uuid=uuid, content=content)
