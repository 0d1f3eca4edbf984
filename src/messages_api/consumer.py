"""Queue consumer that stores the content of published messages (delegated mode)."""
import asyncio
import logging

import pydantic

from messages_api.adapters.queue import BaseQueue
from messages_api.adapters.storage import ObjectStore
from messages_api.config.settings import RelayConfig
from messages_api.errors import ConsumerProcessingError, UploadError
from messages_api.schemas import Message
from messages_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

MAX_BACKOFF_SECONDS = 30


class MessageConsumer:
    def __init__(self, queue: BaseQueue, store: ObjectStore, config: RelayConfig):
        """Initialize consumer with queue and store"""
        self.queue = queue
        self.store = store
        self.config = config
        self.running = False
        logger.info(f"MessageConsumer initialized for queue '{config.queue_name}'")

    @log_execution_time
    def handle(self, message: Message) -> None:
        """
        Upload the message content under its uuid.

        Redelivering the same message overwrites the object with the same
        content, so handling is idempotent.
        """
        try:
            self.store.upload(
                self.config.bucket_name,
                message.key,
                message.content.encode("utf-8"),
            )
        except UploadError as e:
            raise ConsumerProcessingError(f"Failed to store message {message.uuid}: {e}") from e

    async def poll_once(self) -> bool:
        """
        Receive and process at most one delivery.

        The delivery is acknowledged only after its content is stored; on
        failure it stays on the queue and SQS redelivers it once the
        visibility timeout expires (or moves it to a dead-letter queue).

        Returns:
            True if a delivery was received, False if the queue was empty.
        """
        queued = await self.queue.get_task()
        if queued is None:
            return False

        try:
            message = queued.to_message()
        except pydantic.ValidationError as e:
            raise ConsumerProcessingError(
                f"Undecodable delivery {queued.message_id}: {e}"
            ) from e

        logger.info(f"Received message: {message.uuid}")
        self.handle(message)
        await self.queue.ack(queued.receipt_handle)
        logger.info(f"Stored message {message.uuid} in bucket '{self.config.bucket_name}'")
        return True

    async def listen_for_messages(self):
        """Listen for deliveries until stopped, backing off after errors"""
        logger.info("Consumer started listening for messages")
        self.running = True
        consecutive_errors = 0

        while self.running:
            try:
                received = await self.poll_once()
                consecutive_errors = 0
                if not received:
                    await asyncio.sleep(1.0)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                consecutive_errors += 1
                logger.error(f"Error in message processing loop: {str(e)}", exc_info=True)

                backoff_time = min(MAX_BACKOFF_SECONDS, 2 ** consecutive_errors)
                logger.warning(f"Backing off for {backoff_time} seconds after error...")
                await asyncio.sleep(backoff_time)

        logger.info("Consumer stopped")

    def stop(self):
        """Stop the consumer gracefully"""
        logger.info("Stopping consumer...")
        self.running = False
