import asyncio
import logging
from contextlib import asynccontextmanager
from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute

from messages_api.adapters.queue import QueueFactory
from messages_api.adapters.storage import ObjectStore
from messages_api.aws.clients import AWSClientManager
from messages_api.config.settings import Settings
from messages_api.consumer import MessageConsumer
from messages_api.errors import (
    MessageNotFoundError,
    MessagesApiError,
    handle_broad_exceptions,
    handle_message_not_found,
    handle_pydantic_validation_errors,
    handle_relay_errors,
)
from messages_api.relay import MessageRelay, RelayMode
from messages_api.routers.health import router as health_router
from messages_api.routers.messages import router as messages_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()

    clients = AWSClientManager(settings)
    store = ObjectStore(clients.get_s3_client())
    queue = QueueFactory.get_queue_handler(settings, clients)
    relay_config = settings.relay_config
    relay = MessageRelay(
        publisher=queue,
        store=store,
        config=relay_config,
        mode=RelayMode(settings.relay_mode),
    )
    consumer = MessageConsumer(queue=queue, store=store, config=relay_config)

    app = FastAPI(
        title="Messages API",
        summary="Relay messages to SQS and store their content in S3",
        version="v1",
        description=dedent(
            """\
        Messages are published to an SQS queue and their content is stored in
        an S3 bucket under the message uuid.

        | Relay mode | Content stored by |
        | --- | --- |
        | `direct` | the `POST /api/messages` request itself |
        | `delegated` | the queue consumer, after the request returns |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=consumer_lifespan,
    )

    app.state.settings = settings
    app.state.clients = clients
    app.state.store = store
    app.state.queue = queue
    app.state.relay = relay
    app.state.consumer = consumer

    app.include_router(messages_router, prefix="/api", tags=["messages"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=MessageNotFoundError,
        handler=handle_message_not_found,
    )
    app.add_exception_handler(
        exc_class_or_status_code=MessagesApiError,
        handler=handle_relay_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


@asynccontextmanager
async def consumer_lifespan(app: FastAPI):
    """Run the queue consumer alongside the API in delegated mode."""
    settings: Settings = app.state.settings
    if not (settings.is_delegated and settings.consumer_enabled):
        yield
        return

    consumer: MessageConsumer = app.state.consumer
    task = asyncio.create_task(consumer.listen_for_messages())
    logger.info("Started in-process queue consumer")
    try:
        yield
    finally:
        consumer.stop()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Stopped in-process queue consumer")


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
