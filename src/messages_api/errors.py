"""Exceptions raised by the relay and the handlers that turn them into HTTP responses."""

import logging

import pydantic
from fastapi import (
    Request,
    status,
)
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MessagesApiError(Exception):
    """Base class for relay failures."""


class PublishError(MessagesApiError):
    """The queue was unreachable or rejected the message."""


class UploadError(MessagesApiError):
    """Writing message content to the object store failed."""


class StorageReadError(MessagesApiError):
    """Reading message content from the object store failed for a reason other than a missing key."""


class MessageNotFoundError(MessagesApiError):
    """No stored content exists under the requested key."""

    def __init__(self, key: str):
        super().__init__(f"Message '{key}' not found")
        self.key = key


class ConsumerProcessingError(MessagesApiError):
    """The queue consumer could not store a delivered message."""


async def handle_message_not_found(request: Request, exc: MessageNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


async def handle_relay_errors(request: Request, exc: MessagesApiError) -> JSONResponse:
    """Surface publish and storage failures to the caller."""
    logger.error(f"{type(exc).__name__} while handling {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": [
                {
                    "msg": error["msg"],
                    "input": error["input"],
                }
                for error in errors
            ]
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of the route handlers."""
    try:
        return await call_next(request)
    except Exception as err:  # pylint: disable=broad-except
        logger.exception(err)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
