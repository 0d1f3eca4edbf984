####################################
# --- Request/response schemas --- #
####################################

from typing import Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


class Message(BaseModel):
    """The unit of work: published to the queue and stored under its uuid."""
    uuid: UUID = Field(description="Identifier of the message, also its object key.")
    content: str = Field(description="Arbitrary text payload.")

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        """Object key the content is stored under."""
        return str(self.uuid)


class CreateMessageRequest(BaseModel):
    """Request body for `POST /api/messages`."""
    uuid: Optional[UUID] = Field(
        None,
        description="Identifier to store the message under. Generated by the server when omitted.",
    )
    content: str = Field(description="The message content.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uuid": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
                "content": "Hello, world!",
            }
        }
    )


class CreateMessageResponse(BaseModel):
    """Response model for `POST /api/messages`."""
    uuid: UUID = Field(description="The canonical identifier of the created message.")


class GetMessageResponse(BaseModel):
    """Response model for `GET /api/messages/:uuid`."""
    uuid: UUID
    content: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "uuid": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
                "content": "Hello, world!",
            }
        }
    )
