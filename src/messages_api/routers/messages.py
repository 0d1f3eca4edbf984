from uuid import UUID, uuid4

from fastapi import (
    APIRouter,
    Path,
    Request,
)

from messages_api.relay import MessageRelay
from messages_api.schemas import (
    CreateMessageRequest,
    CreateMessageResponse,
    GetMessageResponse,
    Message,
)

router = APIRouter()


@router.post("/messages", response_model=CreateMessageResponse)
async def create_message(request: Request, body: CreateMessageRequest) -> CreateMessageResponse:
    """
    Publish a message to the queue and store its content.

    In direct mode the content is retrievable as soon as this returns. In
    delegated mode it becomes retrievable once the queue consumer has
    processed the message.

    Returns:
        CreateMessageResponse: The uuid to retrieve the message with
    """
    relay: MessageRelay = request.app.state.relay
    message = Message(uuid=body.uuid or uuid4(), content=body.content)
    uuid = await relay.create(message)
    return CreateMessageResponse(uuid=uuid)


@router.get("/messages/{uuid}", response_model=GetMessageResponse)
async def get_message(
    request: Request,
    uuid: UUID = Path(..., description="The uuid returned when the message was created"),
) -> GetMessageResponse:
    """
    Retrieve the content stored for a message.

    Responds 404 if no content is stored under the uuid, including a message
    that was published in delegated mode but not yet processed.
    """
    relay: MessageRelay = request.app.state.relay
    message = relay.get(uuid)
    return GetMessageResponse(uuid=message.uuid, content=message.content)
