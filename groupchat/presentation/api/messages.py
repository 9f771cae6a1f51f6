"""
Messages API Router - posting to a conversation.

Reading messages goes through GET /conversations/{id} (see conversations.py).
"""

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from groupchat.application.commands.messages import (
    PostMessageCommand,
    PostMessageHandler,
)
from groupchat.application.dto.message import MessageDTO
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.presentation.dependencies.auth import AuthUser, get_current_user


class PostMessageRequest(BaseModel):
    message: str
    notify: bool = False


router = APIRouter(prefix="/conversations", tags=["messages"])


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def post_message(
    conversation_id: str,
    request: PostMessageRequest,
    handler: FromDishka[PostMessageHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Post as the caller. With notify=true, other members get a push notification."""
    message = await handler.execute(
        PostMessageCommand(
            sender_id=current_user.user_id,
            conversation_id=ConversationId(conversation_id),
            text=request.message,
            notify=request.notify,
        )
    )
    return MessageDTO.from_entity(message)
