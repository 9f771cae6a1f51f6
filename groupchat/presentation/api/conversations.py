"""
Conversations API Router - conversation membership and reads.

Routes:
- GET  /conversations                      ids of the caller's conversations
- POST /conversations                      initiate (or reuse) a conversation
- GET  /conversations/history              every conversation of the caller, in full
- GET  /conversations/{id}?since=<iso>     one conversation (members + messages)
- GET  /conversations/{id}/members
- POST /conversations/{id}/join
- POST /conversations/{id}/leave
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from groupchat.application.commands.conversations import (
    InitiateConversationCommand,
    InitiateConversationHandler,
    JoinConversationCommand,
    JoinConversationHandler,
    LeaveConversationCommand,
    LeaveConversationHandler,
)
from groupchat.application.dto.conversation import (
    ConversationDTO,
    ConversationHistoryDTO,
    ConversationIdsDTO,
)
from groupchat.application.dto.user import UserProfileDTO
from groupchat.application.queries.conversations import (
    ListConversationIdsHandler,
    ListConversationIdsQuery,
    ListMembersHandler,
    ListMembersQuery,
)
from groupchat.application.queries.messages import (
    GetConversationHandler,
    GetConversationHistoryHandler,
    GetConversationHistoryQuery,
    GetConversationQuery,
)
from groupchat.domain.value_objects.conversation_id import ConversationId
from groupchat.domain.value_objects.message_timestamp import MessageTimestamp
from groupchat.domain.value_objects.user_id import UserId
from groupchat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class InitiateConversationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    other_user_ids: list[str] = Field(alias="otherUserIds")


class InitiateConversationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")


class MembersResponse(BaseModel):
    users: list[UserProfileDTO]


# ==================== ROUTER ====================

router = APIRouter(prefix="/conversations", tags=["conversations"])


# ==================== ENDPOINTS ====================


@router.get("", response_model=ConversationIdsDTO)
@inject
async def list_conversation_ids(
    handler: FromDishka[ListConversationIdsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    conversation_ids = await handler.execute(
        ListConversationIdsQuery(current_user.user_id)
    )
    return ConversationIdsDTO(conversation_ids=[cid.value for cid in conversation_ids])


@router.post("", response_model=InitiateConversationResponse)
@inject
async def initiate_conversation(
    request: InitiateConversationRequest,
    handler: FromDishka[InitiateConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Returns the existing conversation for this exact group, or a new one."""
    conversation_id = await handler.execute(
        InitiateConversationCommand(
            initiator_id=current_user.user_id,
            other_user_ids=tuple(UserId(uid) for uid in request.other_user_ids),
        )
    )
    return InitiateConversationResponse(conversation_id=conversation_id.value)


# Declared before /{conversation_id} so "history" is not taken for an id
@router.get("/history", response_model=ConversationHistoryDTO)
@inject
async def get_conversation_history(
    handler: FromDishka[GetConversationHistoryHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    snapshots = await handler.execute(GetConversationHistoryQuery(current_user.user_id))
    return ConversationHistoryDTO(
        conversations=[ConversationDTO.from_snapshot(s) for s in snapshots]
    )


@router.get("/{conversation_id}", response_model=ConversationDTO)
@inject
async def get_conversation(
    conversation_id: str,
    handler: FromDishka[GetConversationHandler],
    since: Optional[str] = Query(default=None),
    current_user: AuthUser = Depends(get_current_user),
):
    snapshot = await handler.execute(
        GetConversationQuery(
            conversation_id=ConversationId(conversation_id),
            requester_id=current_user.user_id,
            since=MessageTimestamp.parse(since) if since else None,
        )
    )
    return ConversationDTO.from_snapshot(snapshot)


@router.get("/{conversation_id}/members", response_model=MembersResponse)
@inject
async def list_members(
    conversation_id: str,
    handler: FromDishka[ListMembersHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    users = await handler.execute(ListMembersQuery(ConversationId(conversation_id)))
    return MembersResponse(users=[UserProfileDTO.from_entity(user) for user in users])


@router.post("/{conversation_id}/join", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def join_conversation(
    conversation_id: str,
    handler: FromDishka[JoinConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    await handler.execute(
        JoinConversationCommand(
            user_id=current_user.user_id,
            conversation_id=ConversationId(conversation_id),
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{conversation_id}/leave", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def leave_conversation(
    conversation_id: str,
    handler: FromDishka[LeaveConversationHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    await handler.execute(
        LeaveConversationCommand(
            user_id=current_user.user_id,
            conversation_id=ConversationId(conversation_id),
        )
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
