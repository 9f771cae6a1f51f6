"""Test doubles and hand wiring shared by the handler tests."""

import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Optional

import fakeredis
import jwt

from groupchat.application.commands.conversations import (
    InitiateConversationHandler,
    JoinConversationHandler,
    LeaveConversationHandler,
)
from groupchat.application.commands.messages import PostMessageHandler
from groupchat.application.commands.tasks import (
    RepairSenderSnapshotsHandler,
    SendPushNotificationsHandler,
)
from groupchat.application.commands.users import (
    DeleteUserHandler,
    RegisterUserWithEmailHandler,
    RegisterUserWithPhoneHandler,
    RegisterUsersHandler,
    UpdateUserHandler,
)
from groupchat.application.queries.conversations import (
    FindSharedConversationHandler,
    ListConversationIdsHandler,
    ListMembersHandler,
)
from groupchat.application.queries.messages import (
    GetConversationHandler,
    GetConversationHistoryHandler,
)
from groupchat.application.queries.users import (
    GetUserHandler,
    LookupUserByEmailHandler,
    LookupUserByPhoneHandler,
)
from groupchat.config.settings import Config
from groupchat.domain.exceptions import (
    InvalidDeviceTokenError,
    PushGatewayError,
    UpstreamError,
)
from groupchat.domain.ports.push_gateway import (
    PushGateway,
    PushNotification,
    PushSession,
)
from groupchat.domain.ports.task_dispatcher import TaskDispatcher
from groupchat.domain.services.message_clock import MessageClock
from groupchat.infrastructure.persistence import (
    DocumentMembershipRepository,
    DocumentMessageRepository,
    DocumentUserRepository,
)
from groupchat.infrastructure.storage import DocumentStore, RedisDocumentStore

PHONE_A = "+16502530000"
PHONE_B = "+16502530001"
PHONE_C = "+16502530002"


def redis_store(server: Optional[fakeredis.FakeServer] = None) -> RedisDocumentStore:
    """RedisDocumentStore over an in-process fakeredis server, keys under "t:"."""
    client = fakeredis.FakeAsyncRedis(
        server=server or fakeredis.FakeServer(), decode_responses=True
    )
    return RedisDocumentStore(client, key_prefix="t")


def make_token(
    user_id: str,
    email: Optional[str] = None,
    phone_number: Optional[str] = None,
    name: Optional[str] = None,
) -> str:
    now = int(time.time())
    claims = {
        "sub": user_id,
        "iat": now,
        "exp": now + 300,
        "iss": Config.SERVICE_AUTH_ISSUER,
        "aud": Config.SERVICE_AUTH_AUDIENCE,
    }
    if email:
        claims["email"] = email
    if phone_number:
        claims["phone_number"] = phone_number
    if name:
        claims["name"] = name
    return jwt.encode(claims, Config.SERVICE_AUTH_SECRET, algorithm="HS256")


def auth_headers(user_id: str, **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}


class RecordingTaskDispatcher(TaskDispatcher):
    def __init__(self, fail: bool = False):
        self.dispatched: list[tuple[str, dict[str, Any]]] = []
        self.fail = fail

    async def dispatch(self, operation: str, payload: dict[str, Any]) -> None:
        if self.fail:
            raise UpstreamError("queue unavailable")
        self.dispatched.append((operation, dict(payload)))


class FakePushSession(PushSession):
    def __init__(self, gateway: "FakePushGateway"):
        self._gateway = gateway

    async def send(
        self, device_token: str, notification: PushNotification, dry_run: bool = False
    ) -> str:
        if device_token in self._gateway.invalid_tokens:
            raise InvalidDeviceTokenError(f"unregistered {device_token}")
        if device_token in self._gateway.failing_tokens:
            raise PushGatewayError(f"gateway down for {device_token}")
        if device_token in self._gateway.crashing_tokens:
            raise RuntimeError(f"session broke on {device_token}")
        self._gateway.sent.append((device_token, notification, dry_run))
        return f"projects/test/messages/{len(self._gateway.sent)}"


class FakePushGateway(PushGateway):
    def __init__(self, invalid_tokens=(), failing_tokens=(), crashing_tokens=()):
        self.invalid_tokens = set(invalid_tokens)
        self.failing_tokens = set(failing_tokens)
        self.crashing_tokens = set(crashing_tokens)
        self.sent: list[tuple[str, PushNotification, bool]] = []
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def connect(self):
        self.opened += 1
        try:
            yield FakePushSession(self)
        finally:
            self.closed += 1


@dataclass
class Services:
    """Every handler, wired by hand over one store."""

    store: DocumentStore
    dispatcher: RecordingTaskDispatcher
    push_gateway: FakePushGateway
    clock: MessageClock
    users: DocumentUserRepository
    memberships: DocumentMembershipRepository
    messages: DocumentMessageRepository
    register_email: RegisterUserWithEmailHandler
    register_phone: RegisterUserWithPhoneHandler
    register_users: RegisterUsersHandler
    get_user: GetUserHandler
    lookup_phone: LookupUserByPhoneHandler
    lookup_email: LookupUserByEmailHandler
    update_user: UpdateUserHandler
    delete_user: DeleteUserHandler
    list_conversation_ids: ListConversationIdsHandler
    list_members: ListMembersHandler
    find_shared: FindSharedConversationHandler
    initiate: InitiateConversationHandler
    join: JoinConversationHandler
    leave: LeaveConversationHandler
    post: PostMessageHandler
    get_conversation: GetConversationHandler
    history: GetConversationHistoryHandler
    send_push: SendPushNotificationsHandler
    repair: RepairSenderSnapshotsHandler


def build_services(
    store: DocumentStore,
    dispatcher: Optional[RecordingTaskDispatcher] = None,
    push_gateway: Optional[PushGateway] = None,
    clock: Optional[MessageClock] = None,
    write_attempts: int = 3,
) -> Services:
    dispatcher = dispatcher or RecordingTaskDispatcher()
    push_gateway = push_gateway or FakePushGateway()
    clock = clock or MessageClock()
    users = DocumentUserRepository(store)
    memberships = DocumentMembershipRepository(store)
    messages = DocumentMessageRepository(store)

    register_email = RegisterUserWithEmailHandler(users)
    register_phone = RegisterUserWithPhoneHandler(users, default_region="US")
    list_members = ListMembersHandler(memberships, users)
    find_shared = FindSharedConversationHandler(memberships)
    get_conversation = GetConversationHandler(list_members, messages)
    history = GetConversationHistoryHandler(memberships, get_conversation)

    return Services(
        store=store,
        dispatcher=dispatcher,
        push_gateway=push_gateway,
        clock=clock,
        users=users,
        memberships=memberships,
        messages=messages,
        register_email=register_email,
        register_phone=register_phone,
        register_users=RegisterUsersHandler(
            register_phone, register_email, default_region="US"
        ),
        get_user=GetUserHandler(users),
        lookup_phone=LookupUserByPhoneHandler(users, default_region="US"),
        lookup_email=LookupUserByEmailHandler(users),
        update_user=UpdateUserHandler(users, dispatcher),
        delete_user=DeleteUserHandler(users),
        list_conversation_ids=ListConversationIdsHandler(memberships),
        list_members=list_members,
        find_shared=find_shared,
        initiate=InitiateConversationHandler(users, memberships, find_shared),
        join=JoinConversationHandler(memberships),
        leave=LeaveConversationHandler(memberships),
        post=PostMessageHandler(
            users, memberships, messages, clock, dispatcher, write_attempts=write_attempts
        ),
        get_conversation=get_conversation,
        history=history,
        send_push=SendPushNotificationsHandler(
            list_members,
            users,
            push_gateway,
            title="Received message from user",
            force_dry_run=False,
        ),
        repair=RepairSenderSnapshotsHandler(users, messages, history),
    )
