"""
Dishka DI Container Setup.

Guidelines:
- Registers all dependencies (store, gateways, dispatcher, repositories, handlers)
- Maps abstract ports to concrete adapters, chosen from Config
- Manages lifecycle (APP = singleton, REQUEST = per request or per task)

Providers:
- AppProvider:               clock, task runner, repositories, handlers
- Memory/RedisStorageProvider: DocumentStore backend (STORAGE_BACKEND)
- RedisProvider:             shared Redis client, only built if something asks for it
- *TaskProvider:             TaskDispatcher backend (TASK_BACKEND)
- PushProvider:              PushGateway backend (PUSH_BACKEND)

Flow:
  Container → DocumentStore → DocumentUserRepository → RegisterUserWithPhoneHandler
                                      ↓
                              uses UserRepository port
"""

from typing import AsyncIterable

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from redis.asyncio import Redis

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
from groupchat.config.settings import Config, get_config
from groupchat.domain.ports.push_gateway import PushGateway
from groupchat.domain.ports.repositories import (
    MembershipRepository,
    MessageRepository,
    UserRepository,
)
from groupchat.domain.ports.task_dispatcher import TaskDispatcher
from groupchat.domain.services.message_clock import MessageClock
from groupchat.infrastructure.cache.redis_client import (
    close_redis_client,
    create_redis_client,
)
from groupchat.infrastructure.jobs import (
    InlineTaskDispatcher,
    InProcessTaskDispatcher,
    RedisTaskQueue,
)
from groupchat.infrastructure.persistence import (
    DocumentMembershipRepository,
    DocumentMessageRepository,
    DocumentUserRepository,
)
from groupchat.infrastructure.push import FcmPushGateway, LoggingPushGateway
from groupchat.infrastructure.storage import (
    DocumentStore,
    InMemoryDocumentStore,
    RedisDocumentStore,
)
from groupchat.setup.task_runner import TaskRunner


class AppProvider(Provider):
    """
    Application dependency provider.

    Repositories and handlers are REQUEST scoped: one set per HTTP request,
    and one per executed background task.
    """

    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    # ==================== DOMAIN SERVICES ====================

    @provide(scope=Scope.APP)
    def get_message_clock(self) -> MessageClock:
        return MessageClock()

    @provide(scope=Scope.APP)
    def get_task_runner(self, container: AsyncContainer) -> TaskRunner:
        """The runner opens its own REQUEST scope per task from the APP container."""
        return TaskRunner(container)

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, store: DocumentStore) -> UserRepository:
        return DocumentUserRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_membership_repository(self, store: DocumentStore) -> MembershipRepository:
        return DocumentMembershipRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, store: DocumentStore) -> MessageRepository:
        return DocumentMessageRepository(store)

    # ==================== USER DIRECTORY ====================

    @provide(scope=Scope.REQUEST)
    def get_register_with_email_handler(
        self, user_repository: UserRepository
    ) -> RegisterUserWithEmailHandler:
        return RegisterUserWithEmailHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_register_with_phone_handler(
        self, user_repository: UserRepository
    ) -> RegisterUserWithPhoneHandler:
        return RegisterUserWithPhoneHandler(
            user_repository, default_region=self._config.DEFAULT_PHONE_REGION
        )

    @provide(scope=Scope.REQUEST)
    def get_register_users_handler(
        self,
        register_with_phone: RegisterUserWithPhoneHandler,
        register_with_email: RegisterUserWithEmailHandler,
    ) -> RegisterUsersHandler:
        return RegisterUsersHandler(
            register_with_phone,
            register_with_email,
            default_region=self._config.DEFAULT_PHONE_REGION,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_user_handler(self, user_repository: UserRepository) -> GetUserHandler:
        return GetUserHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_lookup_by_phone_handler(
        self, user_repository: UserRepository
    ) -> LookupUserByPhoneHandler:
        return LookupUserByPhoneHandler(
            user_repository, default_region=self._config.DEFAULT_PHONE_REGION
        )

    @provide(scope=Scope.REQUEST)
    def get_lookup_by_email_handler(
        self, user_repository: UserRepository
    ) -> LookupUserByEmailHandler:
        return LookupUserByEmailHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_update_user_handler(
        self, user_repository: UserRepository, task_dispatcher: TaskDispatcher
    ) -> UpdateUserHandler:
        return UpdateUserHandler(user_repository, task_dispatcher)

    @provide(scope=Scope.REQUEST)
    def get_delete_user_handler(self, user_repository: UserRepository) -> DeleteUserHandler:
        return DeleteUserHandler(user_repository)

    # ==================== CONVERSATION RESOLVER ====================

    @provide(scope=Scope.REQUEST)
    def get_list_conversation_ids_handler(
        self, membership_repository: MembershipRepository
    ) -> ListConversationIdsHandler:
        return ListConversationIdsHandler(membership_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_members_handler(
        self,
        membership_repository: MembershipRepository,
        user_repository: UserRepository,
    ) -> ListMembersHandler:
        return ListMembersHandler(membership_repository, user_repository)

    @provide(scope=Scope.REQUEST)
    def get_find_shared_conversation_handler(
        self, membership_repository: MembershipRepository
    ) -> FindSharedConversationHandler:
        return FindSharedConversationHandler(membership_repository)

    @provide(scope=Scope.REQUEST)
    def get_initiate_conversation_handler(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        find_shared_conversation: FindSharedConversationHandler,
    ) -> InitiateConversationHandler:
        return InitiateConversationHandler(
            user_repository, membership_repository, find_shared_conversation
        )

    @provide(scope=Scope.REQUEST)
    def get_join_conversation_handler(
        self, membership_repository: MembershipRepository
    ) -> JoinConversationHandler:
        return JoinConversationHandler(membership_repository)

    @provide(scope=Scope.REQUEST)
    def get_leave_conversation_handler(
        self, membership_repository: MembershipRepository
    ) -> LeaveConversationHandler:
        return LeaveConversationHandler(membership_repository)

    # ==================== MESSAGE SERVICE ====================

    @provide(scope=Scope.REQUEST)
    def get_post_message_handler(
        self,
        user_repository: UserRepository,
        membership_repository: MembershipRepository,
        message_repository: MessageRepository,
        clock: MessageClock,
        task_dispatcher: TaskDispatcher,
    ) -> PostMessageHandler:
        return PostMessageHandler(
            user_repository=user_repository,
            membership_repository=membership_repository,
            message_repository=message_repository,
            clock=clock,
            task_dispatcher=task_dispatcher,
            write_attempts=self._config.MESSAGE_WRITE_ATTEMPTS,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_conversation_handler(
        self, list_members: ListMembersHandler, message_repository: MessageRepository
    ) -> GetConversationHandler:
        return GetConversationHandler(list_members, message_repository)

    @provide(scope=Scope.REQUEST)
    def get_conversation_history_handler(
        self,
        membership_repository: MembershipRepository,
        get_conversation: GetConversationHandler,
    ) -> GetConversationHistoryHandler:
        return GetConversationHistoryHandler(membership_repository, get_conversation)

    # ==================== TASKS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_push_notifications_handler(
        self,
        list_members: ListMembersHandler,
        user_repository: UserRepository,
        push_gateway: PushGateway,
    ) -> SendPushNotificationsHandler:
        return SendPushNotificationsHandler(
            list_members,
            user_repository,
            push_gateway,
            title=self._config.PUSH_TITLE,
            force_dry_run=self._config.PUSH_DRY_RUN,
        )

    @provide(scope=Scope.REQUEST)
    def get_repair_sender_snapshots_handler(
        self,
        user_repository: UserRepository,
        message_repository: MessageRepository,
        conversation_history: GetConversationHistoryHandler,
    ) -> RepairSenderSnapshotsHandler:
        return RepairSenderSnapshotsHandler(
            user_repository, message_repository, conversation_history
        )


# ==================== BACKENDS ====================


class RedisProvider(Provider):
    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterable[Redis]:
        """Connected at first use, closed when the container closes."""
        client = await create_redis_client(self._config.REDIS_URL)
        yield client
        await close_redis_client(client)


class MemoryStorageProvider(Provider):
    @provide(scope=Scope.APP)
    def get_document_store(self) -> DocumentStore:
        return InMemoryDocumentStore()


class RedisStorageProvider(Provider):
    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    def get_document_store(self, redis: Redis) -> DocumentStore:
        return RedisDocumentStore(
            redis,
            key_prefix=self._config.REDIS_KEY_PREFIX,
            write_retries=self._config.REDIS_WRITE_RETRIES,
        )


class InProcessTaskProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_task_dispatcher(
        self, runner: TaskRunner
    ) -> AsyncIterable[TaskDispatcher]:
        dispatcher = InProcessTaskDispatcher(runner)
        yield dispatcher
        await dispatcher.drain()


class InlineTaskProvider(Provider):
    @provide(scope=Scope.APP)
    def get_task_dispatcher(self, runner: TaskRunner) -> TaskDispatcher:
        return InlineTaskDispatcher(runner)


class RedisTaskProvider(Provider):
    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    def get_task_dispatcher(self, redis: Redis) -> TaskDispatcher:
        return RedisTaskQueue(redis, self._config.TASK_QUEUE_KEY)


class PushProvider(Provider):
    def __init__(self, config: type[Config] = Config):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    def get_push_gateway(self) -> PushGateway:
        if self._config.PUSH_BACKEND == "fcm":
            return FcmPushGateway(
                project_id=self._config.FCM_PROJECT_ID,
                access_token=self._config.FCM_ACCESS_TOKEN,
                endpoint=self._config.FCM_ENDPOINT,
                timeout=self._config.PUSH_TIMEOUT_SECONDS,
            )
        return LoggingPushGateway()


def build_providers(config: type[Config]) -> list[Provider]:
    """Pick one backend provider per port from the configuration."""
    if config.STORAGE_BACKEND == "memory":
        storage = MemoryStorageProvider()
    elif config.STORAGE_BACKEND == "redis":
        storage = RedisStorageProvider(config)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND {config.STORAGE_BACKEND!r}")

    if config.TASK_BACKEND == "inprocess":
        tasks = InProcessTaskProvider()
    elif config.TASK_BACKEND == "inline":
        tasks = InlineTaskProvider()
    elif config.TASK_BACKEND == "redis":
        tasks = RedisTaskProvider(config)
    else:
        raise ValueError(f"Unknown TASK_BACKEND {config.TASK_BACKEND!r}")

    return [
        AppProvider(config),
        RedisProvider(config),
        storage,
        tasks,
        PushProvider(config),
    ]


def create_container(config: type[Config] = None) -> AsyncContainer:
    """
    Create and configure the DI container.

    - make_async_container() creates the container with all providers
    - Call this ONCE per application (API app or worker process)
    """
    config = config or get_config()
    return make_async_container(*build_providers(config))
