"""
CQRS building blocks shared by every handler in the application layer.

Commands change state (register, post, join, the two background tasks).
Queries only read (lookups, conversation reads, history). Both are frozen
dataclasses carrying domain value objects; a handler holds its ports and
exposes a single `execute`.

    @dataclass(frozen=True)
    class LeaveConversationCommand(Command[None]):
        user_id: UserId
        conversation_id: ConversationId

    handler = LeaveConversationHandler(membership_repository)
    await handler.execute(LeaveConversationCommand(user_id, conversation_id))

Handlers are REQUEST scoped in the container, so one instance serves one
HTTP request or one background task.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

R = TypeVar("R")


class Command(ABC, Generic[R]):
    """A state change whose handler returns R."""


class Query(ABC, Generic[R]):
    """A read whose handler returns R. Absence is None, not an error."""


class CommandHandler(ABC, Generic[R]):
    @abstractmethod
    async def execute(self, command: Command[R]) -> R: ...


class QueryHandler(ABC, Generic[R]):
    @abstractmethod
    async def execute(self, query: Query[R]) -> R: ...
