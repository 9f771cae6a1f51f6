from groupchat.application.queries.conversations.list_conversation_ids import (
    ListConversationIdsQuery,
    ListConversationIdsHandler,
)
from groupchat.application.queries.conversations.list_members import (
    ListMembersQuery,
    ListMembersHandler,
)
from groupchat.application.queries.conversations.find_shared_conversation import (
    FindSharedConversationQuery,
    FindSharedConversationHandler,
)

__all__ = [
    "ListConversationIdsQuery",
    "ListConversationIdsHandler",
    "ListMembersQuery",
    "ListMembersHandler",
    "FindSharedConversationQuery",
    "FindSharedConversationHandler",
]
