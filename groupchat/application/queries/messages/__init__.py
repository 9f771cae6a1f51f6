from groupchat.application.queries.messages.get_conversation import (
    ConversationSnapshot,
    GetConversationQuery,
    GetConversationHandler,
)
from groupchat.application.queries.messages.get_conversation_history import (
    GetConversationHistoryQuery,
    GetConversationHistoryHandler,
)

__all__ = [
    "ConversationSnapshot",
    "GetConversationQuery",
    "GetConversationHandler",
    "GetConversationHistoryQuery",
    "GetConversationHistoryHandler",
]
