from groupchat.application.commands.conversations.initiate_conversation import (
    InitiateConversationCommand,
    InitiateConversationHandler,
)
from groupchat.application.commands.conversations.join_conversation import (
    JoinConversationCommand,
    JoinConversationHandler,
)
from groupchat.application.commands.conversations.leave_conversation import (
    LeaveConversationCommand,
    LeaveConversationHandler,
)

__all__ = [
    "InitiateConversationCommand",
    "InitiateConversationHandler",
    "JoinConversationCommand",
    "JoinConversationHandler",
    "LeaveConversationCommand",
    "LeaveConversationHandler",
]
