from groupchat.presentation.api.users import router as users_router
from groupchat.presentation.api.conversations import router as conversations_router
from groupchat.presentation.api.messages import router as messages_router
from groupchat.presentation.api.metrics import router as metrics_router

__all__ = [
    "users_router",
    "conversations_router",
    "messages_router",
    "metrics_router",
]
