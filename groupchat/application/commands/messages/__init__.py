from groupchat.application.commands.messages.post_message import (
    PostMessageCommand,
    PostMessageHandler,
)

__all__ = ["PostMessageCommand", "PostMessageHandler"]
