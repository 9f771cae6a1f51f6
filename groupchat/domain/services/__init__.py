"""Domain services - behavior that belongs to no single entity."""

from groupchat.domain.services.message_clock import MessageClock

__all__ = ["MessageClock"]
