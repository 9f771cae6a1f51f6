"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Pure Python dataclasses (no storage or framework types)
"""

from groupchat.domain.entities.user import User, phone_identity, email_identity
from groupchat.domain.entities.membership import Membership
from groupchat.domain.entities.message import Message

__all__ = [
    "User",
    "phone_identity",
    "email_identity",
    "Membership",
    "Message",
]
