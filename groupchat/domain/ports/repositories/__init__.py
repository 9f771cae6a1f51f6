"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the application layer needs
- Does NOT specify implementation (Redis, in-memory, etc.)

Infrastructure layer provides implementations.
"""

from groupchat.domain.ports.repositories.user_repository import UserRepository
from groupchat.domain.ports.repositories.membership_repository import MembershipRepository
from groupchat.domain.ports.repositories.message_repository import MessageRepository

__all__ = [
    "UserRepository",
    "MembershipRepository",
    "MessageRepository",
]
