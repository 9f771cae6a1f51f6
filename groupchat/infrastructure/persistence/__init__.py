from groupchat.infrastructure.persistence.document_user_repository import (
    DocumentUserRepository,
)
from groupchat.infrastructure.persistence.document_membership_repository import (
    DocumentMembershipRepository,
)
from groupchat.infrastructure.persistence.document_message_repository import (
    DocumentMessageRepository,
)

__all__ = [
    "DocumentUserRepository",
    "DocumentMembershipRepository",
    "DocumentMessageRepository",
]
