"""
Shared registration steps for the phone and email registration handlers.

Order of writes:
1. identity claim (conditional put, unique across userIds)
2. user record (conditional put, unique per userId)
A failed user write gives back a claim taken by this call, unless the user
already stored under this id holds the same identity.
"""

import logging

from groupchat.domain.entities.user import User
from groupchat.domain.ports.repositories import UserRepository

logger = logging.getLogger(__name__)


async def register_user(
    user_repository: UserRepository, user: User, identity: str
) -> User:
    claimed = await user_repository.claim_identity(identity, user.id)
    try:
        await user_repository.add(user)
    except BaseException:
        # cancellation included: a claim must not outlive a failed registration
        if claimed:
            try:
                await _release_unless_held(user_repository, user, identity)
            except Exception:
                logger.exception(
                    f"[Users] Could not release {identity} after failed registration of {user.id}"
                )
        raise
    logger.info(f"[Users] Registered {user.id} with {identity}")
    return user


async def _release_unless_held(
    user_repository: UserRepository, user: User, identity: str
) -> None:
    existing = await user_repository.get_by_id(user.id)
    if existing is not None and identity in existing.identities():
        return
    await user_repository.release_identity(identity, user.id)
    logger.info(f"[Users] Released {identity} after failed registration of {user.id}")
