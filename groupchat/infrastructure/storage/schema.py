"""
Collection layout: primary key (hash + optional sort attribute) and
secondary indexes. Both backends derive keys and access paths from this.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass(frozen=True)
class IndexSpec:
    hash_key: str
    sort_key: Optional[str] = None


@dataclass(frozen=True)
class CollectionSchema:
    name: str
    hash_key: str
    sort_key: Optional[str] = None
    indexes: Mapping[str, IndexSpec] = field(default_factory=dict)

    @property
    def key_attributes(self) -> tuple[str, ...]:
        if self.sort_key:
            return (self.hash_key, self.sort_key)
        return (self.hash_key,)

    def primary_index(self) -> IndexSpec:
        return IndexSpec(hash_key=self.hash_key, sort_key=self.sort_key)

    def index(self, name: Optional[str]) -> IndexSpec:
        """None selects the primary key."""
        if name is None:
            return self.primary_index()
        try:
            return self.indexes[name]
        except KeyError:
            raise ValueError(f"Unknown index {name!r} on {self.name}") from None

    def key_of(self, record: Mapping) -> tuple[str, ...]:
        try:
            return tuple(str(record[attr]) for attr in self.key_attributes)
        except KeyError as e:
            raise ValueError(
                f"Record for {self.name} is missing key attribute {e.args[0]!r}"
            ) from None


USERS = CollectionSchema(
    name="users",
    hash_key="userId",
    indexes={
        "users-phone-index": IndexSpec(hash_key="phoneNumber"),
        "users-email-index": IndexSpec(hash_key="email"),
    },
)

MEMBERSHIPS = CollectionSchema(
    name="memberships",
    hash_key="userId",
    sort_key="conversationId",
    indexes={
        "memberships-cid-index": IndexSpec(hash_key="conversationId"),
    },
)

MESSAGES = CollectionSchema(
    name="messages",
    hash_key="conversationId",
    sort_key="timestamp",
)

IDENTITY_CLAIMS = CollectionSchema(
    name="identity_claims",
    hash_key="identity",
)

DEFAULT_SCHEMAS = (USERS, MEMBERSHIPS, MESSAGES, IDENTITY_CLAIMS)
