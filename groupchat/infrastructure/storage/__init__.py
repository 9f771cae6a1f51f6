"""
Storage Layer - document store abstraction and its backends.

- document_store.py       → DocumentStore port (get/query/put/update/delete)
- conditions.py           → single-record write conditions
- schema.py               → collection key and index layout
- memory_document_store.py→ in-process backend (development, tests)
- redis_document_store.py → Redis backend (JSON documents + sorted-set indexes)
"""

from groupchat.infrastructure.storage.conditions import (
    Condition,
    AttributeExists,
    AttributeNotExists,
    AttributeEquals,
)
from groupchat.infrastructure.storage.document_store import (
    DocumentStore,
    ConditionFailedError,
    RecordNotFoundError,
    StorageError,
)
from groupchat.infrastructure.storage.schema import (
    CollectionSchema,
    IndexSpec,
    USERS,
    MEMBERSHIPS,
    MESSAGES,
    IDENTITY_CLAIMS,
    DEFAULT_SCHEMAS,
)
from groupchat.infrastructure.storage.memory_document_store import InMemoryDocumentStore
from groupchat.infrastructure.storage.redis_document_store import RedisDocumentStore

__all__ = [
    "Condition",
    "AttributeExists",
    "AttributeNotExists",
    "AttributeEquals",
    "DocumentStore",
    "ConditionFailedError",
    "RecordNotFoundError",
    "StorageError",
    "CollectionSchema",
    "IndexSpec",
    "USERS",
    "MEMBERSHIPS",
    "MESSAGES",
    "IDENTITY_CLAIMS",
    "DEFAULT_SCHEMAS",
    "InMemoryDocumentStore",
    "RedisDocumentStore",
]
