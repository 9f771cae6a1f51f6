"""
Document Store Port - typed access to schemaless collections.

Guidelines:
- Records are plain JSON-compatible dicts
- Keys are dicts naming the primary key attributes, e.g. {"userId": "u1"}
- The only atomicity on offer is a single-record conditional write
- All methods are async
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from groupchat.domain.exceptions.upstream import UpstreamError
from groupchat.infrastructure.storage.conditions import Condition
from groupchat.infrastructure.storage.schema import CollectionSchema


class ConditionFailedError(Exception):
    """The write condition did not hold; nothing was written."""


class RecordNotFoundError(Exception):
    """update() targeted a key with no stored record."""


class StorageError(UpstreamError):
    """The backend itself failed (connection, contention, corrupt data)."""


class DocumentStore(ABC):
    def __init__(self, schemas: tuple[CollectionSchema, ...]):
        self._schemas = {schema.name: schema for schema in schemas}

    def schema(self, collection: str) -> CollectionSchema:
        try:
            return self._schemas[collection]
        except KeyError:
            raise ValueError(f"Unknown collection {collection!r}") from None

    @abstractmethod
    async def get(
        self, collection: str, key: Mapping[str, Any]
    ) -> Optional[dict[str, Any]]: ...

    @abstractmethod
    async def query(
        self,
        collection: str,
        index: Optional[str],
        value: Any,
        after: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """
        Records whose index hash attribute equals `value`.

        index=None queries the primary hash key. When the access path has a
        sort attribute, results are ordered by it and `after` keeps only
        records sorting strictly after it.
        """
        ...

    @abstractmethod
    async def put(
        self,
        collection: str,
        record: dict[str, Any],
        condition: Optional[Condition] = None,
    ) -> None: ...

    @abstractmethod
    async def update(
        self,
        collection: str,
        key: Mapping[str, Any],
        patch: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> dict[str, Any]:
        """Set the patched top-level attributes and return the new record."""
        ...

    @abstractmethod
    async def delete(
        self,
        collection: str,
        key: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        """Remove the record. Deleting an absent key is a no-op unless a condition says otherwise."""
        ...
