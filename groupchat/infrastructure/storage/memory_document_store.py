"""
In-Memory Document Store.

Guidelines:
- Implements DocumentStore for development and tests
- Records are deep-copied on the way in and out
- Each operation yields to the event loop once before its atomic section,
  so concurrent callers interleave the way they would against a remote store
"""

import asyncio
import copy
from typing import Any, Mapping, Optional

from groupchat.infrastructure.storage.conditions import Condition
from groupchat.infrastructure.storage.document_store import (
    ConditionFailedError,
    DocumentStore,
    RecordNotFoundError,
)
from groupchat.infrastructure.storage.schema import DEFAULT_SCHEMAS, CollectionSchema


class InMemoryDocumentStore(DocumentStore):
    def __init__(self, schemas: tuple[CollectionSchema, ...] = DEFAULT_SCHEMAS):
        super().__init__(schemas)
        self._data: dict[str, dict[tuple[str, ...], dict[str, Any]]] = {
            schema.name: {} for schema in schemas
        }

    def _key(self, collection: str, key: Mapping[str, Any]) -> tuple[str, ...]:
        return self.schema(collection).key_of(key)

    async def get(
        self, collection: str, key: Mapping[str, Any]
    ) -> Optional[dict[str, Any]]:
        await asyncio.sleep(0)
        record = self._data[collection].get(self._key(collection, key))
        return copy.deepcopy(record) if record is not None else None

    async def query(
        self,
        collection: str,
        index: Optional[str],
        value: Any,
        after: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        spec = self.schema(collection).index(index)
        matches = [
            record
            for record in self._data[collection].values()
            if record.get(spec.hash_key) == value
        ]
        if spec.sort_key:
            matches.sort(key=lambda record: str(record.get(spec.sort_key, "")))
            if after is not None:
                matches = [
                    record
                    for record in matches
                    if str(record.get(spec.sort_key, "")) > after
                ]
        return [copy.deepcopy(record) for record in matches]

    async def put(
        self,
        collection: str,
        record: dict[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        await asyncio.sleep(0)
        key = self._key(collection, record)
        current = self._data[collection].get(key)
        if condition is not None and not condition.evaluate(current):
            raise ConditionFailedError(f"{collection}:{key}")
        self._data[collection][key] = copy.deepcopy(record)

    async def update(
        self,
        collection: str,
        key: Mapping[str, Any],
        patch: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> dict[str, Any]:
        await asyncio.sleep(0)
        record_key = self._key(collection, key)
        current = self._data[collection].get(record_key)
        if condition is not None and not condition.evaluate(current):
            raise ConditionFailedError(f"{collection}:{record_key}")
        if current is None:
            raise RecordNotFoundError(f"{collection}:{record_key}")
        updated = {**current, **copy.deepcopy(dict(patch))}
        self._data[collection][record_key] = updated
        return copy.deepcopy(updated)

    async def delete(
        self,
        collection: str,
        key: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        await asyncio.sleep(0)
        record_key = self._key(collection, key)
        current = self._data[collection].get(record_key)
        if condition is not None and not condition.evaluate(current):
            raise ConditionFailedError(f"{collection}:{record_key}")
        self._data[collection].pop(record_key, None)
