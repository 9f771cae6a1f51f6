"""
Redis Document Store.

Guidelines:
- Implements DocumentStore on top of redis.asyncio
- Each record is one JSON STRING value
- Every access path (primary hash key and each secondary index) is a ZSET
- Conditional writes use WATCH/MULTI and retry on WatchError
- Redis failures surface as StorageError

Redis Data Structures:
- Record:  "{prefix}:{collection}:rec:{pk}"         STRING (JSON)
- Index:   "{prefix}:{collection}:idx:{name}:{value}" ZSET, score 0
           member "{sort value}\\t{pk}", so lexical order is sort-key order
  {pk} is the URL-quoted key attributes joined with ":".
  The primary hash key uses the index name "pk".

Redis Commands Used:
- GET / MGET: read records
- ZRANGE: walk an access path in sort order
- WATCH / MULTI / EXEC: single-record conditional write plus index upkeep
- SET / DEL / ZADD / ZREM: inside the transaction
"""

import json
import logging
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from groupchat.infrastructure.storage.conditions import Condition
from groupchat.infrastructure.storage.document_store import (
    ConditionFailedError,
    DocumentStore,
    RecordNotFoundError,
    StorageError,
)
from groupchat.infrastructure.storage.schema import (
    DEFAULT_SCHEMAS,
    CollectionSchema,
    IndexSpec,
)

logger = logging.getLogger(__name__)

PRIMARY_INDEX = "pk"

Mutation = Callable[[Optional[dict[str, Any]]], Optional[dict[str, Any]]]


class RedisDocumentStore(DocumentStore):
    def __init__(
        self,
        redis: Redis,
        key_prefix: str = "groupchat",
        write_retries: int = 5,
        schemas: tuple[CollectionSchema, ...] = DEFAULT_SCHEMAS,
    ):
        super().__init__(schemas)
        self._redis = redis
        self._prefix = key_prefix
        self._write_retries = max(1, write_retries)

    # ------------------------------------------------------------------
    # Key helpers
    # ------------------------------------------------------------------

    def _pk(self, collection: str, key: Mapping[str, Any]) -> str:
        parts = self.schema(collection).key_of(key)
        return ":".join(quote(part, safe="") for part in parts)

    def _record_key(self, collection: str, pk: str) -> str:
        return f"{self._prefix}:{collection}:rec:{pk}"

    def _index_key(self, collection: str, index_name: str, value: Any) -> str:
        return f"{self._prefix}:{collection}:idx:{index_name}:{quote(str(value), safe='')}"

    def _access_paths(self, collection: str) -> list[tuple[str, IndexSpec]]:
        schema = self.schema(collection)
        paths = [(PRIMARY_INDEX, schema.primary_index())]
        paths.extend(schema.indexes.items())
        return paths

    def _index_entries(
        self, collection: str, pk: str, record: Optional[dict[str, Any]]
    ) -> set[tuple[str, str]]:
        """(index key, member) pairs a record occupies; absent attributes are not indexed."""
        if record is None:
            return set()
        entries = set()
        for name, spec in self._access_paths(collection):
            value = record.get(spec.hash_key)
            if value is None:
                continue
            sort_value = str(record.get(spec.sort_key, "")) if spec.sort_key else ""
            entries.add(
                (self._index_key(collection, name, value), f"{sort_value}\t{pk}")
            )
        return entries

    @staticmethod
    def _decode(raw: Optional[str]) -> Optional[dict[str, Any]]:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt record in Redis: {e}") from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(
        self, collection: str, key: Mapping[str, Any]
    ) -> Optional[dict[str, Any]]:
        record_key = self._record_key(collection, self._pk(collection, key))
        try:
            raw = await self._redis.get(record_key)
        except RedisError as e:
            raise StorageError(f"Redis GET failed: {e}") from e
        return self._decode(raw)

    async def query(
        self,
        collection: str,
        index: Optional[str],
        value: Any,
        after: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        spec = self.schema(collection).index(index)
        index_key = self._index_key(collection, index or PRIMARY_INDEX, value)
        try:
            members = await self._redis.zrange(index_key, 0, -1)
            if not members:
                return []
            pks = [member.split("\t", 1)[1] for member in members]
            raws = await self._redis.mget(
                [self._record_key(collection, pk) for pk in pks]
            )
        except RedisError as e:
            raise StorageError(f"Redis query on {index_key} failed: {e}") from e

        records = []
        for raw in raws:
            record = self._decode(raw)
            # index entries can briefly outlive their record
            if record is None or record.get(spec.hash_key) != value:
                continue
            records.append(record)

        if spec.sort_key:
            records.sort(key=lambda record: str(record.get(spec.sort_key, "")))
            if after is not None:
                records = [
                    record
                    for record in records
                    if str(record.get(spec.sort_key, "")) > after
                ]
        return records

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _write(
        self, collection: str, pk: str, mutate: Mutation
    ) -> Optional[dict[str, Any]]:
        """
        Apply `mutate` to the current record under WATCH and commit atomically.

        `mutate` returns the new record, or None to delete. It may raise
        ConditionFailedError / RecordNotFoundError, which abort the write.
        """
        record_key = self._record_key(collection, pk)
        for attempt in range(1, self._write_retries + 1):
            try:
                async with self._redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(record_key)
                    current = self._decode(await pipe.get(record_key))
                    new_record = mutate(current)

                    old_entries = self._index_entries(collection, pk, current)
                    new_entries = self._index_entries(collection, pk, new_record)

                    pipe.multi()
                    if new_record is None:
                        pipe.delete(record_key)
                    else:
                        pipe.set(record_key, json.dumps(new_record))
                    for index_key, member in old_entries - new_entries:
                        pipe.zrem(index_key, member)
                    for index_key, member in new_entries - old_entries:
                        pipe.zadd(index_key, {member: 0})
                    await pipe.execute()
                    return new_record
            except WatchError:
                logger.debug(
                    f"[Storage] Write contention on {record_key} (attempt {attempt})"
                )
                continue
            except RedisError as e:
                raise StorageError(f"Redis write to {record_key} failed: {e}") from e
        raise StorageError(
            f"Gave up writing {record_key} after {self._write_retries} attempts"
        )

    async def put(
        self,
        collection: str,
        record: dict[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        pk = self._pk(collection, record)

        def mutate(current):
            if condition is not None and not condition.evaluate(current):
                raise ConditionFailedError(f"{collection}:{pk}")
            return dict(record)

        await self._write(collection, pk, mutate)

    async def update(
        self,
        collection: str,
        key: Mapping[str, Any],
        patch: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> dict[str, Any]:
        pk = self._pk(collection, key)

        def mutate(current):
            if condition is not None and not condition.evaluate(current):
                raise ConditionFailedError(f"{collection}:{pk}")
            if current is None:
                raise RecordNotFoundError(f"{collection}:{pk}")
            return {**current, **patch}

        return await self._write(collection, pk, mutate)

    async def delete(
        self,
        collection: str,
        key: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        pk = self._pk(collection, key)

        def mutate(current):
            if condition is not None and not condition.evaluate(current):
                raise ConditionFailedError(f"{collection}:{pk}")
            return None

        await self._write(collection, pk, mutate)
