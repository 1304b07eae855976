"""Repository contract and its implementations.

Repositories apply ``Specification`` objects; callers never build queries.

- ``InMemoryRepository``: dict-backed, used in tests and by embedders
  without a database.
- ``CassandraRepository``: one table per entity, partitioned by ``id``.
  Key filters on ``id`` become ``IN`` reads, key filters on indexed
  columns become per-value index reads, anything else is a table scan
  evaluated in process.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any, Generic, Protocol, TypeVar
from uuid import UUID

import structlog

from inkwell.core.specification import Specification


logger = structlog.get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Repository(Protocol[T]):
    """Asynchronous storage contract consumed by the comment service."""

    async def count(self, spec: Specification[T] | None = None) -> int: ...

    async def get(self, spec: Specification[T]) -> list[T]: ...

    async def get_by_id(self, entity_id: UUID) -> T | None: ...

    async def select(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> list[R]: ...

    async def select_first_or_default(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> R | None: ...

    async def add(self, entity: T) -> T: ...

    async def update(self, entity: T) -> None: ...

    async def delete(self, entity: T) -> None: ...

    async def delete_many(self, entities: Iterable[T]) -> None: ...


class InMemoryRepository(Generic[T]):
    """Repository over a dict keyed by ``entity.id``.

    Returned entities are the stored instances, so a caller that mutates
    one must still call ``update`` like it would against a real store.
    """

    def __init__(self, entities: Iterable[T] = ()) -> None:
        self._items: dict[UUID, T] = {}
        for entity in entities:
            self._items[entity.id] = entity

    def __len__(self) -> int:
        return len(self._items)

    async def count(self, spec: Specification[T] | None = None) -> int:
        if spec is None:
            return len(self._items)
        return sum(1 for item in self._items.values() if spec.is_satisfied_by(item))

    async def get(self, spec: Specification[T]) -> list[T]:
        return spec.evaluate(self._items.values())

    async def get_by_id(self, entity_id: UUID) -> T | None:
        return self._items.get(entity_id)

    async def select(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> list[R]:
        return [projection(item) for item in await self.get(spec)]

    async def select_first_or_default(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> R | None:
        items = await self.get(spec)
        return projection(items[0]) if items else None

    async def add(self, entity: T) -> T:
        if entity.id in self._items:
            msg = f"Entity {entity.id} already exists"
            raise ValueError(msg)
        self._items[entity.id] = entity
        return entity

    async def update(self, entity: T) -> None:
        self._items[entity.id] = entity

    async def delete(self, entity: T) -> None:
        self._items.pop(entity.id, None)

    async def delete_many(self, entities: Iterable[T]) -> None:
        for entity in list(entities):
            await self.delete(entity)


class CassandraRepository(Generic[T]):
    """Repository backed by one Cassandra table.

    The entity type must provide ``from_row(row)`` and ``to_row() -> dict``
    whose keys are the table's columns.
    ``session`` is connected through ``cassandra_asyncio.cluster.Cluster``
    and so provides ``aexecute``.
    """

    def __init__(
        self,
        session: Any,
        keyspace: str,
        table: str,
        entity_type: type[T],
        columns: Sequence[str],
        indexed_columns: Sequence[str] = (),
    ) -> None:
        """Initialize with Cassandra session and table layout."""
        self.session = session
        self.keyspace = keyspace
        self.table = table
        self.entity_type = entity_type
        self.columns = tuple(columns)
        self.indexed_columns = frozenset(indexed_columns)
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements for efficient queries."""
        table = f"{self.keyspace}.{self.table}"
        placeholders = ", ".join("?" for _ in self.columns)

        self._insert = self.session.prepare(
            f"INSERT INTO {table} ({', '.join(self.columns)}) VALUES ({placeholders})"
        )
        self._select_all = self.session.prepare(f"SELECT * FROM {table}")
        self._select_by_id = self.session.prepare(
            f"SELECT * FROM {table} WHERE id = ?"
        )
        self._select_by_ids = self.session.prepare(
            f"SELECT * FROM {table} WHERE id IN ?"
        )
        self._count_all = self.session.prepare(f"SELECT COUNT(*) FROM {table}")
        self._delete_by_id = self.session.prepare(f"DELETE FROM {table} WHERE id = ?")
        self._select_by_index = {
            column: self.session.prepare(f"SELECT * FROM {table} WHERE {column} = ?")
            for column in sorted(self.indexed_columns)
        }

    async def _fetch(self, statement: Any, parameters: Any = None) -> list[Any]:
        """Every row of a read, following result pages."""
        result = await self.session.aexecute(statement, parameters)
        return await result.aall()

    async def _candidates(self, spec: Specification[T]) -> list[T]:
        """Rows that may satisfy ``spec``, read as narrowly as possible."""
        key_filter = spec.key_filter
        if key_filter is not None and not key_filter.values:
            return []

        if key_filter is not None and key_filter.column == "id":
            rows = await self._fetch(self._select_by_ids, [list(key_filter.values)])
        elif key_filter is not None and key_filter.column in self.indexed_columns:
            statement = self._select_by_index[key_filter.column]
            rows = []
            for value in key_filter.values:
                rows.extend(await self._fetch(statement, [value]))
        else:
            logger.debug("cassandra_table_scan", table=self.table)
            rows = await self._fetch(self._select_all)

        return [self.entity_type.from_row(row) for row in rows]

    async def count(self, spec: Specification[T] | None = None) -> int:
        if spec is None:
            result = await self.session.aexecute(self._count_all)
            row = result.one()
            return row.count if row else 0
        candidates = await self._candidates(spec)
        return sum(1 for item in candidates if spec.is_satisfied_by(item))

    async def get(self, spec: Specification[T]) -> list[T]:
        return spec.evaluate(await self._candidates(spec))

    async def get_by_id(self, entity_id: UUID) -> T | None:
        result = await self.session.aexecute(self._select_by_id, [entity_id])
        row = result.one()
        return self.entity_type.from_row(row) if row else None

    async def select(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> list[R]:
        return [projection(item) for item in await self.get(spec)]

    async def select_first_or_default(
        self, spec: Specification[T], projection: Callable[[T], R]
    ) -> R | None:
        items = await self.get(spec)
        return projection(items[0]) if items else None

    async def add(self, entity: T) -> T:
        await self._upsert(entity)
        return entity

    async def update(self, entity: T) -> None:
        await self._upsert(entity)

    async def _upsert(self, entity: T) -> None:
        row = entity.to_row()
        await self.session.aexecute(
            self._insert, [row[column] for column in self.columns]
        )

    async def delete(self, entity: T) -> None:
        await self.session.aexecute(self._delete_by_id, [entity.id])

    async def delete_many(self, entities: Iterable[T]) -> None:
        for entity in list(entities):
            await self.delete(entity)
