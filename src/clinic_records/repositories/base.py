"""
Generic table repository.

BaseRepository implements the finder, CRUD, column-pluck and raw SQL
operations shared by every entity table. Entity repositories subclass it
with their entity class and table name and add association loaders.
"""

import logging
from abc import ABC
from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from ..core.entities import BaseEntity
from ..core.exceptions import (
    EmptyAttributesError,
    EntityNotFoundError,
    InvalidAssociationError,
    InvalidIdentifierError,
    QueryError,
)
from ..database.connection import DatabaseManager, get_database
from ..database.expressions import (
    Condition,
    Expression,
    and_,
    filters_to_expression,
    rebind,
    render,
    validate_column,
)
from ..database.utils import (
    affected_rows,
    build_insert_query,
    build_update_query,
    process_database_record,
)
from ..features.pagination import (
    KeysetPaginator,
    SortField,
    SortInput,
    SortOrder,
    normalize_sort_spec,
    order_by_sql,
)

T = TypeVar('T', bound=BaseEntity)

WhereInput = Union[Expression, Mapping[str, Any], None]

logger = logging.getLogger(__name__)


class BaseRepository(ABC, Generic[T]):
    """
    Base repository for one table.

    Provides:
    - Finders by id, by field, first/last, raw SQL
    - Counting and filtered, ordered, limited selects (the RowSource protocol)
    - Create/update/destroy by id, attribute map or expression
    - Keyset paginators bound to the table

    Subclasses set ``entity_class`` and ``table_name``.
    """

    entity_class: Type[T]
    table_name: str
    id_column: str = "id"
    associations: Tuple[str, ...] = ()

    def __init__(self, database: Optional[DatabaseManager] = None):
        """
        Initialize repository with a database handle.

        Args:
            database: Handle exposing fetch/fetchrow/fetchval/execute;
                defaults to the process-wide DatabaseManager
        """
        self.database = database or get_database()

    @property
    def entity_name(self) -> str:
        return self.entity_class.__name__

    @property
    def select_fields(self) -> str:
        columns = (self.id_column,) + tuple(self.entity_class.columns)
        return ", ".join(f"{self.table_name}.{column}" for column in columns)

    # Row mapping

    def _map_row_to_entity(self, row: Any) -> T:
        data = process_database_record(
            row,
            text_fields=self.entity_class.text_columns,
            int_fields=self.entity_class.int_columns,
        )
        return self.entity_class.from_record(data)

    def _map_rows(self, rows: Sequence[Any]) -> List[T]:
        return [self._map_row_to_entity(row) for row in rows or []]

    # Statement building

    @staticmethod
    def _as_expression(where: WhereInput) -> Optional[Expression]:
        if where is None or isinstance(where, Mapping):
            return filters_to_expression(where)
        return where

    def build_select(
        self,
        where: WhereInput = None,
        order_by: Optional[SortInput] = None,
        limit: Optional[int] = None,
        fields: Optional[str] = None,
    ) -> tuple:
        """
        Build a SELECT statement for this table.

        Returns:
            Tuple of (query, parameters)
        """
        query = f"SELECT {fields or self.select_fields} FROM {self.table_name}"
        where_sql, params, next_index = render(self._as_expression(where))
        if where_sql:
            query += f" WHERE {where_sql}"
        order_sql = order_by_sql(normalize_sort_spec(order_by or ()))
        if order_sql:
            query += f" {order_sql}"
        if limit is not None:
            query += f" LIMIT ${next_index}"
            params.append(limit)
        return query, params

    def _check_id(self, record_id: int) -> int:
        if not record_id:
            raise InvalidIdentifierError(f"Invalid ID for {self.entity_name}: it can't be zero")
        return record_id

    def _check_attributes(self, attributes: Mapping[str, Any]) -> Dict[str, Any]:
        if not attributes:
            raise EmptyAttributesError(self.entity_name)
        unknown = [key for key in attributes if key not in self.entity_class.columns]
        if unknown:
            raise QueryError(f"Unknown {self.entity_name} columns: {sorted(unknown)}")
        return dict(attributes)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # Finders

    async def find(self, record_id: int) -> T:
        """Find a single record by id."""
        self._check_id(record_id)
        query, params = self.build_select(Condition(self.id_column, "=", record_id), limit=1)
        row = await self.database.fetchrow(query, *params)
        if row is None:
            raise EntityNotFoundError(self.entity_name, record_id)
        return self._map_row_to_entity(row)

    async def first(self) -> T:
        """Find the record with the lowest id."""
        rows = await self.first_n(1)
        if not rows:
            raise EntityNotFoundError(self.entity_name, "first")
        return rows[0]

    async def first_n(self, n: int) -> List[T]:
        """Find the first n records by id ascending."""
        return await self.find_where(order_by=[SortField(self.id_column, SortOrder.ASC)], limit=n)

    async def last(self) -> T:
        """Find the record with the highest id."""
        rows = await self.last_n(1)
        if not rows:
            raise EntityNotFoundError(self.entity_name, "last")
        return rows[0]

    async def last_n(self, n: int) -> List[T]:
        """Find the last n records by id descending."""
        return await self.find_where(order_by=[SortField(self.id_column, SortOrder.DESC)], limit=n)

    async def find_many(self, *ids: int) -> List[T]:
        """Find one or more records by id."""
        if not ids:
            raise InvalidIdentifierError("At least one or more ids needed")
        return await self.find_where(Condition(self.id_column, "IN", ids))

    async def find_by(self, field: str, value: Any) -> T:
        """Find a single record by a field name and a value."""
        rows = await self.find_where(Condition(field, "=", value), limit=1)
        if not rows:
            raise EntityNotFoundError(self.entity_name, f"{field}={value}")
        return rows[0]

    async def find_all_by(self, field: str, value: Any) -> List[T]:
        """Find all records by a field name and a value."""
        return await self.find_where(Condition(field, "=", value))

    async def all(self) -> List[T]:
        """Get every record."""
        return await self.find_where()

    async def find_where(
        self,
        where: WhereInput = None,
        order_by: Optional[SortInput] = None,
        limit: Optional[int] = None
    ) -> List[T]:
        """Find records matching an expression, ordered and limited.

        Example:
            >>> await repo.find_where(raw("name = ? AND id > ?", "John", 18), limit=5)
        """
        query, params = self.build_select(where, order_by, limit)
        logger.debug(f"{self.entity_name} find_where: {query} {params}")
        rows = await self.database.fetch(query, *params)
        return self._map_rows(rows)

    async def find_by_sql(self, sql: str, *args: Any) -> T:
        """Run a complete SQL statement with ``?`` placeholders and return one record."""
        query, _ = rebind(sql)
        row = await self.database.fetchrow(query, *args)
        if row is None:
            raise EntityNotFoundError(self.entity_name, "sql")
        return self._map_row_to_entity(row)

    async def find_all_by_sql(self, sql: str, *args: Any) -> List[T]:
        """Run a complete SQL statement with ``?`` placeholders and return all records."""
        query, _ = rebind(sql)
        rows = await self.database.fetch(query, *args)
        return self._map_rows(rows)

    # Counts and column plucks

    async def count(self) -> int:
        """Count every record."""
        return await self.count_where()

    async def count_where(self, where: WhereInput = None) -> int:
        """Count records matching an expression."""
        query, params = self.build_select(where, fields="count(*)")
        result = await self.database.fetchval(query, *params)
        return int(result or 0)

    async def ids(self) -> List[int]:
        """Get all ids."""
        return await self.int_column(self.id_column)

    async def ids_where(self, where: WhereInput = None) -> List[int]:
        """Get the ids of records matching an expression."""
        return await self.int_column(self.id_column, where)

    async def int_column(self, column: str, where: WhereInput = None) -> List[int]:
        """Get an integer column of records matching an expression."""
        query, params = self.build_select(where, fields=validate_column(column))
        rows = await self.database.fetch(query, *params)
        return [int(row[0] or 0) for row in rows or []]

    async def str_column(self, column: str, where: WhereInput = None) -> List[str]:
        """Get a text column of records matching an expression."""
        query, params = self.build_select(where, fields=validate_column(column))
        rows = await self.database.fetch(query, *params)
        return [row[0] or "" for row in rows or []]

    # Writes

    async def create(self, attributes: Mapping[str, Any]) -> int:
        """Create a record from an attribute map and return its id.

        created_at/updated_at default to now.
        """
        data = self._check_attributes(attributes)
        now = self._now()
        for column in ("created_at", "updated_at"):
            if data.get(column) is None:
                data[column] = now
        query, params = build_insert_query(self.table_name, data, returning=self.id_column)
        new_id = await self.database.fetchval(query, *params)
        logger.info(f"Created {self.entity_name} {new_id}")
        return new_id

    async def insert(self, entity: T) -> int:
        """Validate and insert an entity, setting its id and timestamps."""
        self._validate(entity)
        now = self._now()
        entity.created_at = now
        entity.updated_at = now
        query, params = build_insert_query(
            self.table_name, entity.to_record(), returning=self.id_column
        )
        entity.id = await self.database.fetchval(query, *params)
        logger.info(f"Created {self.entity_name} {entity.id}")
        return entity.id

    async def save(self, entity: T) -> int:
        """Insert a new entity or update every column of an existing one."""
        if entity.is_new:
            return await self.insert(entity)
        self._validate(entity)
        entity.updated_at = self._now()
        data = entity.to_record()
        data.pop("created_at", None)
        query, params = build_update_query(self.table_name, entity.id, data)
        await self.database.execute(query, *params)
        return entity.id

    async def update(self, record_id: int, attributes: Mapping[str, Any]) -> bool:
        """Update a record from an attribute map; updated_at is set to now."""
        self._check_id(record_id)
        data = self._check_attributes(attributes)
        data["updated_at"] = self._now()
        query, params = build_update_query(self.table_name, record_id, data)
        status = await self.database.execute(query, *params)
        return affected_rows(status) > 0

    async def update_by_sql(self, sql: str, *args: Any) -> int:
        """Run an UPDATE statement with ``?`` placeholders; returns affected rows."""
        if not sql or not sql.strip():
            raise QueryError("A blank SQL clause")
        query, _ = rebind(sql)
        status = await self.database.execute(query, *args)
        return affected_rows(status)

    async def destroy(self, record_id: int) -> bool:
        """Delete a record by id."""
        self._check_id(record_id)
        status = await self.database.execute(
            f"DELETE FROM {self.table_name} WHERE {self.id_column} = $1", record_id
        )
        return affected_rows(status) > 0

    async def destroy_many(self, *ids: int) -> int:
        """Delete records by id; returns the number deleted."""
        if not ids:
            raise InvalidIdentifierError("At least one or more ids needed")
        return await self.destroy_where(Condition(self.id_column, "IN", ids))

    async def destroy_where(self, where: WhereInput) -> int:
        """Delete records matching an expression; association rows are left alone."""
        expression = self._as_expression(where)
        if expression is None:
            raise QueryError("No WHERE conditions provided")
        where_sql, params, _ = render(expression)
        status = await self.database.execute(
            f"DELETE FROM {self.table_name} WHERE {where_sql}", *params
        )
        return affected_rows(status)

    def _validate(self, entity: T) -> None:
        validate = getattr(entity, "validate", None)
        if callable(validate):
            validate()

    # Pagination

    def paginator(
        self,
        where: WhereInput = None,
        order: Optional[SortInput] = None,
        page_size: Optional[int] = None,
    ) -> KeysetPaginator[T]:
        """Create a keyset paginator over this table (id ascending by default)."""
        return KeysetPaginator(
            self,
            order=order if order is not None else [SortField(self.id_column, SortOrder.ASC)],
            where=self._as_expression(where),
            page_size=page_size,
            id_column=self.id_column,
        )

    # Associations

    async def includes_where(
        self,
        associations: Sequence[str],
        where: WhereInput = None
    ) -> List[T]:
        """Find records matching an expression and preload the named associations.

        Each association is loaded with one query covering every matched
        record.
        """
        for name in associations:
            if name not in self.associations:
                raise InvalidAssociationError(self.entity_name, name)
        records = await self.find_where(where, order_by=[SortField(self.id_column, SortOrder.ASC)])
        if not associations:
            logger.debug(f"No associations specified for {self.entity_name} includes_where")
            return records
        if not records:
            raise EntityNotFoundError(self.entity_name, "includes_where")
        for name in associations:
            await getattr(self, f"_preload_{name}")(records)
        return records

    async def find_by_owner_ids(
        self,
        column: str,
        owner_ids: Sequence[int],
        extra: Optional[Expression] = None
    ) -> Dict[int, List[T]]:
        """Find records whose ``column`` is one of owner_ids, grouped by that column."""
        grouped: Dict[int, List[T]] = {owner_id: [] for owner_id in owner_ids}
        if not owner_ids:
            return grouped
        records = await self.find_where(
            and_(Condition(column, "IN", list(owner_ids)), extra),
            order_by=[SortField(self.id_column, SortOrder.ASC)]
        )
        for record in records:
            grouped.setdefault(getattr(record, column), []).append(record)
        return grouped

    async def find_through(
        self,
        join_table: str,
        join_column: str,
        owner_column: str,
        owner_ids: Sequence[int]
    ) -> Dict[int, List[T]]:
        """Find records linked to owners through a join table, grouped by owner id.

        Example:
            >>> # patients seen by physicians 1 and 2, through appointments
            >>> await patients.find_through("appointments", "patient_id", "physician_id", [1, 2])
        """
        grouped: Dict[int, List[T]] = {owner_id: [] for owner_id in owner_ids}
        if not owner_ids:
            return grouped
        for identifier in (join_table, join_column, owner_column):
            validate_column(identifier)
        query = (
            f"SELECT {self.select_fields}, {join_table}.{owner_column} AS owner_id "
            f"FROM {self.table_name} "
            f"INNER JOIN {join_table} "
            f"ON {self.table_name}.{self.id_column} = {join_table}.{join_column} "
            f"WHERE {join_table}.{owner_column} = ANY($1) "
            f"ORDER BY {self.table_name}.{self.id_column} ASC"
        )
        rows = await self.database.fetch(query, list(owner_ids))
        for row in rows or []:
            grouped.setdefault(row["owner_id"], []).append(self._map_row_to_entity(row))
        return grouped
