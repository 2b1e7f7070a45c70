"""Keyset paginator shared by every entity repository.

Pages are located by comparing the identity column against the bounds of
the currently loaded page instead of using OFFSET, so each page query is an
index range scan no matter how deep the caller has paged.
"""

import logging
from typing import AsyncIterator, Generic, List, Mapping, Optional, TypeVar, Union

from ....config.settings import get_settings
from ....core.exceptions import (
    InvalidColumnError,
    PageBoundaryError,
    PaginationConfigurationError,
)
from ....database.expressions import Condition, Expression, and_
from ..entities import (
    PageCursor,
    PageDirection,
    SortInput,
    SortOrder,
    SortSpec,
    normalize_sort_spec,
    order_by_sql,
)
from ..protocols import RowSource

T = TypeVar('T')

logger = logging.getLogger(__name__)


class KeysetPaginator(Generic[T]):
    """Keyset (seek) pagination over a row source.

    A paginator holds mutable cursor state and must not be shared between
    concurrent tasks; create one per listing request.

    Example:
        >>> paginator = repository.paginator(where=where(patient_id=7), page_size=20)
        >>> first = await paginator.current()
        >>> second = await paginator.next()
    """

    def __init__(
        self,
        source: RowSource[T],
        order: Optional[SortInput] = None,
        where: Optional[Expression] = None,
        page_size: Optional[int] = None,
        id_column: str = "id",
    ):
        """
        Initialize paginator.

        Args:
            source: Row source providing count_where/find_where
            order: Sort spec; must include id_column before navigating.
                A mapping is ordered lexicographically by column name.
            where: Base restriction applied to every count and page query
            page_size: Rows per page (0/None means the configured default, 10)
            id_column: Strictly increasing identity column used as the keyset
        """
        if page_size is not None and page_size < 0:
            raise PaginationConfigurationError(
                f"Page size must be positive, got {page_size}", setting="page_size"
            )
        try:
            self._order: SortSpec = normalize_sort_spec(order or ())
        except (InvalidColumnError, ValueError, IndexError, TypeError) as e:
            raise PaginationConfigurationError(
                f"Invalid sort specification: {e}", setting="order"
            ) from e

        self.source = source
        self.where = where
        self.page_size = get_settings().clamp_page_size(page_size)
        self.id_column = id_column
        self._cursor = PageCursor()
        self._order_sql = {}

    # Cursor state

    @property
    def cursor(self) -> PageCursor:
        return self._cursor

    @property
    def order(self) -> SortSpec:
        return self._order

    @property
    def first_id(self) -> int:
        return self._cursor.first_id

    @property
    def last_id(self) -> int:
        return self._cursor.last_id

    @property
    def page_index(self) -> int:
        return self._cursor.page_index

    @property
    def total_pages(self) -> int:
        return self._cursor.total_pages

    @property
    def total_items(self) -> int:
        return self._cursor.total_items

    @property
    def page_info(self) -> dict:
        return self._cursor.page_info(self.page_size)

    # Query building

    def identity_order(self) -> SortOrder:
        """Sort order of the identity column; raises if the spec lacks it."""
        for sort_field in self._order:
            if sort_field.field == self.id_column:
                return sort_field.order
        raise PaginationConfigurationError(
            f"No {self.id_column} order specified in the sort spec",
            setting="order"
        )

    def build_order(self, reverse: bool = False) -> str:
        """Render the sort spec as an ORDER BY clause (cached per direction)."""
        if reverse not in self._order_sql:
            spec = self._order_spec(reverse)
            self._order_sql[reverse] = order_by_sql(spec)
        return self._order_sql[reverse]

    def build_id_restrict(
        self,
        direction: Union[str, PageDirection],
        cursor: Optional[PageCursor] = None
    ) -> Expression:
        """Build the identity range predicate for a navigation direction."""
        direction = PageDirection.parse(direction)
        cursor = cursor or self._cursor
        descending = self.identity_order() == SortOrder.DESC
        column = self.id_column

        if direction == PageDirection.PREVIOUS:
            return Condition(column, ">" if descending else "<", cursor.first_id)

        if direction == PageDirection.NEXT:
            return Condition(column, "<" if descending else ">", cursor.last_id)

        if not cursor.is_loaded:
            # Nothing loaded yet: every row qualifies
            return Condition(column, ">", 0)

        low, high = cursor.first_id, cursor.last_id
        if descending:
            low, high = high, low
        return and_(Condition(column, ">=", low), Condition(column, "<=", high))

    def build_where(
        self,
        direction: Union[str, PageDirection],
        cursor: Optional[PageCursor] = None
    ) -> Expression:
        """Base restriction AND identity restriction."""
        return and_(self.where, self.build_id_restrict(direction, cursor))

    async def build_page_count(self) -> int:
        """Refresh total items/pages from the row source and return total pages."""
        self.identity_order()
        self._cursor = await self._counted(self._cursor)
        return self._cursor.total_pages

    # Navigation

    async def current(self) -> List[T]:
        """Load the current page (page 0 on first use); page_index is unchanged."""
        self.identity_order()
        cursor = await self._counted(self._cursor)
        rows = await self._fetch(PageDirection.CURRENT, cursor)
        self._commit(cursor, rows, step=0)
        return rows

    async def previous(self) -> List[T]:
        """Load the page before the current one."""
        self.identity_order()
        if self._cursor.page_index == 0:
            raise PageBoundaryError(
                "This is the first page, no previous page yet",
                page_index=self._cursor.page_index,
                total_pages=self._cursor.total_pages
            )
        cursor = await self._counted(self._cursor)
        rows = await self._fetch(PageDirection.PREVIOUS, cursor)
        self._commit(cursor, rows, step=-1)
        return rows

    async def next(self) -> List[T]:
        """Load the page after the current one."""
        self.identity_order()
        cursor = await self._counted(self._cursor)
        if cursor.page_index >= cursor.total_pages - 1:
            raise PageBoundaryError(
                "This is the last page, no next page yet",
                page_index=cursor.page_index,
                total_pages=cursor.total_pages
            )
        rows = await self._fetch(PageDirection.NEXT, cursor)
        self._commit(cursor, rows, step=1)
        return rows

    async def get_page(self, direction: Union[str, PageDirection]) -> List[T]:
        """Dispatch to previous(), current() or next() by name."""
        direction = PageDirection.parse(direction)
        if direction == PageDirection.PREVIOUS:
            return await self.previous()
        if direction == PageDirection.NEXT:
            return await self.next()
        return await self.current()

    async def iter_pages(self) -> AsyncIterator[List[T]]:
        """Yield the current page and then every following page."""
        rows = await self.current()
        yield rows
        while self._cursor.has_next:
            yield await self.next()

    # Internals

    def _order_spec(self, reverse: bool) -> SortSpec:
        if not reverse:
            return self._order
        return tuple(sort_field.reversed() for sort_field in self._order)

    async def _counted(self, cursor: PageCursor) -> PageCursor:
        total_items = await self.source.count_where(self.where)
        return cursor.with_counts(int(total_items or 0), self.page_size)

    async def _fetch(self, direction: PageDirection, cursor: PageCursor) -> List[T]:
        # Previous pages are read backwards from the cursor so the rows
        # nearest to it are the ones kept by LIMIT.
        reverse = direction == PageDirection.PREVIOUS
        where_expression = self.build_where(direction, cursor)
        logger.debug(
            f"Fetching {direction.value} page: index={cursor.page_index}, "
            f"bounds=({cursor.first_id}, {cursor.last_id}), size={self.page_size}, "
            f"{self.build_order(reverse)}"
        )
        rows = await self.source.find_where(
            where_expression,
            order_by=self._order_spec(reverse),
            limit=self.page_size
        )
        rows = list(rows)
        if reverse:
            rows.reverse()
        return rows

    def _commit(self, cursor: PageCursor, rows: List[T], step: int) -> None:
        if rows:
            cursor = cursor.with_bounds(
                self._identity_of(rows[0]), self._identity_of(rows[-1])
            )
        self._cursor = cursor.moved(step)

    def _identity_of(self, row: T) -> int:
        if isinstance(row, Mapping):
            return row[self.id_column]
        return getattr(row, self.id_column)
