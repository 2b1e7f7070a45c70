"""
Tests for keyset pagination.
"""

import logging

import pytest

from clinic_records.core.exceptions import (
    InvalidDirectionError,
    PageBoundaryError,
    PaginationConfigurationError,
    StorageError,
)
from clinic_records.database.expressions import AllOf, Condition
from clinic_records.features.pagination import (
    KeysetPaginator,
    PageCursor,
    PageDirection,
    RowSource,
    SortField,
    SortOrder,
)

from conftest import InMemoryRowSource


def ids(rows):
    return [row.id for row in rows]


class TestAscendingNavigation:
    """25 rows, page size 10, id ascending."""

    @pytest.fixture
    def paginator(self, row_source, id_asc):
        return KeysetPaginator(row_source, order=id_asc, page_size=10)

    @pytest.mark.asyncio
    async def test_walks_every_page_in_order(self, paginator):
        assert ids(await paginator.current()) == list(range(1, 11))
        assert paginator.page_index == 0
        assert (paginator.first_id, paginator.last_id) == (1, 10)

        assert ids(await paginator.next()) == list(range(11, 21))
        assert paginator.page_index == 1

        assert ids(await paginator.next()) == list(range(21, 26))
        assert paginator.page_index == 2
        assert (paginator.first_id, paginator.last_id) == (21, 25)

        with pytest.raises(PageBoundaryError):
            await paginator.next()

    @pytest.mark.asyncio
    async def test_next_on_last_page_leaves_state_unchanged(self, paginator):
        await paginator.current()
        await paginator.next()
        await paginator.next()
        before = paginator.cursor

        with pytest.raises(PageBoundaryError) as exc_info:
            await paginator.next()

        assert paginator.cursor == before
        assert paginator.first_id == 21
        assert paginator.last_id == 25
        assert paginator.page_index == 2
        assert exc_info.value.details == {"page_index": 2, "total_pages": 3}

    @pytest.mark.asyncio
    async def test_previous_returns_adjacent_page(self, paginator):
        await paginator.current()
        await paginator.next()
        await paginator.next()

        assert ids(await paginator.previous()) == list(range(11, 21))
        assert paginator.page_index == 1
        assert ids(await paginator.previous()) == list(range(1, 11))
        assert paginator.page_index == 0

    @pytest.mark.asyncio
    async def test_next_then_previous_restores_bounds(self, paginator):
        await paginator.current()
        await paginator.next()
        bounds = (paginator.first_id, paginator.last_id)

        await paginator.next()
        await paginator.previous()

        assert (paginator.first_id, paginator.last_id) == bounds
        assert paginator.page_index == 1

    @pytest.mark.asyncio
    async def test_previous_on_first_page_does_not_query(self, paginator, row_source):
        await paginator.current()
        calls = row_source.calls

        with pytest.raises(PageBoundaryError):
            await paginator.previous()

        assert row_source.calls == calls
        assert paginator.page_index == 0

    @pytest.mark.asyncio
    async def test_current_reloads_loaded_page(self, paginator, row_source):
        await paginator.current()
        await paginator.next()

        assert ids(await paginator.current()) == list(range(11, 21))
        assert paginator.page_index == 1
        assert row_source.find_calls[-1]["where"] == AllOf((
            Condition("id", ">=", 11),
            Condition("id", "<=", 20),
        ))

    @pytest.mark.asyncio
    async def test_previous_reads_backwards_from_cursor(self, paginator, row_source):
        await paginator.current()
        await paginator.next()
        await paginator.previous()

        call = row_source.find_calls[-1]
        assert call["where"] == Condition("id", "<", 11)
        assert call["order_by"] == (SortField("id", SortOrder.DESC),)
        assert call["limit"] == 10


class TestDescendingNavigation:
    """Same data, id descending."""

    @pytest.fixture
    def paginator(self, row_source, id_desc):
        return KeysetPaginator(row_source, order=id_desc, page_size=10)

    @pytest.mark.asyncio
    async def test_current_returns_highest_ids(self, paginator):
        assert ids(await paginator.current()) == list(range(25, 15, -1))
        assert (paginator.first_id, paginator.last_id) == (25, 16)

    @pytest.mark.asyncio
    async def test_previous_on_first_page_fails(self, paginator):
        await paginator.current()

        with pytest.raises(PageBoundaryError):
            await paginator.previous()

    @pytest.mark.asyncio
    async def test_previous_restriction_is_greater_than_first_id(self, paginator):
        await paginator.current()

        assert paginator.build_id_restrict("previous") == Condition("id", ">", 25)
        assert paginator.build_id_restrict("next") == Condition("id", "<", 16)
        assert paginator.build_id_restrict("current") == AllOf((
            Condition("id", ">=", 16),
            Condition("id", "<=", 25),
        ))

    @pytest.mark.asyncio
    async def test_next_then_previous(self, paginator):
        await paginator.current()

        assert ids(await paginator.next()) == list(range(15, 5, -1))
        assert ids(await paginator.previous()) == list(range(25, 15, -1))
        assert (paginator.first_id, paginator.last_id) == (25, 16)
        assert paginator.page_index == 0

    @pytest.mark.asyncio
    async def test_walks_to_last_page(self, paginator):
        await paginator.current()
        await paginator.next()

        assert ids(await paginator.next()) == [5, 4, 3, 2, 1]
        with pytest.raises(PageBoundaryError):
            await paginator.next()


class TestFilteredEnumeration:
    """Navigation under a base restriction."""

    @pytest.mark.asyncio
    async def test_enumerates_each_matching_row_once(self, row_source, id_asc):
        restriction = Condition("category", "=", "a")
        paginator = KeysetPaginator(row_source, order=id_asc, where=restriction, page_size=5)

        seen = ids(await paginator.current())
        while True:
            try:
                seen.extend(ids(await paginator.next()))
            except PageBoundaryError:
                break

        expected = ids(await row_source.find_where(restriction, order_by=id_asc))
        assert seen == expected
        assert seen == list(range(1, 26, 2))

    @pytest.mark.asyncio
    async def test_counts_use_base_restriction(self, row_source, id_asc):
        restriction = Condition("category", "=", "b")
        paginator = KeysetPaginator(row_source, order=id_asc, where=restriction, page_size=5)

        await paginator.current()

        assert row_source.count_calls == [restriction]
        assert paginator.total_items == 12
        assert paginator.total_pages == 3
        assert row_source.find_calls[0]["where"] == AllOf((restriction, Condition("id", ">", 0)))

    @pytest.mark.asyncio
    async def test_iter_pages(self, row_source, id_asc):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)

        pages = [ids(rows) async for rows in paginator.iter_pages()]

        assert pages == [list(range(1, 11)), list(range(11, 21)), list(range(21, 26))]


class TestPageCount:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("total,page_size,expected", [
        (25, 10, 3),
        (20, 10, 2),
        (1, 10, 1),
        (0, 10, 0),
    ])
    async def test_page_count_is_ceiling(self, total, page_size, expected, id_asc):
        from conftest import Item
        source = InMemoryRowSource([Item(id=i) for i in range(1, total + 1)])
        paginator = KeysetPaginator(source, order=id_asc, page_size=page_size)

        assert await paginator.build_page_count() == expected
        assert paginator.total_items == total

    @pytest.mark.asyncio
    async def test_empty_source(self, id_asc):
        paginator = KeysetPaginator(InMemoryRowSource([]), order=id_asc)

        assert await paginator.current() == []
        assert paginator.total_pages == 0
        assert not paginator.cursor.is_loaded
        with pytest.raises(PageBoundaryError):
            await paginator.next()

    @pytest.mark.asyncio
    async def test_count_is_refreshed_on_navigation(self, row_source, id_asc):
        from conftest import Item
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)
        await paginator.current()
        await paginator.next()
        await paginator.next()

        row_source.rows.append(Item(id=26))
        row_source.rows.extend(Item(id=i) for i in range(27, 36))

        assert ids(await paginator.next()) == list(range(26, 36))
        assert paginator.total_pages == 4


class TestConfiguration:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["current", "next", "previous", "build_page_count"])
    async def test_missing_identity_order_fails_before_storage(self, row_source, method):
        paginator = KeysetPaginator(row_source, order=[("name", "asc")])

        with pytest.raises(PaginationConfigurationError):
            await getattr(paginator, method)()

        assert row_source.calls == 0

    def test_negative_page_size_rejected(self, row_source, id_asc):
        with pytest.raises(PaginationConfigurationError) as exc_info:
            KeysetPaginator(row_source, order=id_asc, page_size=-1)
        assert exc_info.value.details == {"setting": "page_size"}

    @pytest.mark.parametrize("order", [
        [("name; DROP TABLE items", "asc")],
        [("id", "sideways")],
    ])
    def test_invalid_sort_spec_rejected(self, row_source, order):
        with pytest.raises(PaginationConfigurationError):
            KeysetPaginator(row_source, order=order)

    @pytest.mark.parametrize("page_size,expected", [(None, 10), (0, 10), (25, 25), (5000, 1000)])
    def test_page_size_defaults_and_cap(self, row_source, id_asc, page_size, expected):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=page_size)
        assert paginator.page_size == expected

    def test_mapping_order_is_lexicographic(self, row_source):
        paginator = KeysetPaginator(row_source, order={"name": "desc", "id": "asc"})

        assert paginator.order == (
            SortField("id", SortOrder.ASC),
            SortField("name", SortOrder.DESC),
        )
        assert paginator.build_order() == "ORDER BY id ASC, name DESC"
        assert paginator.build_order(reverse=True) == "ORDER BY id DESC, name ASC"

    def test_sequence_order_is_kept(self, row_source):
        paginator = KeysetPaginator(row_source, order=[("name", "desc"), ("id", "asc")])
        assert paginator.build_order() == "ORDER BY name DESC, id ASC"

    def test_custom_identity_column(self, row_source):
        paginator = KeysetPaginator(row_source, order=[("item_id", "desc")], id_column="item_id")

        assert paginator.identity_order() == SortOrder.DESC
        assert paginator.build_id_restrict(PageDirection.CURRENT) == Condition("item_id", ">", 0)

    def test_in_memory_source_satisfies_protocol(self, row_source):
        assert isinstance(row_source, RowSource)


class TestGetPage:

    @pytest.fixture
    def paginator(self, row_source, id_asc):
        return KeysetPaginator(row_source, order=id_asc, page_size=10)

    @pytest.mark.asyncio
    async def test_dispatches_by_name(self, paginator):
        assert ids(await paginator.get_page("current")) == list(range(1, 11))
        assert ids(await paginator.get_page("next")) == list(range(11, 21))
        assert ids(await paginator.get_page(PageDirection.PREVIOUS)) == list(range(1, 11))

    @pytest.mark.asyncio
    async def test_unknown_direction(self, paginator, row_source):
        with pytest.raises(InvalidDirectionError) as exc_info:
            await paginator.get_page("sideways")

        assert isinstance(exc_info.value, ValueError)
        assert row_source.calls == 0

    @pytest.mark.asyncio
    async def test_propagates_boundary_errors(self, paginator):
        await paginator.get_page("current")

        with pytest.raises(PageBoundaryError):
            await paginator.get_page("previous")

    @pytest.mark.asyncio
    async def test_propagates_configuration_errors(self, row_source):
        paginator = KeysetPaginator(row_source, order=[("name", "asc")])

        with pytest.raises(PaginationConfigurationError):
            await paginator.get_page("current")


class TestFailureKeepsState:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["current", "next", "previous"])
    async def test_storage_failure_leaves_cursor(self, row_source, id_asc, method):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)
        await paginator.current()
        await paginator.next()
        before = paginator.cursor

        row_source.fail_with = StorageError("connection lost", operation="fetch")
        with pytest.raises(StorageError):
            await getattr(paginator, method)()

        assert paginator.cursor == before


class TestCursorState:

    @pytest.mark.asyncio
    async def test_next_before_current_reads_from_the_start(self, row_source, id_asc):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)

        assert ids(await paginator.next()) == list(range(1, 11))
        assert paginator.page_index == 1

    @pytest.mark.asyncio
    async def test_page_info(self, row_source, id_asc):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)
        await paginator.current()

        assert paginator.page_info == {
            "current_page": 0,
            "per_page": 10,
            "total_items": 25,
            "total_pages": 3,
            "has_next": True,
            "has_previous": False,
            "first_id": 1,
            "last_id": 10,
        }

    def test_cursor_counts(self):
        cursor = PageCursor().with_counts(21, 10)
        assert cursor.total_pages == 3
        assert PageCursor().with_counts(0, 10).total_pages == 0

    def test_cursor_is_loaded(self):
        assert not PageCursor().is_loaded
        assert PageCursor(first_id=1, last_id=10).is_loaded
        assert PageCursor().moved(1).is_loaded

    @pytest.mark.asyncio
    async def test_navigation_logged_at_debug(self, row_source, id_asc, caplog):
        paginator = KeysetPaginator(row_source, order=id_asc, page_size=10)

        with caplog.at_level(logging.DEBUG, logger="clinic_records.features.pagination"):
            await paginator.current()

        assert "Fetching current page" in caplog.text
        assert "ORDER BY id ASC" in caplog.text
