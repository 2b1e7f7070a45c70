"""Row source protocol consumed by the keyset paginator."""

from typing import List, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from ....database.expressions import Expression
from ..entities import SortField

T = TypeVar('T')


@runtime_checkable
class RowSource(Protocol[T]):
    """Storage collaborator providing filtered counts and filtered, ordered, limited rows."""

    async def count_where(self, where: Optional[Expression] = None) -> int:
        """Count rows matching the expression (all rows for None)."""
        ...

    async def find_where(
        self,
        where: Optional[Expression] = None,
        order_by: Sequence[SortField] = (),
        limit: Optional[int] = None
    ) -> List[T]:
        """Find rows matching the expression in the given order, at most limit rows."""
        ...
