"""Picture repository."""

import logging
from typing import Any, List

from ....core.exceptions import InvalidAssociationError
from ....database.expressions import Condition, and_
from ....features.pagination import SortField
from ....repositories import BaseRepository
from ..entities import Picture

logger = logging.getLogger(__name__)


class PictureRepository(BaseRepository[Picture]):
    """Repository for the ``pictures`` table."""

    entity_class = Picture
    table_name = "pictures"

    def owner_repository(self, imageable_type: str) -> BaseRepository[Any]:
        """Repository for an imageable owner type."""
        if imageable_type == "Physician":
            from ...physicians.repositories import PhysicianRepository
            return PhysicianRepository(self.database)
        raise InvalidAssociationError(self.entity_name, f"imageable:{imageable_type}")

    async def pictures_for(self, imageable_type: str, imageable_id: int) -> List[Picture]:
        """Get the pictures of one owner."""
        return await self.find_where(
            and_(
                Condition("imageable_type", "=", imageable_type),
                Condition("imageable_id", "=", imageable_id),
            ),
            order_by=[SortField(self.id_column)]
        )

    async def imageable_of(self, picture: Picture) -> Any:
        """Load the owner of a picture."""
        return await self.owner_repository(picture.imageable_type).find(picture.imageable_id)
