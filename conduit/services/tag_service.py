"""
Tag service: lookup, bulk creation and reconciliation of tag names.

Reconciliation turns the tag names a user typed into Tag rows, reusing
the ones that exist and creating only the missing ones.  It performs no
locking; two requests introducing the same new name at the same time
are separated by the unique constraint on ``tags.name``, and the loser
fails with ``IntegrityError``.

Names are compared exactly: ``"Go"`` and ``"go"`` are different tags.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import Tag
from conduit.repositories import tag_repository
from conduit.schemas import TagCreate

logger = logging.getLogger(__name__)


class TagService:
    async def find_by_names(self, db: AsyncSession, names: list[str]) -> list[Tag]:
        return await tag_repository.find_by_names(db, names)

    async def create_many(self, db: AsyncSession, data: list[TagCreate]) -> list[Tag]:
        tags = await tag_repository.create_many(db, [item.name for item in data])
        logger.debug("Created %d tag(s): %s", len(tags), [t.name for t in tags])
        return tags

    async def find_all(self, db: AsyncSession) -> list[Tag]:
        return await tag_repository.find_all(db)

    @staticmethod
    def to_create_dtos(names: list[str]) -> list[TagCreate]:
        return [TagCreate(name=name) for name in names]

    async def reconcile(self, db: AsyncSession, names: list[str]) -> list[Tag]:
        """
        Return exactly one Tag per distinct name in *names*, in the order
        the names first appear, creating the ones that do not exist yet.

        An empty list issues no queries.
        """
        unique_names = list(dict.fromkeys(names))
        if not unique_names:
            return []

        existing = await self.find_by_names(db, unique_names)
        by_name = {tag.name: tag for tag in existing}

        missing = [name for name in unique_names if name not in by_name]
        if missing:
            for tag in await self.create_many(db, self.to_create_dtos(missing)):
                by_name[tag.name] = tag

        return [by_name[name] for name in unique_names]
