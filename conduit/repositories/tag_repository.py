from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import Tag


async def find_by_names(db: AsyncSession, names: list[str]) -> list[Tag]:
    """Return the existing tags whose name is in *names* (exact match)."""
    if not names:
        return []
    result = await db.execute(select(Tag).where(Tag.name.in_(names)))
    return list(result.scalars().all())


async def create_many(db: AsyncSession, names: list[str]) -> list[Tag]:
    """
    Insert one tag per name in a single flush.

    A name that already exists (for instance inserted by a concurrent
    request) makes the flush fail with ``IntegrityError``.
    """
    tags = [Tag(name=name) for name in names]
    db.add_all(tags)
    await db.flush()
    return tags


async def find_all(db: AsyncSession) -> list[Tag]:
    result = await db.execute(select(Tag).order_by(Tag.name))
    return list(result.scalars().all())
