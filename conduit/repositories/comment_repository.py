from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from conduit.models import Comment
from conduit.schemas import PaginationOptions


async def create(db: AsyncSession, *, article_id: int, body: str, author_id: int) -> Comment:
    comment = Comment(article_id=article_id, body=body, author_id=author_id)
    db.add(comment)
    await db.flush()
    return comment


async def find_by_id(db: AsyncSession, comment_id: int) -> Comment | None:
    """Return the comment with its author loaded, or None."""
    q = (
        select(Comment)
        .where(Comment.id == comment_id)
        .options(joinedload(Comment.author))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(q)
    return result.unique().scalar_one_or_none()


async def find_all_with_pagination(
    db: AsyncSession, article_id: int, options: PaginationOptions
) -> tuple[list[Comment], int]:
    count_q = select(func.count()).select_from(Comment).where(Comment.article_id == article_id)
    total: int = (await db.execute(count_q)).scalar_one()

    q = (
        select(Comment)
        .where(Comment.article_id == article_id)
        .options(joinedload(Comment.author))
        .order_by(desc(Comment.created_at), desc(Comment.id))
        .offset(options.offset)
        .limit(options.limit)
    )
    result = await db.execute(q)
    return list(result.unique().scalars().all()), total


async def remove(db: AsyncSession, comment_id: int) -> bool:
    result = await db.execute(delete(Comment).where(Comment.id == comment_id))
    return result.rowcount > 0
