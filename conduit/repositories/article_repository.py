"""
Article persistence.

Eager loading via ``joinedload`` (many-to-one: author) and
``selectinload`` (many-to-many: tags) is used for every read that
returns relations.  ``populate_existing`` is set on those reads because
the article is usually already in the identity map right after a write,
and without it the ``noload`` relationships would keep their empty
placeholder values.
"""
from sqlalchemy import delete, desc, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from conduit.models import Article, Tag
from conduit.schemas import PaginationOptions


def _with_relations(query):
    return query.options(joinedload(Article.author), selectinload(Article.tags)).execution_options(
        populate_existing=True
    )


def _filtered(query, tag: str | None, author_id: int | None):
    if tag is not None:
        query = query.where(Article.tags.any(Tag.name == tag))
    if author_id is not None:
        query = query.where(Article.author_id == author_id)
    return query


async def create(
    db: AsyncSession,
    *,
    title: str,
    body: str,
    slug: str,
    author_id: int,
    tags: list[Tag],
) -> Article:
    article = Article(title=title, body=body, slug=slug, author_id=author_id, tags=list(tags))
    db.add(article)
    await db.flush()
    return article


async def find_by_id(db: AsyncSession, article_id: int) -> Article | None:
    result = await db.execute(select(Article).where(Article.id == article_id))
    return result.scalar_one_or_none()


async def find_by_id_with_relations(db: AsyncSession, article_id: int) -> Article | None:
    result = await db.execute(_with_relations(select(Article).where(Article.id == article_id)))
    return result.unique().scalar_one_or_none()


async def find_by_slug(db: AsyncSession, slug: str) -> Article | None:
    result = await db.execute(_with_relations(select(Article).where(Article.slug == slug)))
    return result.unique().scalar_one_or_none()


async def slug_exists(db: AsyncSession, slug: str) -> bool:
    return bool(await db.scalar(select(exists().where(Article.slug == slug))))


async def find_all_with_pagination(
    db: AsyncSession,
    options: PaginationOptions,
    tag: str | None = None,
    author_id: int | None = None,
) -> tuple[list[Article], int]:
    """
    Return one page of articles (newest first) and the total number of
    articles matching the filters.
    """
    count_q = _filtered(select(func.count()).select_from(Article), tag, author_id)
    total: int = (await db.execute(count_q)).scalar_one()

    articles_q = (
        _with_relations(_filtered(select(Article), tag, author_id))
        .order_by(desc(Article.created_at), desc(Article.id))
        .offset(options.offset)
        .limit(options.limit)
    )
    result = await db.execute(articles_q)
    return list(result.unique().scalars().all()), total


async def remove(db: AsyncSession, article_id: int) -> bool:
    """
    Delete the article identified by *article_id*.

    Comments and tag links are removed by the ``ON DELETE CASCADE``
    foreign keys.  Returns False when no row matched.
    """
    result = await db.execute(delete(Article).where(Article.id == article_id))
    return result.rowcount > 0
