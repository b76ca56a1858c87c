"""
Article service: business logic for the Article aggregate.

Design notes
------------
- Every write (create, update, remove, and the comment writes in
  ``CommentService``) runs through
  ``TransactionManager.run_in_transaction``: tag reconciliation, slug
  generation and the article write either all land or all roll back,
  so a failure never leaves orphan tags or a half-tagged article.  The
  write commits unless the caller holds an owning scope, in which case
  it is a SAVEPOINT inside it.
- The returned article is re-fetched after the transaction exits.
- Slugs are checked against storage before use and regenerated with a
  fresh random suffix on a hit, up to ``settings.SLUG_MAX_ATTEMPTS``
  times.  The unique index on ``articles.slug`` stays the final guard.
- Every read that returns an article eager-loads its author and tags.
- Comment operations resolve the parent article from its slug and
  delegate to ``CommentService`` with the resolved id.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from conduit.config import settings
from conduit.exceptions import NotFoundError, SlugCollisionError
from conduit.models import Article, Comment
from conduit.repositories import article_repository
from conduit.schemas import (
    Actor,
    ArticleCreate,
    ArticleUpdate,
    CommentCreate,
    PaginatedResult,
    PaginationOptions,
)
from conduit.services.comment_service import CommentService
from conduit.services.slug import SlugGenerator
from conduit.services.tag_service import TagService
from conduit.transaction import TransactionManager

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(
        self,
        comment_service: CommentService | None = None,
        tag_service: TagService | None = None,
        slug_generator: SlugGenerator | None = None,
        transactions: TransactionManager | None = None,
    ) -> None:
        self.transactions = transactions or TransactionManager()
        self.comments = comment_service or CommentService(self.transactions)
        self.tags = tag_service or TagService()
        self.slugs = slug_generator or SlugGenerator()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _unique_slug(self, db: AsyncSession, title: str) -> str:
        attempts = settings.SLUG_MAX_ATTEMPTS
        for _ in range(attempts):
            slug = self.slugs.generate(title)
            if not await article_repository.slug_exists(db, slug):
                return slug
            logger.warning("Slug collision on %r, regenerating", slug)
        raise SlugCollisionError(title, attempts)

    async def validate_and_fetch_article_by_id(self, db: AsyncSession, article_id: int) -> Article:
        article = await article_repository.find_by_id_with_relations(db, article_id)
        if article is None:
            raise NotFoundError("Article", "id", article_id)
        return article

    async def validate_and_fetch_article_by_slug(self, db: AsyncSession, slug: str) -> Article:
        article = await article_repository.find_by_slug(db, slug)
        if article is None:
            raise NotFoundError("Article", "slug", slug)
        return article

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    async def create_article(self, db: AsyncSession, data: ArticleCreate, actor: Actor) -> Article:
        """
        Create an article authored by *actor* and return it with its
        author and tags loaded, re-fetched after the transaction commits.
        """

        async def _create(session: AsyncSession) -> int:
            tags = await self.tags.reconcile(session, data.tag_list) if data.tag_list else []
            slug = await self._unique_slug(session, data.title)
            article = await article_repository.create(
                session,
                title=data.title,
                body=data.body,
                slug=slug,
                author_id=actor.id,
                tags=tags,
            )
            return article.id

        article_id = await self.transactions.run_in_transaction(db, _create)
        article = await self.validate_and_fetch_article_by_id(db, article_id)
        logger.info("Article %d created by user %d (slug=%s)", article.id, actor.id, article.slug)
        return article

    async def update_article(self, db: AsyncSession, article_id: int, data: ArticleUpdate) -> Article:
        """
        Apply the fields explicitly set in *data* to the article.

        The slug is regenerated only when the title actually changes.
        When ``tag_list`` is given it replaces the article's tags.
        """

        async def _update(session: AsyncSession) -> None:
            article = await self.validate_and_fetch_article_by_id(session, article_id)
            update_data = data.model_dump(exclude_unset=True)
            tag_names: list[str] | None = update_data.pop("tag_list", None)
            title: str | None = update_data.pop("title", None)

            if title is not None and title != article.title:
                article.slug = await self._unique_slug(session, title)
                article.title = title

            for field, value in update_data.items():
                if value is not None:
                    setattr(article, field, value)

            if tag_names is not None:
                article.tags = await self.tags.reconcile(session, tag_names)

            await session.flush()

        await self.transactions.run_in_transaction(db, _update)
        logger.info("Article %d updated", article_id)
        return await self.validate_and_fetch_article_by_id(db, article_id)

    async def remove_article(self, db: AsyncSession, article_id: int) -> bool:
        deleted = await self.transactions.run_in_transaction(
            db, lambda session: article_repository.remove(session, article_id)
        )
        if deleted:
            logger.info("Article %d removed", article_id)
        return deleted

    async def find_one(self, db: AsyncSession, article_id: int) -> Article:
        return await self.validate_and_fetch_article_by_id(db, article_id)

    async def find_by_slug(self, db: AsyncSession, slug: str) -> Article:
        return await self.validate_and_fetch_article_by_slug(db, slug)

    async def find_all_with_pagination(
        self,
        db: AsyncSession,
        options: PaginationOptions,
        tag: str | None = None,
        author_id: int | None = None,
    ) -> PaginatedResult:
        items, total = await article_repository.find_all_with_pagination(
            db, options, tag=tag, author_id=author_id
        )
        return PaginatedResult.build(items, total, options)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def create_comment(
        self, db: AsyncSession, slug: str, data: CommentCreate, actor: Actor
    ) -> Comment:
        article = await self.validate_and_fetch_article_by_slug(db, slug)
        return await self.comments.create(db, article.id, data, actor)

    async def remove_comment(self, db: AsyncSession, comment_id: int, slug: str, actor: Actor) -> None:
        article = await self.validate_and_fetch_article_by_slug(db, slug)
        await self.comments.remove(db, comment_id, actor, article_id=article.id)

    async def find_all_comments_with_pagination(
        self, db: AsyncSession, slug: str, options: PaginationOptions
    ) -> PaginatedResult:
        article = await self.validate_and_fetch_article_by_slug(db, slug)
        return await self.comments.find_all_with_pagination(db, article.id, options)
