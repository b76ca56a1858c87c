"""
Comment service: comments scoped to an article.

Only the comment's author may delete it.  ``create`` and ``remove`` run
through ``TransactionManager.run_in_transaction``, so they commit on
their own unless the caller already holds an owning transaction scope.
Callers normally reach this service through ``ArticleService``, which
resolves the parent article from its slug.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from conduit.exceptions import NotFoundError, UnauthorizedError
from conduit.models import Comment
from conduit.repositories import comment_repository
from conduit.schemas import Actor, CommentCreate, PaginatedResult, PaginationOptions
from conduit.transaction import TransactionManager

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, transactions: TransactionManager | None = None) -> None:
        self.transactions = transactions or TransactionManager()

    async def create(self, db: AsyncSession, article_id: int, data: CommentCreate, actor: Actor) -> Comment:
        """Persist a comment authored by *actor* and return it with its author loaded."""

        async def _create(session: AsyncSession) -> int:
            comment = await comment_repository.create(
                session, article_id=article_id, body=data.body, author_id=actor.id
            )
            return comment.id

        comment_id = await self.transactions.run_in_transaction(db, _create)
        logger.info("Comment %d created on article %d by user %d", comment_id, article_id, actor.id)
        return await self.find_by_id(db, comment_id)

    async def find_by_id(self, db: AsyncSession, comment_id: int) -> Comment:
        comment = await comment_repository.find_by_id(db, comment_id)
        if comment is None:
            raise NotFoundError("Comment", "id", comment_id)
        return comment

    async def find_all_with_pagination(
        self, db: AsyncSession, article_id: int, options: PaginationOptions
    ) -> PaginatedResult:
        items, total = await comment_repository.find_all_with_pagination(db, article_id, options)
        return PaginatedResult.build(items, total, options)

    async def remove(
        self,
        db: AsyncSession,
        comment_id: int,
        actor: Actor,
        article_id: int | None = None,
    ) -> None:
        """
        Delete *comment_id* on behalf of *actor*.

        Raises NotFoundError when the comment does not exist or, if
        *article_id* is given, belongs to a different article.  Raises
        UnauthorizedError when *actor* is not the comment's author.
        """

        async def _remove(session: AsyncSession) -> None:
            comment = await self.find_by_id(session, comment_id)
            if article_id is not None and comment.article_id != article_id:
                raise NotFoundError("Comment", "id", comment_id)

            if comment.author_id != actor.id:
                raise UnauthorizedError(
                    "Not authorized to delete the comment",
                    {"id": "Not authorized to delete the comment"},
                )

            await comment_repository.remove(session, comment_id)

        await self.transactions.run_in_transaction(db, _remove)
        logger.info("Comment %d removed by user %d", comment_id, actor.id)
