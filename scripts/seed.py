"""Database seeder for local development.

Articles go through ArticleService so every run exercises tag
reconciliation and slug generation the same way real requests do.
"""
import argparse
import asyncio
import logging
import random
import time

from conduit.config import settings
from conduit.database import Base, engine
from conduit.logging_config import setup_logging
from conduit.repositories import user_repository
from conduit.schemas import Actor, ArticleCreate, CommentCreate, UserCreate
from conduit.services.article_service import ArticleService
from conduit.transaction import TransactionManager

logger = logging.getLogger("conduit.seed")

TAGS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
        "react", "typescript", "aws", "devops", "testing", "performance",
        "security", "microservices", "graphql", "rest-api"]


async def seed(small: bool = False) -> None:
    num_users = 5 if small else 50
    num_articles = 50 if small else 2000
    max_comments_per_article = 2 if small else 5

    logger.info("Seeding: %d users, %d articles", num_users, num_articles)
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    transactions = TransactionManager()
    service = ArticleService(transactions=transactions)

    async with transactions.session() as db:
        actors = []
        for i in range(num_users):
            user = await user_repository.create(
                db,
                UserCreate(email=f"user_{i:04d}@example.com", first_name="User", last_name=f"{i:04d}"),
            )
            actors.append(Actor(id=user.id))
    logger.info("Created %d users", len(actors))

    total_comments = 0
    for i in range(num_articles):
        topic = random.choice(TAGS)
        async with transactions.session() as db:
            article = await service.create_article(
                db,
                ArticleCreate(
                    title=f"Article {i}: How to optimize {topic} applications",
                    body=f"This is the full content of article {i}. " * 20,
                    # Overlapping names so most requests reuse existing tags.
                    tag_list=random.sample(TAGS, k=random.randint(1, 4)) + [topic],
                ),
                random.choice(actors),
            )
            for _ in range(random.randint(0, max_comments_per_article)):
                await service.create_comment(
                    db,
                    article.slug,
                    CommentCreate(body="Great article! Very helpful."),
                    random.choice(actors),
                )
                total_comments += 1

    elapsed = time.perf_counter() - start
    logger.info(
        "Seeding complete in %.1fs: %d users, %d articles, %d comments",
        elapsed, num_users, num_articles, total_comments,
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the Conduit database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 articles)")
    args = parser.parse_args()
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
