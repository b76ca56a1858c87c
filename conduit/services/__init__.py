# Services package.
#
# Each module exposes a service class that encapsulates the business
# rules for one part of the domain:
#
#   article_service  — create/update/remove/find for Article, plus the
#                      article-scoped comment operations
#   comment_service  — comments scoped to an article, author-only delete
#   tag_service      — tag lookup and reconciliation of tag names
#   slug             — slug derivation with an injectable random source
#
# All service methods accept an AsyncSession as their first argument.
# Every write runs inside ``TransactionManager.run_in_transaction`` and
# commits unless the caller holds an owning ``transaction(db)`` scope.
