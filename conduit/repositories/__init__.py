# Repositories package.
#
# Thin query modules, one per aggregate.  Every function takes an
# AsyncSession as its first argument, flushes but never commits; the
# transaction boundary belongs to the service layer
# (``conduit.transaction.TransactionManager``) or to the caller.
#
#   article_repository  — Article CRUD, slug lookups, pagination
#   comment_repository  — Comment CRUD scoped to an article
#   tag_repository      — Tag lookup by name and bulk creation
#   user_repository     — User lookup by id
