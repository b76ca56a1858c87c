"""
Test infrastructure for the Conduit core.

Strategy
--------
- SQLite in-memory via aiosqlite eliminates the need for a running Postgres
  instance in CI, keeping the suite fast and self-contained.
- StaticPool forces all async tasks to share the same in-memory database
  connection, which is required because SQLite in-memory databases are
  connection-scoped; a new connection would see an empty database.
- Foreign keys are switched on for the test engine so ON DELETE CASCADE
  behaves as it does on Postgres.
- All tables are created fresh before each test and dropped after, giving
  each test a clean isolated state without needing transactions or truncation.
- Services are wired to the test session factory through their
  TransactionManager; no module-level state is patched.
"""
import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from conduit.database import Base, enable_sqlite_foreign_keys
from conduit.models import User
from conduit.schemas import Actor
from conduit.services.article_service import ArticleService
from conduit.services.slug import SlugGenerator
from conduit.transaction import TransactionManager

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

enable_sqlite_foreign_keys(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


class QueryCounter:
    """Counts SQL statements sent to the test engine while enabled."""

    def __init__(self) -> None:
        self.count = 0
        self.enabled = False

    def listener(self):
        def _count_query(conn, cursor, statement, parameters, context, executemany):
            if self.enabled:
                self.count += 1

        return _count_query


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """
    Yield a live AsyncSession for tests that call services directly.

    Each service write commits on its own; wrap calls in
    ``transactions.transaction(db_session)`` to group them.
    """
    async with async_session_test() as session:
        yield session


@pytest.fixture
def session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine, for opening independent sessions."""
    return async_session_test


@pytest.fixture
def transactions() -> TransactionManager:
    return TransactionManager(async_session_test)


@pytest.fixture
def article_service(transactions: TransactionManager) -> ArticleService:
    return ArticleService(transactions=transactions)


@pytest.fixture
def query_counter():
    """
    Register a ``before_cursor_execute`` listener on the test engine and
    yield a counter; set ``counter.enabled = True`` around the code under
    test.
    """
    counter = QueryCounter()
    listener = counter.listener()
    event.listen(engine_test.sync_engine, "before_cursor_execute", listener)
    yield counter
    event.remove(engine_test.sync_engine, "before_cursor_execute", listener)


async def _create_user(email: str) -> User:
    async with async_session_test() as session:
        user = User(email=email, first_name="Test", last_name="User")
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def author() -> Actor:
    user = await _create_user("author@example.com")
    return Actor(id=user.id)


@pytest_asyncio.fixture
async def other_user() -> Actor:
    user = await _create_user("other@example.com")
    return Actor(id=user.id)


def constant_bytes(value: int = 0):
    """Random-byte provider that always returns *value* repeated."""

    def _random_bytes(n: int) -> bytes:
        return bytes([value]) * n

    return _random_bytes


@pytest.fixture
def fixed_slugs() -> SlugGenerator:
    return SlugGenerator(random_bytes=constant_bytes(0))
