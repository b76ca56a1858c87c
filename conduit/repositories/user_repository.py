from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import User
from conduit.schemas import UserCreate


async def find_by_id(db: AsyncSession, user_id: int) -> User | None:
    return await db.get(User, user_id)


async def create(db: AsyncSession, data: UserCreate) -> User:
    """
    Persist a new user.

    Email uniqueness is enforced at the database level; a duplicate
    surfaces as ``IntegrityError`` on flush.
    """
    user = User(email=data.email, first_name=data.first_name, last_name=data.last_name)
    db.add(user)
    await db.flush()
    return user
