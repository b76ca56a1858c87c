"""
Tag reconciliation tests: deduplication, reuse of existing tags and
the no-query path for an empty request.
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models import Tag
from conduit.repositories import tag_repository
from conduit.services.tag_service import TagService


async def _tag_count(db: AsyncSession) -> int:
    return await db.scalar(select(func.count()).select_from(Tag))


@pytest.mark.asyncio
async def test_reconcile_empty_list_issues_no_queries(db_session: AsyncSession, query_counter):
    query_counter.enabled = True
    tags = await TagService().reconcile(db_session, [])
    query_counter.enabled = False

    assert tags == []
    assert query_counter.count == 0


@pytest.mark.asyncio
async def test_reconcile_creates_missing_tags(db_session: AsyncSession):
    tags = await TagService().reconcile(db_session, ["python", "fastapi"])

    assert [t.name for t in tags] == ["python", "fastapi"]
    assert all(t.id is not None for t in tags)
    assert await _tag_count(db_session) == 2


@pytest.mark.asyncio
async def test_reconcile_deduplicates_requested_names(db_session: AsyncSession):
    tags = await TagService().reconcile(db_session, ["python", "go", "python", "go", "python"])

    assert [t.name for t in tags] == ["python", "go"]
    assert await _tag_count(db_session) == 2


@pytest.mark.asyncio
async def test_reconcile_reuses_existing_and_creates_only_new(db_session: AsyncSession):
    [existing] = await tag_repository.create_many(db_session, ["python"])

    tags = await TagService().reconcile(db_session, ["python", "rust"])

    assert [t.name for t in tags] == ["python", "rust"]
    assert tags[0].id == existing.id
    assert await _tag_count(db_session) == 2


@pytest.mark.asyncio
async def test_reconcile_all_existing_creates_nothing(db_session: AsyncSession, query_counter):
    await tag_repository.create_many(db_session, ["a", "b"])

    query_counter.enabled = True
    tags = await TagService().reconcile(db_session, ["b", "a"])
    query_counter.enabled = False

    assert [t.name for t in tags] == ["b", "a"]
    # Only the lookup; no INSERT.
    assert query_counter.count == 1
    assert await _tag_count(db_session) == 2


@pytest.mark.asyncio
async def test_reconcile_is_case_sensitive(db_session: AsyncSession):
    tags = await TagService().reconcile(db_session, ["Go", "go"])

    assert {t.name for t in tags} == {"Go", "go"}
    assert tags[0].id != tags[1].id


@pytest.mark.asyncio
async def test_find_all_orders_by_name(db_session: AsyncSession):
    await tag_repository.create_many(db_session, ["zeta", "alpha", "mid"])

    tags = await TagService().find_all(db_session)

    assert [t.name for t in tags] == ["alpha", "mid", "zeta"]


@pytest.mark.asyncio
async def test_find_by_names_ignores_unknown(db_session: AsyncSession):
    await tag_repository.create_many(db_session, ["known"])

    tags = await TagService().find_by_names(db_session, ["known", "unknown"])

    assert [t.name for t in tags] == ["known"]
