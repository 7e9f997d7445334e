"""
Repository queries executed against an in-memory SQLite database.

Only the columns the queries touch are created, so the PostgreSQL-only
column types of the full users table are not needed.
"""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import Column, DateTime, MetaData, String, Table, insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from academy.modules.users.repository import UserRepository

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("account_id", String(20), nullable=False, unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


@pytest_asyncio.fixture
async def sqlite_db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    await engine.dispose()


async def _seed(db: AsyncSession, *rows: tuple[str, datetime]) -> None:
    await db.execute(
        insert(users),
        [
            {"id": f"user-{index}", "account_id": account_id, "created_at": created_at}
            for index, (account_id, created_at) in enumerate(rows)
        ],
    )


class TestLatestAccountId:
    @pytest.mark.asyncio
    async def test_empty_table(self, sqlite_db):
        assert await UserRepository.get_latest_account_id(sqlite_db, "APS") is None

    @pytest.mark.asyncio
    async def test_highest_id_wins_over_newest_row(self, sqlite_db):
        # APS003 was assigned later but its transaction started first
        start = datetime(2026, 1, 1, tzinfo=UTC)
        await _seed(
            sqlite_db,
            ("APS001", start),
            ("APS003", start + timedelta(seconds=1)),
            ("APS002", start + timedelta(seconds=2)),
        )

        assert await UserRepository.get_latest_account_id(sqlite_db, "APS") == "APS003"

    @pytest.mark.asyncio
    async def test_longer_suffix_is_higher(self, sqlite_db):
        start = datetime(2026, 1, 1, tzinfo=UTC)
        await _seed(
            sqlite_db,
            ("APS1000", start),
            ("APS999", start + timedelta(seconds=1)),
        )

        assert await UserRepository.get_latest_account_id(sqlite_db, "APS") == "APS1000"

    @pytest.mark.asyncio
    async def test_other_prefixes_are_ignored(self, sqlite_db):
        now = datetime.now(UTC)
        await _seed(sqlite_db, ("APS004", now), ("TMP9999", now))

        assert await UserRepository.get_latest_account_id(sqlite_db, "APS") == "APS004"
