"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are portable (plain float
coordinates, JSON blood-group lists), so the real metadata is used.
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from donorlink.domain.enums import BloodGroup, UserType
from donorlink.infrastructure.database import Base
from donorlink.infrastructure.models import UserModel
from donorlink.infrastructure.repositories import InventoryRepository


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

NAIROBI = (-1.286389, 36.817223)
KNH = (-1.3041, 36.8060)  # ~2.3 km from NAIROBI


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient backed by SQLite, with inventory seeded and two donors.

    Seeded users (ids in insertion order):
      1. "Amina"  O+ at NAIROBI
      2. "Baraka" O- at KNH
      3. "Chege"  A+ with no location
      4. "Staff"  staff account at KNH
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        await InventoryRepository(session).ensure_seeded()
        session.add_all(
            [
                UserModel(
                    name="Amina", email="amina@example.com",
                    blood_group=BloodGroup.O_POS, user_type=UserType.DONOR,
                    lat=NAIROBI[0], lng=NAIROBI[1], total_donations=3,
                    is_verified=True,
                ),
                UserModel(
                    name="Baraka", email="baraka@example.com",
                    blood_group=BloodGroup.O_NEG, user_type=UserType.DONOR,
                    lat=KNH[0], lng=KNH[1],
                ),
                UserModel(
                    name="Chege", email="chege@example.com",
                    blood_group=BloodGroup.A_POS, user_type=UserType.DONOR,
                ),
                UserModel(
                    name="Staff", email="staff@example.com",
                    blood_group=BloodGroup.UNKNOWN, user_type=UserType.STAFF,
                    organization="Kenyatta National Hospital",
                    lat=KNH[0], lng=KNH[1],
                ),
            ]
        )
        await session.commit()

    async def _test_db():
        async with TestSessionFactory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from donorlink.api.app import create_app
    from donorlink.api.dependencies import get_db

    app = create_app()
    app.dependency_overrides[get_db] = _test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(client: AsyncClient) -> AsyncGenerator[AsyncSession, None]:
    """A session on the same database the ``client`` app talks to."""
    async with TestSessionFactory() as session:
        yield session
