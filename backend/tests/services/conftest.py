"""Service test fixtures - async DB, signer, pinned clock and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager and signature_authority singletons patched for the client

Design Decisions:
    - SQLite in-memory: fast, no external dependency; queries use only
      portable SQL (no PostgreSQL-specific features)
    - FakeClock: service tests use small literal timestamps (t=100, 150...)
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from fname_registry.core.authorization import AllowListAuthorization
from fname_registry.db.base import Base
from fname_registry.infrastructure.database import get_db, DatabaseSessionManager
from fname_registry.infrastructure.signature_authority import SignatureAuthority
from fname_registry.infrastructure.transfer_repository import SqlTransferRepository
from fname_registry.models.transfer import Transfer
from fname_registry.services.transfer_service import TransferService
import fname_registry.infrastructure.database as db_module
import fname_registry.infrastructure.signature_authority as signer_module
from fname_registry.main import app
from tests.signing import ADMIN_ADDRESS, ADMIN_FID, SERVER_PRIVATE_KEY


class FakeClock:
    def __init__(self, now: int = 1_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def authority():
    return SignatureAuthority(
        SERVER_PRIVATE_KEY, AllowListAuthorization({ADMIN_FID: ADMIN_ADDRESS}),
    )


@pytest.fixture
def repository(test_db):
    return SqlTransferRepository(test_db)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(repository, authority, clock):
    return TransferService(repository, authority, clock=clock)


@pytest.fixture
def count_transfers(test_db):
    async def _count() -> int:
        result = await test_db.execute(select(func.count()).select_from(Transfer))
        return result.scalar_one()
    return _count


@pytest.fixture
async def client(test_engine, test_session_factory, authority):
    """FastAPI test client with DB and signer overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    original_authority = signer_module.signature_authority
    signer_module.signature_authority = authority

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    signer_module.signature_authority = original_authority
