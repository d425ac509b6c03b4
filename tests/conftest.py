"""
Shared test fixtures.

Uses a file-backed SQLite database (via aiosqlite) in ``tmp_path`` so tests
run without Docker / PostgreSQL / Redis.  A file is used instead of
``:memory:`` so that concurrent sessions get separate connections to the
same database, which the race tests depend on.

Accounts come from ``FakeAccountGateway``, which hands out sequential ids
instead of talking to the account service.
"""

from __future__ import annotations

import itertools
from typing import Any, AsyncGenerator, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ridehailing.application.ports import Account, AccountGateway
from ridehailing.infrastructure.database import Base
from ridehailing.infrastructure.repositories import (
    PositionRepositoryDatabase,
    RideRepositoryDatabase,
)

# Florianópolis: Campeche -> Trindade
FROM_LAT, FROM_LONG = -27.584905257808835, -48.545022195325124
TO_LAT, TO_LONG = -27.496887588317275, -48.522234807851476


def passenger_profile(**overrides) -> dict[str, Any]:
    profile = {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "cpf": "97456321558",
        "password": "123456",
        "isPassenger": True,
    }
    profile.update(overrides)
    return profile


def driver_profile(**overrides) -> dict[str, Any]:
    profile = {
        "name": "Jane Roe",
        "email": "jane.roe@example.com",
        "cpf": "97456321558",
        "password": "123456",
        "carPlate": "AAA9999",
        "isDriver": True,
    }
    profile.update(overrides)
    return profile


class FakeAccountGateway(AccountGateway):
    """In-process stand-in for the account service."""

    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self._ids = itertools.count(1)

    async def signup(self, profile: dict[str, Any]) -> str:
        account_id = f"00000000-0000-4000-8000-{next(self._ids):012d}"
        self.accounts[account_id] = Account(
            account_id=account_id,
            name=profile.get("name", ""),
            email=profile.get("email", ""),
            is_passenger=bool(profile.get("isPassenger", False)),
            is_driver=bool(profile.get("isDriver", False)),
            car_plate=profile.get("carPlate"),
        )
        return account_id

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        return self.accounts.get(account_id)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory(
    tmp_path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables in a fresh database file, yield a session factory."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'rides.db'}", echo=False
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def ride_repository(session_factory) -> RideRepositoryDatabase:
    return RideRepositoryDatabase(session_factory)


@pytest.fixture
def position_repository(session_factory) -> PositionRepositoryDatabase:
    return PositionRepositoryDatabase(session_factory)


@pytest.fixture
def accounts() -> FakeAccountGateway:
    return FakeAccountGateway()


@pytest.fixture
def queue() -> AsyncMock:
    mock_queue = AsyncMock()
    mock_queue.publish = AsyncMock(return_value=None)
    return mock_queue


@pytest_asyncio.fixture
async def passenger_id(accounts: FakeAccountGateway) -> str:
    return await accounts.signup(passenger_profile())


@pytest_asyncio.fixture
async def driver_id(accounts: FakeAccountGateway) -> str:
    return await accounts.signup(driver_profile())
