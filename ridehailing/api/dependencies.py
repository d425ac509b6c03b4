"""
FastAPI dependency injection helpers.

Each request gets its own collaborators; the account gateway's HTTP
connection pool is closed when the request ends.
"""

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ridehailing.application.ports import (
    AccountGateway,
    PositionRepository,
    Queue,
    RideRepository,
)
from ridehailing.config import settings
from ridehailing.domain.pricing import PricingEngine
from ridehailing.infrastructure.account_gateway import AccountGatewayHttp
from ridehailing.infrastructure.database import async_session_factory
from ridehailing.infrastructure.queue import RedisQueue, get_redis
from ridehailing.infrastructure.repositories import (
    PositionRepositoryDatabase,
    RideRepositoryDatabase,
)


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


def get_ride_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> RideRepository:
    return RideRepositoryDatabase(session_factory)


def get_position_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> PositionRepository:
    return PositionRepositoryDatabase(session_factory)


async def get_account_gateway() -> AsyncIterator[AccountGateway]:
    gateway = AccountGatewayHttp()
    try:
        yield gateway
    finally:
        await gateway.aclose()


async def get_queue() -> Queue:
    return RedisQueue(await get_redis())


def get_pricing() -> PricingEngine:
    return PricingEngine(
        base_fare=settings.base_fare,
        rate_per_km=settings.rate_per_km,
        surge_multiplier=settings.surge_multiplier,
    )
