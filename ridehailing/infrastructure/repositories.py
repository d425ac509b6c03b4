"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``async_sessionmaker`` and opens one short
session per call.  Status changes use a conditional ``UPDATE`` so that two
concurrent writers cannot both move a ride out of the same status:

    UPDATE rides SET status = :new, driver_id = :driver
     WHERE ride_id = :id AND status = :expected

Zero affected rows means somebody else changed the ride first.

Inserts are guarded the same way: a partial unique index allows one active
ride per passenger, and a position is only stored while its ride, read
``FOR SHARE`` in the same transaction, is in progress.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .models import ACTIVE_PASSENGER_INDEX, PositionModel, RideModel
from ridehailing.application.ports import PositionRepository, RideRepository
from ridehailing.domain.entities import Location, Position, Ride
from ridehailing.domain.enums import ACTIVE_STATUSES, RideStatus
from ridehailing.domain.exceptions import (
    ActiveRideExistsError,
    InvalidStatusError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


class _DatabaseRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(
        self, action: str, write: bool = False
    ) -> AsyncIterator[AsyncSession]:
        """Yield a session; commit on success when *write* is set."""
        try:
            if write:
                async with self.session_factory.begin() as session:
                    yield session
            else:
                async with self.session_factory() as session:
                    yield session
        except SQLAlchemyError as exc:
            logger.exception("Database error while trying to %s", action)
            raise PersistenceError(f"Could not {action}") from exc


# ── Rides ─────────────────────────────────────────────────────────────


def _ride_to_model(ride: Ride) -> RideModel:
    return RideModel(
        ride_id=ride.ride_id,
        passenger_id=ride.passenger_id,
        driver_id=ride.driver_id,
        status=ride.status,
        from_lat=ride.from_lat,
        from_long=ride.from_long,
        to_lat=ride.to_lat,
        to_long=ride.to_long,
        distance=ride.distance,
        fare=ride.fare,
        date=ride.date,
    )


def _model_to_ride(row: RideModel) -> Ride:
    return Ride(
        ride_id=row.ride_id,
        passenger_id=row.passenger_id,
        driver_id=row.driver_id,
        status=RideStatus(row.status),
        origin=Location(row.from_lat, row.from_long),
        destination=Location(row.to_lat, row.to_long),
        distance=row.distance,
        fare=row.fare,
        date=row.date,
    )


def _violates_active_passenger_index(exc: IntegrityError) -> bool:
    # PostgreSQL names the index, SQLite names the column
    message = str(exc.orig)
    return ACTIVE_PASSENGER_INDEX in message or "rides.passenger_id" in message


class RideRepositoryDatabase(_DatabaseRepository, RideRepository):
    async def save(self, ride: Ride) -> None:
        async with self._session("save ride", write=True) as session:
            session.add(_ride_to_model(ride))
            try:
                await session.flush()
            except IntegrityError as exc:
                if not _violates_active_passenger_index(exc):
                    raise
                raise ActiveRideExistsError(
                    "Passenger already has an active ride"
                ) from exc

    async def get_by_id(self, ride_id: str) -> Optional[Ride]:
        async with self._session("load ride") as session:
            row = await session.get(RideModel, ride_id)
            return _model_to_ride(row) if row else None

    async def update(self, ride: Ride, expected_status: RideStatus) -> None:
        async with self._session("update ride", write=True) as session:
            result = await session.execute(
                update(RideModel)
                .where(
                    RideModel.ride_id == ride.ride_id,
                    RideModel.status == expected_status,
                )
                .values(status=ride.status, driver_id=ride.driver_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                logger.info(
                    "Conditional update lost for ride %s (expected %s)",
                    ride.ride_id,
                    expected_status.value,
                )
                raise InvalidStatusError()

    async def has_active_ride_by_passenger_id(self, passenger_id: str) -> bool:
        async with self._session("count active rides") as session:
            result = await session.execute(
                select(func.count())
                .select_from(RideModel)
                .where(
                    RideModel.passenger_id == passenger_id,
                    RideModel.status.in_(list(ACTIVE_STATUSES)),
                )
            )
            return (result.scalar() or 0) > 0


# ── Positions ─────────────────────────────────────────────────────────


class PositionRepositoryDatabase(_DatabaseRepository, PositionRepository):
    async def save(self, position: Position) -> None:
        async with self._session("save position", write=True) as session:
            # FOR SHARE: a concurrent finish waits for this insert, or we
            # wait for it and then see the ride completed
            result = await session.execute(
                select(RideModel.status)
                .where(RideModel.ride_id == position.ride_id)
                .with_for_update(read=True)
            )
            status = result.scalar_one_or_none()
            if status is None or RideStatus(status) != RideStatus.IN_PROGRESS:
                raise InvalidStatusError()
            session.add(
                PositionModel(
                    position_id=position.position_id,
                    ride_id=position.ride_id,
                    lat=position.location.latitude,
                    long=position.location.longitude,
                    date=position.date,
                )
            )

    async def list_by_ride_id(self, ride_id: str) -> list[Position]:
        async with self._session("load positions") as session:
            result = await session.execute(
                select(PositionModel)
                .where(PositionModel.ride_id == ride_id)
                .order_by(PositionModel.date)
            )
            return [
                Position(
                    position_id=row.position_id,
                    ride_id=row.ride_id,
                    location=Location(row.lat, row.long),
                    date=row.date,
                )
                for row in result.scalars().all()
            ]
