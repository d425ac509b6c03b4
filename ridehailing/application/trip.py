"""
Trip progress use cases: start, live tracking, finish and cancellation.

Every status change goes through the same conditional write as
``AcceptRide``, with the status read at load time as the expected one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ridehailing.application.ports import PositionRepository, Queue, RideRepository
from ridehailing.domain.distance import path_length_km
from ridehailing.domain.entities import Position, Ride
from ridehailing.domain.enums import RideStatus
from ridehailing.domain.exceptions import InvalidStatusError, RideNotFoundError

logger = logging.getLogger(__name__)


async def _load(ride_repository: RideRepository, ride_id: str) -> Ride:
    ride = await ride_repository.get_by_id(ride_id)
    if ride is None:
        raise RideNotFoundError("Ride not found")
    return ride


class StartRide:
    def __init__(self, ride_repository: RideRepository):
        self.ride_repository = ride_repository

    async def execute(self, ride_id: str) -> None:
        ride = await _load(self.ride_repository, ride_id)
        expected = ride.status
        ride.start()
        await self.ride_repository.update(ride, expected_status=expected)
        logger.info("Ride %s started", ride_id)


@dataclass(frozen=True)
class UpdatePositionInput:
    ride_id: str
    lat: float
    long: float


class UpdatePosition:
    def __init__(
        self,
        ride_repository: RideRepository,
        position_repository: PositionRepository,
    ):
        self.ride_repository = ride_repository
        self.position_repository = position_repository

    async def execute(self, data: UpdatePositionInput) -> str:
        ride = await _load(self.ride_repository, data.ride_id)
        if ride.status != RideStatus.IN_PROGRESS:
            raise InvalidStatusError()
        position = Position.create(data.ride_id, data.lat, data.long)
        await self.position_repository.save(position)
        return position.position_id


@dataclass(frozen=True)
class FinishRideOutput:
    ride_id: str
    fare: float
    distance: float


class FinishRide:
    """
    Complete a ride and announce it on the ``ride_completed`` queue.

    The status is committed before the event goes out.  If publishing
    fails the ride stays completed and the caller sees ``GatewayError``;
    calling ``execute`` again on the completed ride publishes the event
    again instead of raising ``InvalidStatusError``, so delivery is
    at-least-once.
    """

    def __init__(
        self,
        ride_repository: RideRepository,
        position_repository: PositionRepository,
        queue: Queue,
    ):
        self.ride_repository = ride_repository
        self.position_repository = position_repository
        self.queue = queue

    async def execute(self, ride_id: str) -> FinishRideOutput:
        ride = await _load(self.ride_repository, ride_id)
        if ride.status == RideStatus.COMPLETED:
            logger.info("Ride %s already completed, publishing again", ride_id)
        else:
            expected = ride.status
            ride.finish()
            await self.ride_repository.update(ride, expected_status=expected)

        positions = await self.position_repository.list_by_ride_id(ride_id)
        travelled = path_length_km(
            [(p.location.latitude, p.location.longitude) for p in positions]
        )
        await self.queue.publish(
            "ride_completed",
            {
                "ride_id": ride.ride_id,
                "passenger_id": ride.passenger_id,
                "driver_id": ride.driver_id,
                "fare": ride.fare,
                "distance": travelled,
            },
        )
        logger.info("Ride %s completed (%.2f km tracked)", ride_id, travelled)
        return FinishRideOutput(ride_id=ride_id, fare=ride.fare, distance=travelled)


class CancelRide:
    def __init__(self, ride_repository: RideRepository):
        self.ride_repository = ride_repository

    async def execute(self, ride_id: str) -> None:
        ride = await _load(self.ride_repository, ride_id)
        expected = ride.status
        ride.cancel()
        await self.ride_repository.update(ride, expected_status=expected)
        logger.info("Ride %s cancelled (was %s)", ride_id, expected.value)
