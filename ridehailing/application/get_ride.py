"""GetRide: read-only projection of a ride."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ridehailing.application.ports import RideRepository
from ridehailing.domain.entities import Ride
from ridehailing.domain.exceptions import RideNotFoundError


@dataclass(frozen=True)
class RideOutput:
    ride_id: str
    passenger_id: str
    driver_id: Optional[str]
    status: str
    fare: float
    distance: float
    from_lat: float
    from_long: float
    to_lat: float
    to_long: float
    date: datetime

    @classmethod
    def from_ride(cls, ride: Ride) -> RideOutput:
        return cls(
            ride_id=ride.ride_id,
            passenger_id=ride.passenger_id,
            driver_id=ride.driver_id,
            status=ride.status.value,
            fare=ride.fare,
            distance=ride.distance,
            from_lat=ride.from_lat,
            from_long=ride.from_long,
            to_lat=ride.to_lat,
            to_long=ride.to_long,
            date=ride.date,
        )


class GetRide:
    def __init__(self, ride_repository: RideRepository):
        self.ride_repository = ride_repository

    async def execute(self, ride_id: str) -> RideOutput:
        ride = await self.ride_repository.get_by_id(ride_id)
        if ride is None:
            raise RideNotFoundError("Ride not found")
        return RideOutput.from_ride(ride)
