"""RequestRide: a passenger asks for a ride between two points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ridehailing.application.ports import AccountGateway, RideRepository
from ridehailing.domain.entities import Ride
from ridehailing.domain.exceptions import (
    ActiveRideExistsError,
    InvalidAccountError,
)
from ridehailing.domain.pricing import PricingEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestRideInput:
    passenger_id: str
    from_lat: float
    from_long: float
    to_lat: float
    to_long: float


class RequestRide:
    def __init__(
        self,
        account_gateway: AccountGateway,
        ride_repository: RideRepository,
        pricing: Optional[PricingEngine] = None,
    ):
        self.account_gateway = account_gateway
        self.ride_repository = ride_repository
        self.pricing = pricing or PricingEngine()

    async def execute(self, data: RequestRideInput) -> str:
        """Create and persist a ``requested`` ride.  Returns its id."""
        account = await self.account_gateway.get_by_id(data.passenger_id)
        if account is None or not account.is_passenger:
            raise InvalidAccountError("Account must be a passenger")
        if await self.ride_repository.has_active_ride_by_passenger_id(
            data.passenger_id
        ):
            raise ActiveRideExistsError("Passenger already has an active ride")

        ride = Ride.create(
            data.passenger_id,
            data.from_lat,
            data.from_long,
            data.to_lat,
            data.to_long,
            pricing=self.pricing,
        )
        await self.ride_repository.save(ride)
        logger.info(
            "Ride %s requested by %s (%.2f km, fare %.2f)",
            ride.ride_id, ride.passenger_id, ride.distance, ride.fare,
        )
        return ride.ride_id
