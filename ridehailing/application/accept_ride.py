"""
AcceptRide: a driver takes a requested ride.

Concurrency safety
------------------
The in-memory ``Ride.accept`` check rejects rides that were already
accepted when we loaded them.  Two drivers can still load the same
``requested`` ride at the same time, so the write is conditional: the
repository only updates the row while its stored status is still
``requested``.  The loser of the race gets ``InvalidStatusError`` and
nothing is written for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ridehailing.application.ports import AccountGateway, RideRepository
from ridehailing.domain.enums import RideStatus
from ridehailing.domain.exceptions import (
    InvalidAccountError,
    InvalidStatusError,
    RideNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AcceptRideInput:
    ride_id: str
    driver_id: str


class AcceptRide:
    def __init__(
        self, account_gateway: AccountGateway, ride_repository: RideRepository
    ):
        self.account_gateway = account_gateway
        self.ride_repository = ride_repository

    async def execute(self, data: AcceptRideInput) -> None:
        account = await self.account_gateway.get_by_id(data.driver_id)
        if account is None or not account.is_driver:
            raise InvalidAccountError("Account must be a driver")

        ride = await self.ride_repository.get_by_id(data.ride_id)
        if ride is None:
            raise RideNotFoundError("Ride not found")

        try:
            ride.accept(data.driver_id)
            await self.ride_repository.update(
                ride, expected_status=RideStatus.REQUESTED
            )
        except InvalidStatusError:
            logger.warning(
                "Driver %s could not accept ride %s", data.driver_id, data.ride_id
            )
            raise
        logger.info("Ride %s accepted by %s", ride.ride_id, ride.driver_id)
