"""
Concurrency safety tests.

Demonstrates:
1. The in-memory ``Ride.accept`` guard alone is not enough: two copies of
   the same ``requested`` ride both accept happily.  Only the conditional
   write in the repository stops the second one.
2. Two ``AcceptRide`` calls racing for one ride: exactly one wins.
3. A lost race leaves the stored ride exactly as the winner wrote it.
4. Two requests from one passenger: the store keeps only one active ride.
5. A position cannot be stored once the ride has left ``in_progress``.
"""

from __future__ import annotations

import asyncio

import pytest

from ridehailing.application.accept_ride import AcceptRide, AcceptRideInput
from ridehailing.application.get_ride import GetRide
from ridehailing.application.request_ride import RequestRide, RequestRideInput
from ridehailing.domain.entities import Position, Ride
from ridehailing.domain.enums import RideStatus
from ridehailing.domain.exceptions import ActiveRideExistsError, InvalidStatusError
from tests.conftest import FROM_LAT, FROM_LONG, TO_LAT, TO_LONG, driver_profile


class TestConditionalUpdate:
    @pytest.mark.asyncio
    async def test_stale_copy_cannot_overwrite_accepted_ride(self, ride_repository):
        ride = Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        await ride_repository.save(ride)

        first = await ride_repository.get_by_id(ride.ride_id)
        second = await ride_repository.get_by_id(ride.ride_id)
        first.accept("driver-a")
        second.accept("driver-b")  # stale read: passes the in-memory check

        await ride_repository.update(first, expected_status=RideStatus.REQUESTED)
        with pytest.raises(InvalidStatusError):
            await ride_repository.update(second, expected_status=RideStatus.REQUESTED)

        stored = await ride_repository.get_by_id(ride.ride_id)
        assert stored.status == RideStatus.ACCEPTED
        assert stored.driver_id == "driver-a"

    @pytest.mark.asyncio
    async def test_update_of_unsaved_ride_is_rejected(self, ride_repository):
        ride = Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        ride.accept("driver-a")
        with pytest.raises(InvalidStatusError):
            await ride_repository.update(ride, expected_status=RideStatus.REQUESTED)
        assert await ride_repository.get_by_id(ride.ride_id) is None


class TestConcurrentAccept:
    @pytest.mark.asyncio
    async def test_exactly_one_driver_wins(
        self, accounts, ride_repository, passenger_id
    ):
        drivers = [
            await accounts.signup(driver_profile(email=f"driver{i}@example.com"))
            for i in range(2)
        ]
        ride_id = await RequestRide(accounts, ride_repository).execute(
            RequestRideInput(passenger_id, FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        )
        accept_ride = AcceptRide(accounts, ride_repository)

        results = await asyncio.gather(
            *(
                accept_ride.execute(AcceptRideInput(ride_id, driver))
                for driver in drivers
            ),
            return_exceptions=True,
        )

        winners = [d for d, r in zip(drivers, results) if r is None]
        losers = [r for r in results if isinstance(r, InvalidStatusError)]
        assert len(winners) == 1
        assert len(losers) == 1

        output = await GetRide(ride_repository).execute(ride_id)
        assert output.status == "accepted"
        assert output.driver_id == winners[0]

    @pytest.mark.asyncio
    async def test_many_drivers_racing(self, accounts, ride_repository, passenger_id):
        drivers = [
            await accounts.signup(driver_profile(email=f"driver{i}@example.com"))
            for i in range(5)
        ]
        ride_id = await RequestRide(accounts, ride_repository).execute(
            RequestRideInput(passenger_id, FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        )
        accept_ride = AcceptRide(accounts, ride_repository)

        results = await asyncio.gather(
            *(
                accept_ride.execute(AcceptRideInput(ride_id, driver))
                for driver in drivers
            ),
            return_exceptions=True,
        )

        assert sum(r is None for r in results) == 1
        assert all(
            isinstance(r, InvalidStatusError) for r in results if r is not None
        )


class TestOneActiveRidePerPassenger:
    @pytest.mark.asyncio
    async def test_store_rejects_second_active_ride(self, ride_repository):
        await ride_repository.save(
            Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        )
        # skips the use case's read-side check, as a racing request would
        with pytest.raises(ActiveRideExistsError):
            await ride_repository.save(
                Ride.create("passenger-1", TO_LAT, TO_LONG, FROM_LAT, FROM_LONG)
            )
        assert await ride_repository.has_active_ride_by_passenger_id("passenger-1")

    @pytest.mark.asyncio
    async def test_finished_rides_do_not_count(self, ride_repository):
        old = Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        await ride_repository.save(old)
        old.cancel()
        await ride_repository.update(old, expected_status=RideStatus.REQUESTED)

        new = Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        await ride_repository.save(new)
        assert (await ride_repository.get_by_id(new.ride_id)).status == RideStatus.REQUESTED

    @pytest.mark.asyncio
    async def test_concurrent_requests_create_one_ride(
        self, accounts, ride_repository, passenger_id
    ):
        request_ride = RequestRide(accounts, ride_repository)
        data = RequestRideInput(passenger_id, FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)

        results = await asyncio.gather(
            request_ride.execute(data),
            request_ride.execute(data),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, str)]
        rejected = [r for r in results if isinstance(r, ActiveRideExistsError)]
        assert len(created) == 1
        assert len(rejected) == 1
        assert (await GetRide(ride_repository).execute(created[0])).status == "requested"


class TestPositionGuard:
    @pytest.mark.asyncio
    async def test_position_after_finish_is_rejected(
        self, ride_repository, position_repository
    ):
        ride = Ride.create("passenger-1", FROM_LAT, FROM_LONG, TO_LAT, TO_LONG)
        await ride_repository.save(ride)
        ride.accept("driver-a")
        await ride_repository.update(ride, expected_status=RideStatus.REQUESTED)
        ride.start()
        await ride_repository.update(ride, expected_status=RideStatus.ACCEPTED)

        await position_repository.save(Position.create(ride.ride_id, FROM_LAT, FROM_LONG))
        ride.finish()
        await ride_repository.update(ride, expected_status=RideStatus.IN_PROGRESS)

        # a tracking call that checked the status before the finish committed
        with pytest.raises(InvalidStatusError):
            await position_repository.save(
                Position.create(ride.ride_id, TO_LAT, TO_LONG)
            )
        assert len(await position_repository.list_by_ride_id(ride.ride_id)) == 1

    @pytest.mark.asyncio
    async def test_position_for_unknown_ride_is_rejected(self, position_repository):
        with pytest.raises(InvalidStatusError):
            await position_repository.save(Position.create("missing", 1.0, 1.0))
