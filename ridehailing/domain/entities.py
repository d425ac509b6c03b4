"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Ride``: enforces valid lifecycle transitions
  (REQUESTED -> ACCEPTED -> IN_PROGRESS -> COMPLETED | CANCELLED).
- ``Location`` validates coordinate ranges on construction, so a ``Ride``
  or ``Position`` can never hold an out-of-range point.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .distance import haversine_km
from .enums import DRIVER_ASSIGNED_STATUSES, RideStatus, can_transition
from .exceptions import (
    InvalidCoordinatesError,
    InvalidRouteError,
    InvalidStatusError,
)
from .pricing import PricingEngine


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# Below this (about 1 mm) two coordinates are the same point: (0, 180) vs
# (0, -180), or two longitudes at a pole, come out as float noise.
MIN_ROUTE_KM = 1e-6


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    def __post_init__(self):
        # written so that NaN fails both checks
        if not -90.0 <= self.latitude <= 90.0:
            raise InvalidCoordinatesError(f"Invalid latitude: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise InvalidCoordinatesError(
                f"Invalid longitude: {self.longitude}"
            )

    def distance_to(self, other: Location) -> float:
        return haversine_km(
            self.latitude, self.longitude, other.latitude, other.longitude
        )


@dataclass(frozen=True)
class Position:
    """A tracked point of a ride in progress."""

    ride_id: str
    location: Location
    position_id: str = field(default_factory=_new_id)
    date: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(cls, ride_id: str, lat: float, long: float) -> Position:
        return cls(ride_id=ride_id, location=Location(lat, long))


# ── Aggregate ─────────────────────────────────────────────────────────


@dataclass
class Ride:
    ride_id: str
    passenger_id: str
    origin: Location
    destination: Location
    distance: float
    fare: float
    status: RideStatus = RideStatus.REQUESTED
    driver_id: Optional[str] = None
    date: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        self.status = RideStatus(self.status)
        if self.status == RideStatus.REQUESTED and self.driver_id is not None:
            raise InvalidStatusError("A requested ride cannot have a driver")
        if self.status in DRIVER_ASSIGNED_STATUSES and self.driver_id is None:
            raise InvalidStatusError(f"A {self.status.value} ride needs a driver")

    @classmethod
    def create(
        cls,
        passenger_id: str,
        from_lat: float,
        from_long: float,
        to_lat: float,
        to_long: float,
        pricing: Optional[PricingEngine] = None,
    ) -> Ride:
        origin = Location(from_lat, from_long)
        destination = Location(to_lat, to_long)
        distance = origin.distance_to(destination)
        if distance < MIN_ROUTE_KM:
            raise InvalidRouteError("Origin and destination must differ")
        pricing = pricing or PricingEngine()
        return cls(
            ride_id=_new_id(),
            passenger_id=passenger_id,
            origin=origin,
            destination=destination,
            distance=distance,
            fare=pricing.calculate_fare(distance),
        )

    # flat coordinate accessors
    @property
    def from_lat(self) -> float:
        return self.origin.latitude

    @property
    def from_long(self) -> float:
        return self.origin.longitude

    @property
    def to_lat(self) -> float:
        return self.destination.latitude

    @property
    def to_long(self) -> float:
        return self.destination.longitude

    def transition_to(self, new_status: RideStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        if not can_transition(self.status, new_status):
            raise InvalidStatusError()
        self.status = new_status

    def accept(self, driver_id: str) -> None:
        self.transition_to(RideStatus.ACCEPTED)
        self.driver_id = driver_id

    def start(self) -> None:
        self.transition_to(RideStatus.IN_PROGRESS)

    def finish(self) -> None:
        self.transition_to(RideStatus.COMPLETED)

    def cancel(self) -> None:
        self.transition_to(RideStatus.CANCELLED)
